from hub.store import HubStore

__all__ = ["HubStore"]
