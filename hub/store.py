"""In-memory hub state store.

Owns the visitor id mapping, per-visitor hub state and registered profiles.
Nothing is persisted; a fresh instance starts empty. Stored records are never
mutated in place, every change swaps in a new dict under the store lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from hub.avatars import avatar_for_name
from hub.errors import MissingFieldError
from hub.merge import deep_merge
from hub.tasks import default_tasks


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a trailing Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _name_fields(name: str) -> Dict[str, Any]:
    return {"displayName": name, "profile": name.lower()}


class HubStore:
    def __init__(
        self,
        voice_user_prefix: str = "amzn1.",
        visitor_id_prefix: str = "alexa-user-",
        clock: Optional[Clock] = None,
    ) -> None:
        self.voice_user_prefix = voice_user_prefix
        self.visitor_id_prefix = visitor_id_prefix
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self._states: Dict[str, Dict[str, Any]] = {}
        self._profiles: Dict[str, Dict[str, Any]] = {}
        self._voice_users: Dict[str, str] = {}
        self._counter = 0

    def timestamp(self) -> str:
        return format_timestamp(self._clock())

    def is_voice_user(self, user_id: str) -> bool:
        return user_id.startswith(self.voice_user_prefix)

    # -- identifiers ---------------------------------------------------------

    def resolve_visitor_id(self, user_id: Optional[str]) -> str:
        """Map an external user id to the short visitor id used as a key.

        Web and demo clients pick their own ids, which are used verbatim.
        Voice-assistant ids get the next sequential visitor id on first sight
        and keep it for the life of the store.
        """
        if not user_id:
            raise MissingFieldError("userId is required")
        if not self.is_voice_user(user_id):
            return user_id
        with self._lock:
            visitor_id = self._voice_users.get(user_id)
            if visitor_id is None:
                self._counter += 1
                visitor_id = f"{self.visitor_id_prefix}{self._counter}"
                self._voice_users[user_id] = visitor_id
                logger.info("Mapped voice user to visitor: %s", visitor_id)
            return visitor_id

    # -- state ---------------------------------------------------------------

    def default_state(self, visitor_id: str) -> Dict[str, Any]:
        return {
            "visitorId": visitor_id,
            "displayName": None,
            "activeTile": "home",
            "lastAction": "NONE",
            "profile": "default",
            "routineResult": {
                "lights": None,
                "thermostat": None,
                "reminder": None,
            },
            "groceryList": [],
            "pendingItem": None,
            "privacy": {
                "microphoneEnabled": True,
                "allowVoiceHistory": True,
                "lastHistoryDelete": None,
            },
            "tasks": default_tasks(),
            "customTasks": [],
            "debugInfo": {
                "lastUpdated": self.timestamp(),
                "lastAlexaRequest": None,
                "isAlexaUser": visitor_id.startswith(self.visitor_id_prefix),
            },
        }

    def get_state(self, visitor_id: str) -> Dict[str, Any]:
        with self._lock:
            state = self._states.get(visitor_id)
            if state is None:
                state = self.default_state(visitor_id)
                self._states[visitor_id] = state
                logger.info("Created new hub state for visitor: %s", visitor_id)
            return state

    def update_state(
        self,
        user_id: Optional[str],
        partial: Optional[Dict[str, Any]] = None,
        display_name: Optional[str] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        visitor_id = self.resolve_visitor_id(user_id)
        voice = self.is_voice_user(user_id)
        with self._lock:
            # Build everything first; commit both records at the end.
            updated = deep_merge(self.get_state(visitor_id), partial or {})
            profile = self._profiles.get(visitor_id)
            if display_name:
                profile = self._build_profile(visitor_id, display_name)
                updated = deep_merge(updated, _name_fields(display_name))
            elif profile is not None:
                profile = dict(profile, lastSeen=self.timestamp())

            debug = {
                "lastUpdated": self.timestamp(),
                "isAlexaUser": voice,
                "originalAlexaId": f"{user_id[:30]}..." if voice else None,
            }
            updated = deep_merge(updated, {"visitorId": visitor_id, "debugInfo": debug})

            self._states[visitor_id] = updated
            if profile is not None:
                self._profiles[visitor_id] = profile

        logger.info("Updated state for visitor: %s", visitor_id)
        logger.info(
            "Active tile: %s, Last action: %s",
            updated.get("activeTile"),
            updated.get("lastAction"),
        )
        return visitor_id, updated

    def reset_state(self, user_id: Optional[str]) -> Dict[str, Any]:
        visitor_id = self.resolve_visitor_id(user_id)
        fresh = self.default_state(visitor_id)
        with self._lock:
            self._states[visitor_id] = fresh
        logger.info("Reset state for visitor: %s", visitor_id)
        return fresh

    # -- profiles ------------------------------------------------------------

    def register_profile(
        self, user_id: Optional[str], name: Optional[str]
    ) -> Tuple[str, Dict[str, Any]]:
        if not user_id or not name:
            raise MissingFieldError("userId and name are required")
        visitor_id = self.resolve_visitor_id(user_id)
        with self._lock:
            profile = self._build_profile(visitor_id, name)
            state = deep_merge(self.get_state(visitor_id), _name_fields(name))
            self._states[visitor_id] = state
            self._profiles[visitor_id] = profile
        logger.info("Registered profile: %s for visitor: %s", name, visitor_id)
        return visitor_id, profile

    def _build_profile(self, visitor_id: str, name: str) -> Dict[str, Any]:
        now = self.timestamp()
        previous = self._profiles.get(visitor_id)
        return {
            "name": name,
            "avatar": avatar_for_name(name),
            "createdAt": previous["createdAt"] if previous else now,
            "lastSeen": now,
        }

    def get_profile(self, visitor_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._profiles.get(visitor_id)

    def list_profiles(self) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [
                {"visitorId": visitor_id, **profile, "state": self._states.get(visitor_id)}
                for visitor_id, profile in self._profiles.items()
            ]
        rows.sort(key=lambda row: _parse_timestamp(row["lastSeen"]), reverse=True)
        return rows

    # -- introspection -------------------------------------------------------

    def users_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            visitor_ids = list(self._states)
            return {
                "count": len(visitor_ids),
                "visitorIds": visitor_ids,
                "profiles": dict(self._profiles),
                "alexaMappings": dict(self._voice_users),
            }

    @property
    def active_visitors(self) -> int:
        return len(self._states)

    @property
    def registered_profiles(self) -> int:
        return len(self._profiles)
