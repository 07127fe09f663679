from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, Field
import uvicorn

from config.settings import get_settings
from hub.errors import MissingFieldError
from hub.store import HubStore
from hub.tasks import default_tasks


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("hub")

ENDPOINTS = (
    ("GET ", "/health", "Health check"),
    ("GET ", "/hub/state/{userId}", "Get hub state for user"),
    ("POST", "/hub/state", "Update hub state"),
    ("GET ", "/hub/profiles", "List registered profiles"),
    ("POST", "/hub/profile/register", "Register a profile"),
    ("GET ", "/hub/tasks", "Default task catalog"),
    ("POST", "/hub/reset", "Reset user's hub state"),
    ("GET ", "/hub/users", "List all users (debug)"),
)


class UpdateStateRequest(BaseModel):
    userId: Optional[str] = Field(None, description="Alexa userId or a simple visitor id")
    state: Optional[Dict[str, Any]] = Field(None, description="Partial state to merge")
    displayName: Optional[str] = Field(None, description="Name to show in the UI, e.g. 'Mom'")


class RegisterProfileRequest(BaseModel):
    userId: Optional[str] = None
    name: Optional[str] = None


class ResetRequest(BaseModel):
    userId: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def _internal_error() -> JSONResponse:
    return _error(500, "Internal server error")


def get_store(request: Request) -> HubStore:
    return request.app.state.store


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("  %s", settings.service_name)
    logger.info("  Listening on http://%s:%s", settings.host, settings.port)
    for method, path, label in ENDPOINTS:
        logger.info("    %s %-24s - %s", method, path, label)
    logger.info("=" * 60)
    yield


def create_app(store: Optional[HubStore] = None) -> FastAPI:
    app = FastAPI(title=settings.service_name, version="1.0.0", lifespan=lifespan)
    app.state.store = store or HubStore(
        voice_user_prefix=settings.voice_user_prefix,
        visitor_id_prefix=settings.visitor_id_prefix,
    )

    # CORS: allow the local frontend during development
    if settings.cors_open:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, details)
        return _error(400, f"Invalid request body: {details}")

    @app.post("/hub/state")
    def update_state(
        req: UpdateStateRequest, store: HubStore = Depends(get_store)
    ) -> Any:
        try:
            visitor_id, state = store.update_state(req.userId, req.state, req.displayName)
            return {"ok": True, "state": state, "visitorId": visitor_id}
        except MissingFieldError as e:
            logger.warning("Update rejected: %s", e.message)
            return _error(400, e.message)
        except Exception as e:
            logger.exception("Error updating state: %s", e)
            return _internal_error()

    @app.get("/hub/state/{user_id}")
    def fetch_state(user_id: str, store: HubStore = Depends(get_store)) -> Any:
        try:
            visitor_id = store.resolve_visitor_id(user_id)
            state = store.get_state(visitor_id)
            logger.info("Fetched state for visitor: %s", visitor_id)
            return state
        except MissingFieldError as e:
            logger.warning("Fetch rejected: %s", e.message)
            return _error(400, e.message)
        except Exception as e:
            logger.exception("Error fetching state: %s", e)
            return _internal_error()

    @app.get("/hub/profiles")
    def list_profiles(store: HubStore = Depends(get_store)) -> Any:
        try:
            profiles = store.list_profiles()
            return {"count": len(profiles), "profiles": profiles}
        except Exception as e:
            logger.exception("Error fetching profiles: %s", e)
            return _internal_error()

    @app.post("/hub/profile/register")
    def register_profile(
        req: RegisterProfileRequest, store: HubStore = Depends(get_store)
    ) -> Any:
        try:
            visitor_id, profile = store.register_profile(req.userId, req.name)
            return {"ok": True, "profile": profile, "visitorId": visitor_id}
        except MissingFieldError as e:
            logger.warning("Registration rejected: %s", e.message)
            return _error(400, e.message)
        except Exception as e:
            logger.exception("Error registering profile: %s", e)
            return _internal_error()

    @app.get("/hub/tasks")
    def tasks() -> Dict[str, Any]:
        return {"tasks": default_tasks()}

    @app.post("/hub/reset")
    def reset(req: ResetRequest, store: HubStore = Depends(get_store)) -> Any:
        try:
            state = store.reset_state(req.userId)
            return {"ok": True, "state": state}
        except MissingFieldError as e:
            logger.warning("Reset rejected: %s", e.message)
            return _error(400, e.message)
        except Exception as e:
            logger.exception("Error resetting state: %s", e)
            return _internal_error()

    @app.get("/hub/users")
    def users(store: HubStore = Depends(get_store)) -> Dict[str, Any]:
        return store.users_snapshot()

    @app.get("/health")
    def health(store: HubStore = Depends(get_store)) -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": store.timestamp(),
            "service": settings.service_name,
            "activeVisitors": store.active_visitors,
            "registeredProfiles": store.registered_profiles,
        }

    return app


app = create_app()


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
