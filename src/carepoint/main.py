"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan owns the long-lived components:

  store → registry → dispatcher → appointment service → advisor

They are built at startup, hung on app.state for the routes and the
WebSocket handler, and torn down at shutdown (the registry stops every
reminder task it owns).
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carepoint import __version__
from carepoint.api import api_router
from carepoint.config import settings

logger = structlog.get_logger()


def init_state(app: FastAPI, *, advisor=None) -> None:
    """Build the long-lived components and attach them to app.state."""
    from carepoint.realtime.dispatcher import EventDispatcher
    from carepoint.realtime.registry import ConnectionRegistry
    from carepoint.services.appointment_service import AppointmentService
    from carepoint.services.llm_advisor import build_advisor
    from carepoint.store.memory import MemoryStore

    store = MemoryStore()
    registry = ConnectionRegistry(send_timeout=settings.notification_send_timeout_seconds)
    registry.init()
    dispatcher = EventDispatcher(registry)

    app.state.store = store
    app.state.registry = registry
    app.state.dispatcher = dispatcher
    app.state.appointments = AppointmentService(store, dispatcher)
    app.state.advisor = advisor or build_advisor(settings)


async def close_state(app: FastAPI) -> None:
    """Stop every reminder task and refuse new connections."""
    await app.state.registry.shutdown()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    logger.info(
        "carepoint.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    init_state(app)
    logger.info(
        "carepoint.ready",
        advisor=settings.advisor_backend,
        reminder_interval=settings.reminder_interval_seconds,
    )

    yield

    logger.info("carepoint.shutdown")
    await close_state(app)


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="CarePoint",
        description="Healthcare appointments with real-time reminders",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from carepoint.middleware.request_id import RequestIdMiddleware
    from carepoint.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    # WebSocket route — real-time notifications
    from carepoint.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: carepoint.main:app)
app = create_app()
