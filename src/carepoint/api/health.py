"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and
reports the state of the notification subsystem.
"""

from fastapi import APIRouter, Depends

from carepoint import __version__
from carepoint.api.deps import get_dispatcher, get_registry
from carepoint.realtime.dispatcher import EventDispatcher
from carepoint.realtime.registry import ConnectionRegistry

router = APIRouter()


@router.get("/health")
async def health_check(
    registry: ConnectionRegistry = Depends(get_registry),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    """Check server health and notification state."""
    return {
        "status": "healthy" if registry.is_open else "degraded",
        "server": "ok",
        "version": __version__,
        "notifications": {
            "connections": len(registry),
            "delivered": dispatcher.stats.delivered,
            "dropped": dispatcher.stats.dropped,
        },
    }
