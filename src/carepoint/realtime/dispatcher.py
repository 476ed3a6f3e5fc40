"""Event dispatcher — push one notification to one user.

Learn: Services never touch sockets. They call dispatch(), which hands
the event to the registry. There are no retries and no queue: if the
user is offline the event is gone. That is a deliberate choice for
non-critical notifications, not an oversight.
"""

from dataclasses import dataclass

import structlog

from carepoint.events.notification import NotificationEvent
from carepoint.realtime.registry import ConnectionRegistry

logger = structlog.get_logger()


@dataclass
class DispatchStats:
    """Runtime counters for monitoring."""
    delivered: int = 0
    dropped: int = 0


class EventDispatcher:
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self.stats = DispatchStats()

    async def dispatch(self, user_id: int, event: NotificationEvent) -> bool:
        """Attempt delivery. Returns True if the event reached a channel."""
        delivered = await self.registry.send(user_id, event)
        if delivered:
            self.stats.delivered += 1
        else:
            self.stats.dropped += 1
            logger.debug("dispatch.dropped", user_id=user_id, event_type=event.type)
        return delivered
