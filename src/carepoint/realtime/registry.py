"""Connection registry — user id → live channel + owned reminder.

Learn: The registry is the only writer of the connection map. Each entry
bundles the channel with the ReminderScheduler started for it, so the
timer's lifetime is exactly the connection's lifetime:

  register   → store entry, start its reminder (stop any replaced one)
  unregister → remove entry, stop its reminder
  shutdown   → stop every reminder, refuse new registrations

Map mutations are serialized by one asyncio.Lock. Channel writes happen
outside it so a slow socket never holds up other users. A per-entry
write lock keeps one user's frames in the order they were sent, and
every write (lock wait included) is bounded by send_timeout so a client
that stops reading cannot stall the caller.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Protocol

import structlog

from carepoint.events.notification import NotificationEvent

logger = structlog.get_logger()


class Channel(Protocol):
    """An open, writable real-time connection to one client session."""

    @property
    def is_open(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...


class Reminder(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...

    async def stop(self) -> None: ...


class RegistryClosedError(Exception):
    """Raised when registering after shutdown()."""


@dataclass
class _Connection:
    channel: Channel
    reminder: Optional[Reminder] = None
    write_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class ConnectionRegistry:
    """Process-local registry of live notification channels."""

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._connections: dict[int, _Connection] = {}
        self._lock = asyncio.Lock()
        self._open = False

    # ─── Lifecycle ────────────────────────────────────────

    def init(self) -> None:
        """Start accepting registrations."""
        self._open = True
        logger.info("registry.started")

    async def shutdown(self) -> None:
        """Stop all reminders and drop every connection.

        Channels are not closed here — the server closes its sockets
        on shutdown.
        """
        async with self._lock:
            self._open = False
            entries = list(self._connections.values())
            self._connections.clear()
            for entry in entries:
                if entry.reminder is not None:
                    entry.reminder.cancel()

        for entry in entries:
            if entry.reminder is not None:
                await entry.reminder.stop()
        logger.info("registry.shutdown", dropped=len(entries))

    @property
    def is_open(self) -> bool:
        return self._open

    # ─── Mutations ────────────────────────────────────────

    async def register(
        self,
        user_id: int,
        channel: Channel,
        reminder: Optional[Reminder] = None,
    ) -> None:
        """Store the channel for a user and start its reminder.

        A previous channel for the same user is replaced. It is not
        closed (the client may still be reading from it), but its
        reminder is stopped so only one timer per user ever runs.
        """
        async with self._lock:
            if not self._open:
                raise RegistryClosedError("Connection registry is shut down")
            previous = self._connections.get(user_id)
            self._connections[user_id] = _Connection(channel=channel, reminder=reminder)
            if previous is not None and previous.reminder is not None:
                previous.reminder.cancel()
            if reminder is not None:
                reminder.start()

        if previous is not None:
            logger.info("registry.replaced", user_id=user_id)
            if previous.reminder is not None:
                await previous.reminder.stop()
        logger.info("registry.registered", user_id=user_id)

    async def unregister(self, user_id: int, channel: Optional[Channel] = None) -> bool:
        """Remove a user's entry and stop its reminder.

        If `channel` is given and the user has since reconnected on a
        different channel, nothing is removed. Returns True if an entry
        was removed.
        """
        async with self._lock:
            entry = self._connections.get(user_id)
            if entry is None:
                return False
            if channel is not None and entry.channel is not channel:
                return False
            del self._connections[user_id]
            if entry.reminder is not None:
                entry.reminder.cancel()

        if entry.reminder is not None:
            await entry.reminder.stop()
        logger.info("registry.unregistered", user_id=user_id)
        return True

    # ─── Delivery ─────────────────────────────────────────

    async def send(self, user_id: int, event: NotificationEvent) -> bool:
        """Best-effort write of one event to a user's channel.

        Returns False (and never raises) when the user has no open
        channel or the write fails. Dropped events are not queued.
        """
        entry = self._connections.get(user_id)
        if entry is None or not entry.channel.is_open:
            logger.debug("registry.dropped", user_id=user_id, event_type=event.type)
            return False

        return await self._write(user_id, entry, event.to_json(), event.type)

    async def reply(self, user_id: int, channel: Channel, data: str) -> bool:
        """Write a raw frame to `channel` through its entry's write lock.

        Used for protocol replies (pong). Nothing is sent if `channel`
        is no longer the user's current channel.
        """
        entry = self._connections.get(user_id)
        if entry is None or entry.channel is not channel or not channel.is_open:
            return False
        return await self._write(user_id, entry, data, "reply")

    async def _write(self, user_id: int, entry: _Connection, data: str, event_type: str) -> bool:
        try:
            await asyncio.wait_for(self._locked_send(entry, data), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "registry.send_failed",
                user_id=user_id,
                event_type=event_type,
                error="timed out",
                timeout=self.send_timeout,
            )
            return False
        except Exception as e:
            logger.warning(
                "registry.send_failed",
                user_id=user_id,
                event_type=event_type,
                error=str(e),
            )
            return False
        return True

    @staticmethod
    async def _locked_send(entry: _Connection, data: str) -> None:
        async with entry.write_lock:
            await entry.channel.send_text(data)

    # ─── Introspection ────────────────────────────────────

    def is_connected(self, user_id: int) -> bool:
        return user_id in self._connections

    def connected_users(self) -> list[int]:
        return sorted(self._connections)

    def reminder_for(self, user_id: int) -> Optional[Reminder]:
        entry = self._connections.get(user_id)
        return entry.reminder if entry else None

    def __len__(self) -> int:
        return len(self._connections)
