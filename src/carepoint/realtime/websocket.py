"""WebSocket endpoint — real-time notification delivery to the browser.

Learn: Each client connects to /ws?userId=<id>&token=<JWT>. The handler:
1. Validates the user id and authenticates the token (required outside
   development) — nothing touches the registry until both pass
2. Registers the socket with a fresh ReminderScheduler for the user
3. Sends connection_established
4. Reads client frames until disconnect (answers {"type": "ping"})
5. Unregisters, which stops that user's reminder

This is a long-lived connection — one per user session.
"""

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from carepoint.auth.jwt import TokenError, user_id_from_token
from carepoint.config import settings
from carepoint.events.notification import connection_established
from carepoint.realtime.registry import RegistryClosedError
from carepoint.realtime.scheduler import ReminderScheduler

logger = structlog.get_logger()
router = APIRouter()

CLOSE_UNAUTHORIZED = 4001
CLOSE_BAD_REQUEST = 4400
CLOSE_SERVICE_RESTART = 1012


class WebSocketChannel:
    """Adapts a Starlette WebSocket to the registry's Channel protocol."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)


def _parse_user_id(raw) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket):
    """WebSocket endpoint for a user's appointment notifications."""
    # ── Handshake validation ────────────────────────────────
    user_id = _parse_user_id(websocket.query_params.get("userId"))
    if user_id is None:
        await websocket.close(code=CLOSE_BAD_REQUEST, reason="Invalid user id")
        return

    token = websocket.query_params.get("token")
    if not token and settings.environment != "development":
        await websocket.close(code=CLOSE_UNAUTHORIZED, reason="Authentication required")
        return

    if token:
        try:
            token_user_id = user_id_from_token(token)
        except TokenError:
            await websocket.close(code=CLOSE_UNAUTHORIZED, reason="Invalid or expired token")
            return
        if token_user_id != user_id:
            await websocket.close(code=CLOSE_UNAUTHORIZED, reason="Token does not match user")
            return

    # ── Connection accepted ─────────────────────────────────
    await websocket.accept()

    state = websocket.app.state
    registry = state.registry
    dispatcher = state.dispatcher
    channel = WebSocketChannel(websocket)
    reminder = ReminderScheduler(
        user_id,
        fetch=state.appointments.get_user_appointments,
        dispatcher=dispatcher,
        interval=settings.reminder_interval_seconds,
        window_minutes=settings.reminder_window_minutes,
        dedupe=settings.reminder_dedupe,
    )
    log = logger.bind(user_id=user_id)

    try:
        await registry.register(user_id, channel, reminder)
    except RegistryClosedError:
        await websocket.close(code=CLOSE_SERVICE_RESTART, reason="Server shutting down")
        return
    log.info("ws.connected")

    try:
        await dispatcher.dispatch(user_id, connection_established())
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                await registry.reply(user_id, channel, json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        pass
    finally:
        await registry.unregister(user_id, channel)
        log.info("ws.disconnected")
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()
