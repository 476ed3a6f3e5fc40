"""Real-time notifications — WebSocket push to connected browsers.

Learn: Three pieces, leaf-first:
1. ConnectionRegistry — one live channel per user, plus the reminder
   timer that connection owns
2. ReminderScheduler — per-user periodic task that turns upcoming
   appointments into reminder events
3. EventDispatcher — the single entry point services use to push an
   event to a user

Delivery is best-effort and at-most-once: if the user has no open
channel the event is dropped. Reminders are not critical, and the
browser can always query the API to catch up.
"""
