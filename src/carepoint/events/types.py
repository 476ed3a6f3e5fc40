"""Notification event type constants.

Learn: Centralizing event types as constants prevents typos and makes
it easy to discover every message the browser can receive.
"""

CONNECTION_ESTABLISHED = "connection_established"
APPOINTMENT_CREATED = "appointment_created"
APPOINTMENT_REMINDER = "appointment_reminder"

ALL_EVENT_TYPES = (
    CONNECTION_ESTABLISHED,
    APPOINTMENT_CREATED,
    APPOINTMENT_REMINDER,
)
