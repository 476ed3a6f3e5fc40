"""Request-scoped access to the application's long-lived components.

Learn: The store, connection registry, dispatcher, appointment service
and advisor are built once in the lifespan (see main.py) and hung on
app.state. Routes reach them through these dependencies instead of
module globals, so tests can build an app around their own instances.
"""

from fastapi import Request

from carepoint.realtime.dispatcher import EventDispatcher
from carepoint.realtime.registry import ConnectionRegistry
from carepoint.services.appointment_service import AppointmentService
from carepoint.store.memory import MemoryStore


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry


def get_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


def get_appointment_service(request: Request) -> AppointmentService:
    return request.app.state.appointments


def get_advisor(request: Request):
    return request.app.state.advisor
