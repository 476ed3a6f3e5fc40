"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health, auth and the doctor
directory are open (no auth required).
"""

from fastapi import APIRouter, Depends

from carepoint.api.advice import router as advice_router
from carepoint.api.appointments import router as appointments_router
from carepoint.api.auth import router as auth_router
from carepoint.api.doctors import router as doctors_router
from carepoint.api.health import router as health_router
from carepoint.api.water import router as water_router
from carepoint.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(doctors_router, tags=["doctors"])

# Protected routes — require a valid JWT
api_router.include_router(appointments_router, tags=["appointments"], dependencies=_auth)
api_router.include_router(advice_router, tags=["health-assistant"], dependencies=_auth)
api_router.include_router(water_router, tags=["water-intake"], dependencies=_auth)
