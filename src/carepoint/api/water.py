"""Water intake API — log intake, history, progress advice."""

from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from carepoint.api.deps import get_store
from carepoint.auth.dependencies import CurrentUser, get_current_user
from carepoint.config import settings
from carepoint.schemas.water import WaterAdviceRead, WaterIntakeCreate, WaterIntakeRead
from carepoint.services.health_advisor import (
    daily_water_target,
    todays_total,
    water_intake_advice,
)
from carepoint.store.memory import MemoryStore

router = APIRouter(prefix="/water-intake")


@router.post("", response_model=WaterIntakeRead, status_code=201)
async def add_water_intake(
    body: WaterIntakeCreate,
    current: CurrentUser = Depends(get_current_user),
    store: MemoryStore = Depends(get_store),
):
    """Record an amount of water (ml) drunk now."""
    return await store.add_water_intake(current.user_id, body.amount)


@router.get("", response_model=list[WaterIntakeRead])
async def water_intake_history(
    current: CurrentUser = Depends(get_current_user),
    store: MemoryStore = Depends(get_store),
):
    """Intake history, newest first."""
    return await store.get_water_intake_history(current.user_id)


@router.get("/advice", response_model=WaterAdviceRead)
async def water_advice(
    weight: Optional[float] = Query(None, gt=0, le=500, description="Body weight in kg"),
    activity: Literal["low", "moderate", "high"] = "low",
    current: CurrentUser = Depends(get_current_user),
    store: MemoryStore = Depends(get_store),
):
    """Today's total against the daily target, with advice.

    With `weight` the target is personal (30 ml/kg scaled by `activity`);
    otherwise the configured default applies.
    """
    records = await store.get_water_intake_history(current.user_id)
    now = datetime.now(timezone.utc)
    if weight is not None:
        target = daily_water_target(weight, activity)
    else:
        target = settings.water_daily_target_ml
    return WaterAdviceRead(
        today_total=todays_total(records, now),
        target=target,
        advice=water_intake_advice(records, now, target),
    )
