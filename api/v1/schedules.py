# api/v1/schedules.py
from __future__ import annotations

import logging
import random

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.meal_scheduler import InvalidInput, MealScheduler
from core.models.schedule import Schedule, WeekSchedule
from core.schedule_report import grocery_list
from services.db import get_session, latest_schedule, save_schedule
from api.v1.schemas import GroceryItem, GroceryListOut, ScheduleOut, ScheduleRequest

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── helpers ──────────────────────────
def _run(body: ScheduleRequest) -> Schedule:
    weeks = body.weeks or settings.default_horizon_weeks
    if weeks > settings.max_horizon_weeks:
        raise HTTPException(422, f"weeks must be ≤ {settings.max_horizon_weeks}")

    rng = random.Random(body.seed) if body.seed is not None else None
    try:
        scheduler = MealScheduler(rng=rng, top_k=settings.top_candidates)
        return scheduler.generate(body.profile, body.meals, weeks)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


async def _latest_or_404(db: AsyncSession, user_id: str) -> Schedule:
    schedule = await latest_schedule(db, user_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="No schedule for this user")
    return schedule


def _week_or_404(schedule: Schedule, week_number: int) -> WeekSchedule:
    week = schedule.week(week_number)
    if week is None:
        raise HTTPException(status_code=404, detail=f"Week {week_number} not in schedule")
    return week


# ───────────────────────── generate ─────────────────────────
@router.post(
    "",
    response_model=ScheduleOut,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a meal schedule and store it for the user",
)
async def create_schedule(
    body: ScheduleRequest,
    db: AsyncSession = Depends(get_session),
) -> ScheduleOut:
    """
    Generate from the posted profile + catalog snapshot.  Call again after
    any preference change; the newest schedule replaces the old one.
    """
    if body.profile.id is None:
        raise HTTPException(422, "profile.id is required to store a schedule")

    schedule = _run(body)
    if schedule.is_partial:
        _LOG.info(
            "user %s: schedule under-filled (%d of %d meals)",
            schedule.user_id, schedule.total_meals_assigned, schedule.expected_meals,
        )
    row = await save_schedule(db, schedule)
    return ScheduleOut(id=row.id, schedule=schedule)


@router.post(
    "/preview",
    response_model=ScheduleOut,
    status_code=status.HTTP_200_OK,
    summary="Generate a meal schedule without storing it",
)
async def preview_schedule(body: ScheduleRequest) -> ScheduleOut:
    return ScheduleOut(schedule=_run(body))


# ───────────────────────── read ─────────────────────────────
@router.get("/{user_id}", response_model=ScheduleOut)
async def fetch_schedule(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> ScheduleOut:
    return ScheduleOut(schedule=await _latest_or_404(db, user_id))


@router.get("/{user_id}/weeks/{week_number}", response_model=WeekSchedule)
async def fetch_week(
    user_id: str,
    week_number: int,
    db: AsyncSession = Depends(get_session),
) -> WeekSchedule:
    schedule = await _latest_or_404(db, user_id)
    return _week_or_404(schedule, week_number)


@router.get("/{user_id}/weeks/{week_number}/groceries", response_model=GroceryListOut)
async def fetch_groceries(
    user_id: str,
    week_number: int,
    db: AsyncSession = Depends(get_session),
) -> GroceryListOut:
    schedule = await _latest_or_404(db, user_id)
    _week_or_404(schedule, week_number)
    df = grocery_list(schedule, week_number)
    return GroceryListOut(
        user_id=user_id,
        week_number=week_number,
        items=[GroceryItem(ingredient=r["ingredient"], count=int(r["count"])) for r in df.to_dict("records")],
    )
