"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* `meal_schedules` table – one row per generated schedule
* Small DAO helpers used by the schedule router
"""
from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import JSON, DateTime, Integer, String, func, select
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.models.schedule import Schedule

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("Set the DATABASE_URL env var")
    return create_async_engine(settings.database_url, pool_pre_ping=True)


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class MealSchedule(Base):
    __tablename__ = "meal_schedules"

    id:                Mapped[int]        = mapped_column(primary_key=True)
    user_id:           Mapped[str]        = mapped_column(String, index=True)
    subscription_tier: Mapped[str | None] = mapped_column(String)
    plan_label:        Mapped[str]        = mapped_column(String)
    horizon_weeks:     Mapped[int]        = mapped_column(Integer)
    total_meals:       Mapped[int]        = mapped_column(Integer)
    premium_meals:     Mapped[int]        = mapped_column(Integer)
    payload:           Mapped[dict]       = mapped_column(JSON)
    created_at:        Mapped[datetime]   = mapped_column(DateTime, server_default=func.now())


# ───────── DAO helpers ───────────────────────────────────────────────
async def save_schedule(db: AsyncSession, schedule: Schedule) -> MealSchedule:
    """Insert a new row; regenerating a plan just adds a newer row."""
    row = MealSchedule(
        user_id=str(schedule.user_id),
        subscription_tier=schedule.subscription_tier,
        plan_label=schedule.plan_label,
        horizon_weeks=schedule.horizon_weeks,
        total_meals=schedule.total_meals_assigned,
        premium_meals=schedule.total_premium_meals_assigned,
        payload=schedule.model_dump(mode="json"),
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def latest_schedule(db: AsyncSession, user_id: str) -> Schedule | None:
    row = (
        await db.execute(
            select(MealSchedule)
            .where(MealSchedule.user_id == str(user_id))
            .order_by(MealSchedule.id.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    if row is None:
        return None
    return Schedule.model_validate(row.payload)


# ───────── session helper ────────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


async def create_tables() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
