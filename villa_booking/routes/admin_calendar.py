"""Admin calendar endpoints: blocked periods, seasons and custom pricing."""

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.engine import Engine

from villa_booking.dependencies import get_db_engine, require_admin
from villa_booking.identity import CallerIdentity
from villa_booking.schemas.admin import (
    BlockDatesPayload,
    BlockedPeriodOut,
    CustomPricingOut,
    CustomPricingUpsertPayload,
    SeasonCreatePayload,
    SeasonOut,
)
from villa_booking.services import calendar_admin

router = APIRouter()


@router.get("/blocked-periods", response_model=list[BlockedPeriodOut])
def list_blocked_periods(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> list[BlockedPeriodOut]:
    rows = calendar_admin.list_blocked_periods(engine, start, end)
    return [BlockedPeriodOut.model_validate(row) for row in rows]


@router.post(
    "/blocked-periods", status_code=status.HTTP_201_CREATED, response_model=BlockedPeriodOut
)
def block_dates(
    payload: BlockDatesPayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> BlockedPeriodOut:
    """409 ``date_conflict`` when an active reservation has a night in the range."""
    row = calendar_admin.block_dates(engine, payload.start_date, payload.end_date, payload.reason)
    return BlockedPeriodOut.model_validate(row)


@router.delete("/blocked-periods/{blocked_period_id}")
def unblock_dates(
    blocked_period_id: int,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    calendar_admin.unblock_dates(engine, blocked_period_id)
    return {"success": True}


@router.get("/seasons", response_model=list[SeasonOut])
def list_seasons(
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> list[SeasonOut]:
    return [SeasonOut.model_validate(row) for row in calendar_admin.list_seasons(engine)]


@router.post("/seasons", status_code=status.HTTP_201_CREATED, response_model=SeasonOut)
def create_season(
    payload: SeasonCreatePayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> SeasonOut:
    row = calendar_admin.create_season(
        engine, payload.name, payload.start_date, payload.end_date, payload.nightly_rate
    )
    return SeasonOut.model_validate(row)


@router.delete("/seasons/{season_id}")
def delete_season(
    season_id: int,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    calendar_admin.delete_season(engine, season_id)
    return {"success": True}


@router.get("/custom-pricing", response_model=list[CustomPricingOut])
def list_custom_pricing(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> list[CustomPricingOut]:
    rows = calendar_admin.list_custom_pricing(engine, start, end)
    return [CustomPricingOut.model_validate(row) for row in rows]


@router.put("/custom-pricing")
def upsert_custom_pricing(
    payload: CustomPricingUpsertPayload,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    written = calendar_admin.upsert_custom_pricing(
        engine, [entry.as_row() for entry in payload.entries]
    )
    return {"success": True, "written": written}


@router.delete("/custom-pricing/{day}")
def delete_custom_pricing(
    day: date,
    _: CallerIdentity = Depends(require_admin),
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    calendar_admin.delete_custom_pricing(engine, day)
    return {"success": True}
