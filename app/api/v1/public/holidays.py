# ============================================================================
# app/api/v1/public/holidays.py
# Holiday calendar for a shop's region
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.clock import Clock, get_clock
from app.core.errors import ValidationError
from app.services.directory.directory_service import DirectoryService
from app.services.holidays import holiday_calendar

router = APIRouter(prefix="/shops/{shop_id}", tags=["public-holidays"])

# Longest range /working-days will count
MAX_RANGE_DAYS = 366 * 5


def _shop_region(shop) -> holiday_calendar.Region:
    try:
        return holiday_calendar.parse_region(shop.region)
    except ValueError:
        raise ValidationError(f"Unknown holiday region '{shop.region}'", code="INVALID_REGION")


@router.get("/holidays")
async def list_holidays(
        shop_id: UUID = Path(..., description="The shop ID"),
        year: Optional[int] = Query(None, ge=1900, le=2200, description="Defaults to the current year"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Statutory holidays of the shop's region, sorted by date"""
    shop = DirectoryService.get_active_shop(db, shop_id)
    if year is None:
        year = clock.today(DirectoryService.shop_timezone(shop)).year

    region = _shop_region(shop)

    return {
        "shop_id": str(shop.id),
        "region": region.value,
        "region_name": holiday_calendar.REGION_LABELS[region],
        "year": year,
        "holidays": holiday_calendar.get_holidays_list(year, region),
    }


@router.get("/holidays/calendar")
async def holiday_calendar_view(
        shop_id: UUID = Path(..., description="The shop ID"),
        year: Optional[int] = Query(None, ge=1900, le=2200, description="Defaults to the current year"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Holidays for calendar display; adds Easter and Whit Sunday, which are not working-day relevant"""
    shop = DirectoryService.get_active_shop(db, shop_id)
    if year is None:
        year = clock.today(DirectoryService.shop_timezone(shop)).year

    region = _shop_region(shop)
    entries = holiday_calendar.get_holidays_for_display(year, region)

    return {
        "shop_id": str(shop.id),
        "region": region.value,
        "year": year,
        "holidays": [
            {"date": day.isoformat(), "name": name, "statutory": holiday_calendar.is_holiday(day, region)}
            for day, name in sorted(entries.items())
        ],
    }


@router.get("/holidays/{day}")
async def check_holiday(
        shop_id: UUID = Path(..., description="The shop ID"),
        day: date = Path(..., description="Date to check, YYYY-MM-DD"),
        db: Session = Depends(get_db)
):
    shop = DirectoryService.get_active_shop(db, shop_id)
    region = _shop_region(shop)

    return {
        "date": day.isoformat(),
        "region": region.value,
        "is_holiday": holiday_calendar.is_holiday(day, region),
        "name": holiday_calendar.get_holiday_name(day, region),
    }


@router.get("/working-days")
async def count_working_days(
        shop_id: UUID = Path(..., description="The shop ID"),
        start: date = Query(..., description="First day (inclusive)"),
        end: date = Query(..., description="Last day (inclusive)"),
        db: Session = Depends(get_db)
):
    """Monday to Saturday days in the range that are not statutory holidays"""
    if end < start:
        raise ValidationError("end must not be before start", code="INVALID_RANGE")
    if (end - start).days >= MAX_RANGE_DAYS:
        raise ValidationError(
            f"Range must be shorter than {MAX_RANGE_DAYS} days",
            code="INVALID_RANGE",
            max_days=MAX_RANGE_DAYS
        )

    shop = DirectoryService.get_active_shop(db, shop_id)
    region = _shop_region(shop)

    return {
        "shop_id": str(shop.id),
        "region": region.value,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "working_days": holiday_calendar.count_working_days(start, end, region),
    }
