# ============================================================================
# app/services/directory/directory_service.py
# Read-only lookups of shops, staff and services for the booking engine
# ============================================================================
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.errors import NotFoundError
from app.models.shop import Shop, StaffMember
from app.models.service import Service

logger = logging.getLogger(__name__)


class DirectoryService:
    """Shop/staff/service lookups scoped by shop and filtered by active flag"""

    @staticmethod
    def get_active_shop(db: Session, shop_id: UUID) -> Shop:
        shop = db.query(Shop).filter(
            Shop.id == shop_id,
            Shop.is_active.is_(True)
        ).first()
        if not shop:
            raise NotFoundError("Shop not found", code="SHOP_NOT_FOUND")
        return shop

    @staticmethod
    def get_active_staff(db: Session, shop_id: UUID, staff_id: UUID) -> StaffMember:
        staff = db.query(StaffMember).filter(
            StaffMember.id == staff_id,
            StaffMember.shop_id == shop_id,
            StaffMember.is_active.is_(True)
        ).first()
        if not staff:
            raise NotFoundError("Staff member not found or inactive", code="STAFF_NOT_FOUND")
        return staff

    @staticmethod
    def get_active_service(db: Session, shop_id: UUID, service_id: UUID) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.shop_id == shop_id,
            Service.is_active.is_(True)
        ).first()
        if not service:
            raise NotFoundError("Service not found or inactive", code="SERVICE_NOT_FOUND")
        return service

    @staticmethod
    def shop_timezone(shop: Optional[Shop]) -> ZoneInfo:
        """Shop-local zone; a missing or unknown zone name falls back to the configured default"""
        if shop is None or not shop.timezone:
            return ZoneInfo(settings.DEFAULT_TIMEZONE)
        try:
            return ZoneInfo(shop.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                f"Shop {shop.id} has unknown timezone '{shop.timezone}', using {settings.DEFAULT_TIMEZONE}"
            )
            return ZoneInfo(settings.DEFAULT_TIMEZONE)
