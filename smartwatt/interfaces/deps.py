"""
API Dependencies — repositories and collaborators per request.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from smartwatt.ai.advisor import EnergyAdvisor
from smartwatt.ai.llm import get_llm
from smartwatt.config import get_settings
from smartwatt.domain.energy import safe_number
from smartwatt.domain.schemas.device import HomeDeviceFilter
from smartwatt.infrastructure.database import get_db
from smartwatt.infrastructure.repositories.device_repository import (
    SQLAlchemyHomeDeviceRepository,
    SQLAlchemySystemDeviceRepository,
)
from smartwatt.infrastructure.repositories.user_repository import (
    SQLAlchemyAdminRepository,
    SQLAlchemyUserRepository,
)
from smartwatt.infrastructure.storage import ImageStorage, get_image_storage


def get_user_repository(db: Session = Depends(get_db)) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db)


def get_admin_repository(db: Session = Depends(get_db)) -> SQLAlchemyAdminRepository:
    return SQLAlchemyAdminRepository(db)


def get_system_device_repository(db: Session = Depends(get_db)) -> SQLAlchemySystemDeviceRepository:
    return SQLAlchemySystemDeviceRepository(db)


def get_home_device_repository(db: Session = Depends(get_db)) -> SQLAlchemyHomeDeviceRepository:
    return SQLAlchemyHomeDeviceRepository(db)


def get_storage() -> ImageStorage:
    return get_image_storage()


@lru_cache
def get_energy_advisor() -> Optional[EnergyAdvisor]:
    """None when no AI provider key is configured."""
    llm = get_llm()
    return EnergyAdvisor(llm) if llm is not None else None


def get_cost_per_kwh(cost_per_kwh: Optional[str] = Query(None, alias="costPerKWh")) -> float:
    default = get_settings().DEFAULT_COST_PER_KWH
    rate = safe_number(cost_per_kwh, default)
    return rate if rate > 0 else default


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    number = safe_number(raw, None)
    return int(number) if number is not None else None


def get_home_device_filter(
    device_name: Optional[str] = Query(None, alias="deviceName"),
    min_watts: Optional[str] = Query(None, alias="minWatts"),
    max_watts: Optional[str] = Query(None, alias="maxWatts"),
) -> HomeDeviceFilter:
    return HomeDeviceFilter(
        device_name=(device_name or "").strip() or None,
        min_watts=_optional_int(min_watts),
        max_watts=_optional_int(max_watts),
    )
