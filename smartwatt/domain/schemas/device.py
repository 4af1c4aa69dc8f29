"""Pydantic schemas for catalog devices and user home devices."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from smartwatt.domain.schemas.common import CamelModel


class SystemDeviceRead(CamelModel):
    id: int
    name: str
    img: str
    watts_options: list[int]
    device_work_all_day: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HomeDeviceCreate(CamelModel):
    chosen_watts: int = Field(gt=0)
    user_input_work_time: Optional[float] = Field(None, ge=0, le=24)


class HomeDeviceUpdate(CamelModel):
    """Partial update; absent fields keep their stored value."""
    chosen_watts: Optional[int] = Field(None, gt=0)
    user_input_work_time: Optional[float] = Field(None, ge=0, le=24)


class HomeDeviceRead(CamelModel):
    id: int
    user_id: int
    system_device_id: int
    chosen_watts: int
    user_input_work_time: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    system_device: SystemDeviceRead


class HomeDeviceFilter(CamelModel):
    device_name: Optional[str] = None
    min_watts: Optional[int] = None
    max_watts: Optional[int] = None
