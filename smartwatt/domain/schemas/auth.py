"""Pydantic schemas for User, Admin and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from smartwatt.domain.schemas.common import CamelModel


class UserCreate(CamelModel):
    user_name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)
    budget: float = Field(0, ge=0)


class UserUpdate(CamelModel):
    """Partial profile update; only fields present in the request are applied."""
    user_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=1)
    budget: Optional[float] = Field(None, ge=0)


class BudgetUpdate(CamelModel):
    budget: float = Field(ge=0)


class UserRead(CamelModel):
    id: int
    email: str
    user_name: str
    budget: float
    min_budget: float
    total_wattage: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminCreate(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)


class AdminRead(CamelModel):
    id: int
    email: str
    created_at: Optional[datetime] = None


class LoginRequest(CamelModel):
    email: str
    password: str
