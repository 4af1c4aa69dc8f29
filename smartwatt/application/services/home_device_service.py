"""Home device service — a user's devices, their costs and budget recommendations."""

from typing import Optional

import structlog

from smartwatt.application.services import budget_ledger
from smartwatt.core.exceptions import EntityNotFoundException, ValidationException
from smartwatt.core.pagination import PageParams, paginate
from smartwatt.domain.energy import (
    ALL_DAY_HOURS,
    DAYS_PER_MONTH,
    calculate_device_cost,
    filter_affordable,
    safe_number,
)
from smartwatt.domain.models.home_device import UserHomeDevice
from smartwatt.domain.models.user import User
from smartwatt.domain.schemas.device import (
    HomeDeviceCreate,
    HomeDeviceFilter,
    HomeDeviceRead,
    HomeDeviceUpdate,
    SystemDeviceRead,
)
from smartwatt.infrastructure.repositories.device_repository import (
    SQLAlchemyHomeDeviceRepository,
    SQLAlchemySystemDeviceRepository,
)
from smartwatt.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

logger = structlog.get_logger(__name__)


def _require_owned(
    repo: SQLAlchemyHomeDeviceRepository,
    home_device_id: int,
    user_id: int,
    lock: bool = False,
) -> UserHomeDevice:
    device = repo.get_for_user(home_device_id, user_id, lock=lock)
    if device is None:
        raise EntityNotFoundException("Device not found")
    return device


def _lock_owned(
    repo: SQLAlchemyHomeDeviceRepository,
    catalog: SQLAlchemySystemDeviceRepository,
    home_device_id: int,
    user_id: int,
) -> UserHomeDevice:
    """Re-read an assignment and its catalog entry under row locks.

    The catalog row is locked first, matching the order used when an admin
    flips the all-day flag, so the flag and the stored watts the ledger delta
    is computed from cannot change before commit.
    """
    current = _require_owned(repo, home_device_id, user_id)
    catalog.get_by_id(current.system_device_id, lock=True)
    return _require_owned(repo, home_device_id, user_id, lock=True)


def add_home_device(
    repo: SQLAlchemyHomeDeviceRepository,
    catalog: SQLAlchemySystemDeviceRepository,
    users: SQLAlchemyUserRepository,
    user: User,
    system_device_id: int,
    body: HomeDeviceCreate,
) -> UserHomeDevice:
    with repo.atomic():
        system_device = catalog.get_by_id(system_device_id, lock=True)
        if system_device is None:
            raise EntityNotFoundException("Device not found")
        if body.chosen_watts not in (system_device.watts_options or []):
            raise ValidationException("Invalid wattage choice")

        all_day = system_device.device_work_all_day
        home_device = repo.create({
            "user_id": user.id,
            "system_device_id": system_device.id,
            "chosen_watts": body.chosen_watts,
            "user_input_work_time": ALL_DAY_HOURS if all_day else (body.user_input_work_time or 0),
        })
        budget_ledger.apply_delta(
            users, user.id, budget_ledger.delta_for_create(all_day, body.chosen_watts)
        )

    logger.info(
        "Home device added",
        user_id=user.id,
        home_device_id=home_device.id,
        system_device_id=system_device_id,
        watts=body.chosen_watts,
    )
    return repo.refresh(home_device)


def list_home_devices(
    repo: SQLAlchemyHomeDeviceRepository,
    user: User,
    params: PageParams,
    filters: Optional[HomeDeviceFilter] = None,
) -> dict:
    devices = repo.list_for_user(user.id, skip=params.offset, limit=params.limit, filters=filters)
    items = [HomeDeviceRead.model_validate(d).to_json() for d in devices]
    return paginate(items, repo.count_for_user(user.id, filters), params)


def get_home_device(repo: SQLAlchemyHomeDeviceRepository, user: User, home_device_id: int) -> UserHomeDevice:
    return _require_owned(repo, home_device_id, user.id)


def update_home_device(
    repo: SQLAlchemyHomeDeviceRepository,
    catalog: SQLAlchemySystemDeviceRepository,
    users: SQLAlchemyUserRepository,
    user: User,
    home_device_id: int,
    body: HomeDeviceUpdate,
) -> UserHomeDevice:
    with repo.atomic():
        home_device = _lock_owned(repo, catalog, home_device_id, user.id)
        system_device = home_device.system_device
        all_day = system_device.device_work_all_day

        patch: dict = {}
        if body.chosen_watts is not None:
            if body.chosen_watts not in (system_device.watts_options or []):
                raise ValidationException("Invalid wattage choice")
            patch["chosen_watts"] = body.chosen_watts
        # Work time of an all-day device stays pinned at 24h
        if body.user_input_work_time is not None and not all_day:
            patch["user_input_work_time"] = body.user_input_work_time

        old_watts = home_device.chosen_watts
        new_watts = patch.get("chosen_watts", old_watts)
        repo.update(home_device, patch)
        budget_ledger.apply_delta(
            users, user.id, budget_ledger.delta_for_update(all_day, old_watts, new_watts)
        )

    logger.info("Home device updated", user_id=user.id, home_device_id=home_device_id, fields=sorted(patch))
    return repo.refresh(home_device)


def delete_home_device(
    repo: SQLAlchemyHomeDeviceRepository,
    catalog: SQLAlchemySystemDeviceRepository,
    users: SQLAlchemyUserRepository,
    user: User,
    home_device_id: int,
) -> None:
    with repo.atomic():
        home_device = _lock_owned(repo, catalog, home_device_id, user.id)
        delta = budget_ledger.delta_for_delete(home_device.is_all_day, home_device.chosen_watts)
        repo.delete(home_device)
        budget_ledger.apply_delta(users, user.id, delta)

    logger.info("Home device deleted", user_id=user.id, home_device_id=home_device_id)


def calculate_costs(repo: SQLAlchemyHomeDeviceRepository, user: User, cost_per_kwh: float) -> dict:
    """Daily and monthly cost of every device the user owns, plus totals."""
    total_cost = 0.0
    total_wattage = 0
    devices = []
    for device in repo.all_for_user(user.id):
        watts = device.chosen_watts or 0
        hours = device.hours_per_day
        cost = calculate_device_cost(watts, hours, cost_per_kwh)
        total_cost += cost
        total_wattage += watts
        devices.append({
            "id": device.id,
            "deviceName": device.system_device.name,
            "watts": watts,
            "hours": hours,
            "dailyCost": cost,
            "monthlyCost": cost * DAYS_PER_MONTH,
        })

    return {
        "devices": devices,
        "summary": {
            "totalDailyCost": total_cost,
            "totalMonthlyCost": total_cost * DAYS_PER_MONTH,
            "totalWattage": total_wattage,
        },
    }


def budget_summary(user: User) -> dict:
    budget = safe_number(user.budget)
    used = safe_number(user.min_budget)
    return {"total": budget, "used": used, "remaining": budget - used}


def recommend_devices(
    catalog: SQLAlchemySystemDeviceRepository,
    user: User,
    cost_per_kwh: float,
) -> dict:
    """Catalog entries with at least one wattage that fits the remaining budget."""
    budget = budget_summary(user)
    matches = filter_affordable(catalog.list_all(), budget["remaining"], cost_per_kwh)
    recommended = []
    for match in matches:
        entry = SystemDeviceRead.model_validate(match.device).to_json()
        entry["affordableWattage"] = match.affordable_wattage
        entry["estimatedMonthlyCost"] = match.monthly_cost
        recommended.append(entry)
    return {"recommendedDevices": recommended, "budget": budget}
