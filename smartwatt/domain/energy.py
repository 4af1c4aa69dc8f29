"""Energy cost arithmetic — pure functions, no I/O."""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

DEFAULT_COST_PER_KWH = 0.68
DAYS_PER_MONTH = 30
ALL_DAY_HOURS = 24
# Usage assumed for a device that does not run all day when estimating affordability
PART_DAY_HOURS = 8


def safe_number(value: Any, default: float = 0) -> float:
    """Coerce to a finite float, falling back to ``default`` for junk input."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def calculate_device_cost(watts: Any, hours: Any, cost_per_kwh: Any = DEFAULT_COST_PER_KWH) -> float:
    """Daily cost of running ``watts`` for ``hours``: kWh times the rate, unrounded."""
    watts = safe_number(watts)
    hours = safe_number(hours)
    rate = safe_number(cost_per_kwh, DEFAULT_COST_PER_KWH)
    return (watts * hours / 1000) * rate


def monthly_cost(watts: Any, hours: Any, cost_per_kwh: Any = DEFAULT_COST_PER_KWH) -> float:
    return calculate_device_cost(watts, hours, cost_per_kwh) * DAYS_PER_MONTH


def all_day_cost(watts: Any, cost_per_kwh: Any = DEFAULT_COST_PER_KWH) -> float:
    """Committed daily cost of an all-day device, as tracked in the budget ledger."""
    return calculate_device_cost(watts, ALL_DAY_HOURS, cost_per_kwh)


def estimate_hours(work_all_day: bool) -> int:
    return ALL_DAY_HOURS if work_all_day else PART_DAY_HOURS


@dataclass(frozen=True)
class Affordability:
    """Cheapest wattage of a catalog entry that fits the remaining budget."""
    device: Any
    affordable_wattage: int
    monthly_cost: float


def affordable_options(
    watts_options: Sequence[int],
    work_all_day: bool,
    remaining_budget: float,
    cost_per_kwh: float = DEFAULT_COST_PER_KWH,
) -> list[int]:
    hours = estimate_hours(work_all_day)
    return [
        watts for watts in watts_options
        if monthly_cost(watts, hours, cost_per_kwh) <= remaining_budget
    ]


def check_affordability(
    device: Any,
    remaining_budget: float,
    cost_per_kwh: float = DEFAULT_COST_PER_KWH,
) -> Optional[Affordability]:
    options = affordable_options(device.watts_options or [], device.device_work_all_day, remaining_budget, cost_per_kwh)
    if not options:
        return None
    wattage = min(options)
    return Affordability(
        device=device,
        affordable_wattage=wattage,
        monthly_cost=monthly_cost(wattage, estimate_hours(device.device_work_all_day), cost_per_kwh),
    )


def filter_affordable(
    devices: Iterable[Any],
    remaining_budget: float,
    cost_per_kwh: float = DEFAULT_COST_PER_KWH,
) -> list[Affordability]:
    """Keep catalog order; drop entries with no option inside the budget."""
    result = []
    for device in devices:
        match = check_affordability(device, remaining_budget, cost_per_kwh)
        if match is not None:
            result.append(match)
    return result
