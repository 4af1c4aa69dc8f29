"""Budget ledger — keeps a user's min_budget/total_wattage equal to the sum over
their all-day home devices.

Deltas are computed here and applied as relative SQL updates, so they must be
called inside the same ``atomic()`` block as the home-device write they mirror.
"""

from dataclasses import dataclass

import structlog

from smartwatt.config import get_settings
from smartwatt.domain.energy import all_day_cost
from smartwatt.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LedgerDelta:
    watts: int = 0
    cost: float = 0.0

    @property
    def is_zero(self) -> bool:
        return self.watts == 0 and self.cost == 0

    def __neg__(self) -> "LedgerDelta":
        return LedgerDelta(watts=-self.watts, cost=-self.cost)


NO_CHANGE = LedgerDelta()


def _committed(watts: int) -> LedgerDelta:
    return LedgerDelta(watts=watts, cost=all_day_cost(watts, get_settings().DEFAULT_COST_PER_KWH))


def delta_for_create(all_day: bool, watts: int) -> LedgerDelta:
    return _committed(watts) if all_day else NO_CHANGE


def delta_for_update(all_day: bool, old_watts: int, new_watts: int) -> LedgerDelta:
    if not all_day or old_watts == new_watts:
        return NO_CHANGE
    old, new = _committed(old_watts), _committed(new_watts)
    return LedgerDelta(watts=new.watts - old.watts, cost=new.cost - old.cost)


def delta_for_delete(all_day: bool, watts: int) -> LedgerDelta:
    return -_committed(watts) if all_day else NO_CHANGE


def apply_delta(repo: SQLAlchemyUserRepository, user_id: int, delta: LedgerDelta) -> None:
    if delta.is_zero:
        return
    repo.apply_ledger_delta(user_id, watts_delta=delta.watts, cost_delta=delta.cost)
    logger.info("Ledger delta applied", user_id=user_id, watts=delta.watts, cost=delta.cost)
