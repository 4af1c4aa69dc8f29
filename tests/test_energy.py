"""Tests for the cost calculator, affordability filter and ledger deltas."""
from types import SimpleNamespace

import pytest

from smartwatt.application.services import budget_ledger
from smartwatt.domain.energy import (
    calculate_device_cost,
    check_affordability,
    filter_affordable,
    monthly_cost,
    safe_number,
)


def _device(id, watts_options, all_day=False, name="Device"):
    return SimpleNamespace(id=id, name=name, watts_options=watts_options, device_work_all_day=all_day)


class TestCostCalculator:

    @pytest.mark.parametrize("watts,hours,rate", [(100, 24, 0.68), (60, 8, 0.68), (2000, 1.5, 1.2)])
    def test_formula(self, watts, hours, rate):
        assert calculate_device_cost(watts, hours, rate) == pytest.approx(watts * hours * rate / 1000)

    def test_zero_watts_or_hours(self):
        assert calculate_device_cost(0, 10, 0.68) == 0
        assert calculate_device_cost(100, 0, 0.68) == 0

    def test_default_rate(self):
        assert calculate_device_cost(100, 24) == pytest.approx(1.632)

    def test_invalid_inputs_become_zero(self):
        assert calculate_device_cost(None, 5) == 0
        assert calculate_device_cost("abc", 5) == 0
        assert calculate_device_cost(100, float("nan")) == 0

    def test_numeric_strings_are_accepted(self):
        assert calculate_device_cost("100", "24") == pytest.approx(1.632)

    def test_monthly_is_thirty_days(self):
        assert monthly_cost(60, 8) == pytest.approx(calculate_device_cost(60, 8) * 30)

    def test_safe_number(self):
        assert safe_number("3.5") == 3.5
        assert safe_number(None, 7) == 7
        assert safe_number(True) == 0


class TestAffordability:

    def test_spec_example_picks_cheapest_option(self):
        # remaining 600: 60W for 8h costs ~9.79 a month
        match = check_affordability(_device(1, [100, 60]), remaining_budget=600)
        assert match is not None
        assert match.affordable_wattage == 60
        assert match.monthly_cost == pytest.approx(0.06 * 8 * 0.68 * 30)

    def test_all_day_devices_use_24_hours(self):
        # 100W all day: 1.632 a day, 48.96 a month
        device = _device(1, [100], all_day=True)
        assert check_affordability(device, remaining_budget=48.97) is not None
        assert check_affordability(device, remaining_budget=48.9) is None

    def test_only_fitting_options_are_considered(self):
        # 1000W for 8h: 163.2 a month; 100W: 16.32
        match = check_affordability(_device(1, [1000, 100]), remaining_budget=20)
        assert match.affordable_wattage == 100

    def test_filter_keeps_catalog_order_and_drops_unaffordable(self):
        devices = [
            _device(1, [50]),
            _device(2, [5000], all_day=True),
            _device(3, [10, 20]),
        ]
        result = filter_affordable(devices, remaining_budget=100)
        assert [m.device.id for m in result] == [1, 3]

    def test_negative_remaining_budget_excludes_everything(self):
        assert filter_affordable([_device(1, [1])], remaining_budget=-1) == []


class TestLedgerDeltas:

    def test_create_all_day(self):
        delta = budget_ledger.delta_for_create(True, 100)
        assert delta.watts == 100
        assert delta.cost == pytest.approx(1.632)

    def test_non_all_day_never_changes_ledger(self):
        assert budget_ledger.delta_for_create(False, 100).is_zero
        assert budget_ledger.delta_for_update(False, 100, 150).is_zero
        assert budget_ledger.delta_for_delete(False, 100).is_zero

    def test_update_is_difference(self):
        delta = budget_ledger.delta_for_update(True, 100, 150)
        assert delta.watts == 50
        assert delta.cost == pytest.approx(calculate_device_cost(150, 24) - calculate_device_cost(100, 24))

    def test_update_same_watts_is_noop(self):
        assert budget_ledger.delta_for_update(True, 100, 100).is_zero

    def test_delete_reverses_create(self):
        created = budget_ledger.delta_for_create(True, 120)
        deleted = budget_ledger.delta_for_delete(True, 120)
        assert created.watts + deleted.watts == 0
        assert created.cost + deleted.cost == pytest.approx(0)
