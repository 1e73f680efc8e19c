"""Unit tests for the what-if scenario simulator"""

import pytest
from meraki_intelligence.domain.models import SimulationModifiers
from meraki_intelligence.domain.scenarios import simulate_scenario

HISTORY = [2_500_000, 2_600_000, 2_550_000, 2_800_000, 3_000_000, 3_200_000]


def test_zero_modifiers_reproduce_baseline():
    result = simulate_scenario(HISTORY, SimulationModifiers(), periods_ahead=6)

    assert result.projected == result.baseline
    assert result.delta == 0
    assert result.insights == ["No significant change to the projected balance."]


def test_one_time_cost_lowers_final_balance():
    without_cost = simulate_scenario(HISTORY, SimulationModifiers(income_change_percent=5))
    with_cost = simulate_scenario(HISTORY, SimulationModifiers(income_change_percent=5, one_time_cost=750_000))

    assert with_cost.final_balance < without_cost.final_balance


def test_income_growth_yields_surplus():
    """Test a 25% income increase over six periods ends above the baseline"""
    result = simulate_scenario(HISTORY, SimulationModifiers(income_change_percent=25), periods_ahead=6)

    assert len(result.projected) == 6
    assert result.projected[5] > result.baseline[5]
    assert result.final_balance == result.projected[5]
    assert result.insights[0].startswith("This scenario yields an additional surplus of Rp ")


def test_expense_growth_reduces_balance():
    result = simulate_scenario(HISTORY, SimulationModifiers(expense_change_percent=10))

    assert result.delta < 0
    assert result.insights[0].startswith("This scenario reduces the projected balance by Rp ")


def test_one_time_income_shifts_projection():
    result = simulate_scenario(HISTORY, SimulationModifiers(one_time_income=1_000_000), periods_ahead=3)

    assert result.projected == pytest.approx([b + 1_000_000 for b in result.baseline])


def test_payback_period_insight():
    """Test an investment that pays for itself reports the recovery time"""
    result = simulate_scenario(
        [1_000_000] * 6,
        SimulationModifiers(income_change_percent=50, one_time_cost=100_000),
        periods_ahead=6,
    )

    assert result.delta > 0
    assert result.insights[1] == "The upfront cost is recovered in an estimated 2 periods."


def test_invalid_horizon():
    with pytest.raises(ValueError):
        simulate_scenario(HISTORY, SimulationModifiers(), periods_ahead=0)
