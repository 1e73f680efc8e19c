"""What-if financial scenario simulation - deterministic, no learned components"""

import math
from typing import List, Sequence

from meraki_intelligence.domain.forecasting import predict_double_exponential_smoothing, to_data_points
from meraki_intelligence.domain.models import SimulationModifiers, SimulationResult
from meraki_intelligence.utils.formatting import format_rupiah

# Share of the balance assumed to turn over each period when only a balance
# series is known. Income and expense flows are not observed separately.
TURNOVER_SHARE = 0.2


def simulate_scenario(
    historical_balance: Sequence[float],
    modifiers: SimulationModifiers,
    periods_ahead: int = 6,
    alpha: float = 0.5,
    beta: float = 0.3,
) -> SimulationResult:
    """
    Project the balance under income/expense changes and one-off events.

    Baseline is Holt's forecast of the unmodified history. The projection
    starts from the last actual balance plus one-time income minus one-time
    cost, then follows the baseline's period-over-period steps, each perturbed
    by an estimated turnover (20% of the current simulated balance) scaled by
    the income and expense percentages.

    Zero modifiers reproduce the baseline exactly.
    """
    if periods_ahead < 1:
        raise ValueError("periods_ahead must be at least 1")

    baseline = predict_double_exponential_smoothing(
        to_data_points(historical_balance), alpha, beta, periods_ahead
    )

    last_actual = historical_balance[-1] if historical_balance else 0.0
    # Running difference between the simulated and the baseline balance
    adjustment = modifiers.one_time_income - modifiers.one_time_cost
    simulated = last_actual + adjustment

    projected: List[float] = []
    for base in baseline:
        turnover = abs(simulated) * TURNOVER_SHARE
        adjustment += turnover * modifiers.income_change_percent / 100
        adjustment -= turnover * modifiers.expense_change_percent / 100
        simulated = base + adjustment
        projected.append(round(simulated, 2))

    final_baseline = baseline[-1]
    final_projected = projected[-1]
    delta = round(final_projected - final_baseline, 2)

    insights = []
    if delta > 0:
        insights.append(f"This scenario yields an additional surplus of {format_rupiah(delta)}.")
    elif delta < 0:
        insights.append(f"This scenario reduces the projected balance by {format_rupiah(abs(delta))}.")
    else:
        insights.append("No significant change to the projected balance.")

    if modifiers.one_time_cost > 0:
        improved_flow = delta / periods_ahead
        if improved_flow > 0:
            payback = math.ceil(modifiers.one_time_cost / improved_flow)
            insights.append(f"The upfront cost is recovered in an estimated {payback} periods.")

    return SimulationResult(
        baseline=baseline,
        projected=projected,
        delta=delta,
        final_balance=final_projected,
        insights=insights,
    )
