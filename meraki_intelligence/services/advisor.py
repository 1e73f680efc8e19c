"""Narrative enrichment with deterministic fallbacks"""

import json
import logging
from dataclasses import asdict, replace
from datetime import datetime
from typing import Sequence

from meraki_intelligence.config import settings
from meraki_intelligence.domain.exceptions import NarrativeProviderError
from meraki_intelligence.domain.models import FinancialPrediction, SimulationResult, Transaction
from meraki_intelligence.domain.prediction import allocate_budget, predict_financial_trends
from meraki_intelligence.infrastructure.clients.narrative import NarrativeProvider, OfflineNarrativeProvider
from meraki_intelligence.infrastructure.observability.metrics import narrative_fallback_counter
from meraki_intelligence.services.schemas import ActionPlanResponse, BudgetSuggestionResponse
from meraki_intelligence.utils.formatting import format_rupiah

logger = logging.getLogger(__name__)

OFFLINE_ADVICE = "The AI advisor is resting; the organization's standard logic remains active."
EMPTY_ADVICE = "Analysis complete, please review the figures below."
FALLBACK_BUDGET_NOTE = "Based on the average verified spend per category over the last 3 months."


async def enrich_action_plan(
    forecast: FinancialPrediction,
    metric: str,
    provider: NarrativeProvider,
) -> FinancialPrediction:
    """
    Ask the collaborator for 3 localized steps to replace the default plan.

    The deterministic plan is kept when the collaborator is unavailable,
    fails, or returns something that does not validate.
    """
    if not forecast.predictions or not provider.is_available():
        return forecast

    prompt = (
        "Analyze this financial trend for a non-profit organization.\n"
        f"Trend: {forecast.trend}, Type: {metric}, "
        f"Predictions: {', '.join(str(p) for p in forecast.predictions)}.\n"
        "Provide 3 specific, actionable strategic steps in Indonesian to manage this situation. "
        'Respond with JSON only: {"steps": ["...", "...", "..."]}'
    )

    try:
        payload = await provider.generate_json(prompt)
        if payload is None:
            raise NarrativeProviderError("Empty structured response")
        plan = ActionPlanResponse.model_validate(payload)
    except Exception as e:  # collaborator problems never fail the analysis
        narrative_fallback_counter.labels(capability="action_plan").inc()
        logger.warning(f"Keeping deterministic action plan: {e}")
        return forecast

    return replace(forecast, action_plan=plan.steps)


async def forecast_financial_trends(
    transactions: Sequence[Transaction],
    metric: str = "balance",
    periods_ahead: int | None = None,
    provider: NarrativeProvider | None = None,
) -> FinancialPrediction:
    """Deterministic forecast, optionally enriched by the narrative collaborator"""
    forecast = predict_financial_trends(
        transactions,
        metric,
        periods_ahead or settings.forecast_periods_ahead,
        alpha=settings.holt_alpha,
        beta=settings.holt_beta,
    )
    return await enrich_action_plan(forecast, metric, provider or OfflineNarrativeProvider())


async def generate_financial_advice(
    balance: float,
    scenario: str,
    result: SimulationResult,
    provider: NarrativeProvider,
) -> str:
    """Two or three supportive sentences about a what-if result"""
    if not provider.is_available():
        narrative_fallback_counter.labels(capability="financial_advice").inc()
        return OFFLINE_ADVICE

    prompt = (
        "You are a professional financial advisor for a non-profit volunteer organization.\n"
        "Give a strategic summary of EXACTLY 2-3 sentences based on this what-if simulation.\n"
        f"Scenario: {scenario}\n"
        f"Current balance: {format_rupiah(balance)}\n"
        f"Simulation result: {json.dumps(asdict(result))}\n"
        "Use supportive, professional Indonesian and focus on operational sustainability."
    )

    try:
        advice = await provider.generate_text(prompt)
    except Exception as e:  # collaborator problems never fail the analysis
        narrative_fallback_counter.labels(capability="financial_advice").inc()
        logger.warning(f"Financial advice unavailable: {e}")
        return OFFLINE_ADVICE

    return (advice or "").strip() or EMPTY_ADVICE


async def suggest_budget(
    transactions: Sequence[Transaction],
    provider: NarrativeProvider,
    now: datetime | None = None,
) -> BudgetSuggestionResponse:
    """
    Next month's allocation per category.

    The collaborator sees the latest verified transactions; without it (or on
    a bad answer) each outflow category gets its recent monthly average.
    """
    now = now or datetime.now()
    fallback = BudgetSuggestionResponse.from_allocation(allocate_budget(transactions, now), FALLBACK_BUDGET_NOTE)

    if not provider.is_available():
        narrative_fallback_counter.labels(capability="budget").inc()
        return fallback

    verified = [
        {"category": t.category, "type": t.type, "amount": t.amount, "date": t.date.date().isoformat()}
        for t in transactions
        if t.is_verified
    ][:50]
    prompt = (
        "You are a budgeting expert for a non-profit organization.\n"
        "Recommend next month's budget allocation from these verified transactions:\n"
        f"{json.dumps(verified)}\n"
        "Give data-driven reasons. Respond with JSON only: "
        '{"suggestions": [{"category": "string", "suggestedAmount": number, "reason": "string"}], '
        '"totalBudget": number, "strategyNote": "string"}'
    )

    try:
        payload = await provider.generate_json(prompt)
        if payload is None:
            raise NarrativeProviderError("Empty structured response")
        return BudgetSuggestionResponse.model_validate(payload)
    except Exception as e:  # collaborator problems never fail the analysis
        narrative_fallback_counter.labels(capability="budget").inc()
        logger.warning(f"Using deterministic budget: {e}")
        return fallback
