"""Integration tests for the narrative collaborator and its fallbacks"""

import json
from datetime import datetime

import httpx
import pytest
from meraki_intelligence.config import settings
from meraki_intelligence.domain.exceptions import NarrativeProviderError
from meraki_intelligence.domain.models import SimulationModifiers
from meraki_intelligence.domain.prediction import predict_financial_trends
from meraki_intelligence.domain.scenarios import simulate_scenario
from meraki_intelligence.infrastructure.clients.narrative import (
    HttpNarrativeClient,
    OfflineNarrativeProvider,
    get_narrative_provider,
    safe_parse_json,
)
from meraki_intelligence.services.advisor import (
    EMPTY_ADVICE,
    FALLBACK_BUDGET_NOTE,
    OFFLINE_ADVICE,
    enrich_action_plan,
    forecast_financial_trends,
    generate_financial_advice,
    suggest_budget,
)

BASE_URL = "http://narrative.test"


def _client(handler) -> HttpNarrativeClient:
    return HttpNarrativeClient(base_url=BASE_URL, api_key="secret", transport=httpx.MockTransport(handler))


class FakeProvider:
    """Available provider returning canned answers"""

    def __init__(self, text: str | None = "", payload=None, error: Exception | None = None):
        self.text = text
        self.payload = payload
        self.error = error
        self.prompts = []

    def is_available(self) -> bool:
        return True

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text

    async def generate_json(self, prompt: str):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.payload


def test_safe_parse_json():
    assert safe_parse_json('{"steps": ["a"]}') == {"steps": ["a"]}
    assert safe_parse_json('Here you go:\n```json\n{"steps": ["a"]}\n```') == {"steps": ["a"]}
    assert safe_parse_json("no json here") is None
    assert safe_parse_json("[1, 2]") is None
    assert safe_parse_json("") is None


async def test_client_posts_prompt_and_reads_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"text": "Keep going."})

    text = await _client(handler).generate_text("Summarize")

    assert text == "Keep going."
    assert seen["url"] == f"{BASE_URL}/generate"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {"prompt": "Summarize", "format": "text"}


async def test_client_generate_json_tolerates_prose():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"text": 'Sure! {"steps": ["Audit", "Cut", "Collect"]}'})

    payload = await _client(handler).generate_json("Plan")

    assert payload == {"steps": ["Audit", "Cut", "Collect"]}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "down"}),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, content=b"not json"),
    ],
)
async def test_client_errors_become_provider_errors(response):
    with pytest.raises(NarrativeProviderError):
        await _client(lambda request: response).generate_text("Summarize")


async def test_client_timeout_becomes_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(NarrativeProviderError, match="timeout"):
        await _client(handler).generate_text("Summarize")


def test_provider_selection(monkeypatch):
    monkeypatch.setattr(settings, "narrative_api_base", None)
    assert isinstance(get_narrative_provider(), OfflineNarrativeProvider)

    monkeypatch.setattr(settings, "narrative_api_base", BASE_URL)
    provider = get_narrative_provider()
    assert isinstance(provider, HttpNarrativeClient)
    assert provider.is_available()


async def test_action_plan_replaced_by_collaborator(sample_transactions):
    forecast = predict_financial_trends(sample_transactions)
    provider = FakeProvider(payload={"steps": ["Langkah satu", "Langkah dua", "Langkah tiga"]})

    enriched = await enrich_action_plan(forecast, "balance", provider)

    assert enriched.action_plan == ["Langkah satu", "Langkah dua", "Langkah tiga"]
    assert enriched.predictions == forecast.predictions
    assert "Trend: stable" in provider.prompts[0]


@pytest.mark.parametrize(
    "provider",
    [
        OfflineNarrativeProvider(),
        FakeProvider(payload={"steps": []}),
        FakeProvider(payload=None),
        FakeProvider(error=NarrativeProviderError("down")),
    ],
)
async def test_action_plan_keeps_deterministic_fallback(sample_transactions, provider):
    forecast = predict_financial_trends(sample_transactions)

    enriched = await enrich_action_plan(forecast, "balance", provider)

    assert enriched.action_plan == forecast.action_plan


async def test_forecast_financial_trends_offline(sample_transactions):
    forecast = await forecast_financial_trends(sample_transactions, "in", periods_ahead=2)

    assert forecast.periods == ["2026-07", "2026-08"]
    assert forecast.predictions == [1_000_000.0, 1_000_000.0]


async def test_financial_advice():
    result = simulate_scenario([1_000_000] * 4, SimulationModifiers(income_change_percent=10))

    assert await generate_financial_advice(1_000_000, "More dues", result, FakeProvider(text="  Bagus.  ")) == "Bagus."
    assert await generate_financial_advice(1_000_000, "More dues", result, FakeProvider(text="   ")) == EMPTY_ADVICE
    assert await generate_financial_advice(1_000_000, "More dues", result, FakeProvider(text=None)) == EMPTY_ADVICE
    assert await generate_financial_advice(1_000_000, "More dues", result, OfflineNarrativeProvider()) == OFFLINE_ADVICE
    failing = FakeProvider(error=NarrativeProviderError("down"))
    assert await generate_financial_advice(1_000_000, "More dues", result, failing) == OFFLINE_ADVICE


async def test_budget_from_collaborator(sample_transactions, now):
    payload = {
        "suggestions": [{"category": "konsumsi", "suggestedAmount": 250000, "reason": "Rata-rata"}],
        "totalBudget": 250000,
        "strategyNote": "Hemat",
    }

    budget = await suggest_budget(sample_transactions, FakeProvider(payload=payload), now=now)

    assert budget.suggestions[0].suggested_amount == 250_000
    assert budget.total_budget == 250_000
    assert budget.strategy_note == "Hemat"


async def test_budget_fallback_uses_verified_averages(sample_transactions, now):
    budget = await suggest_budget(sample_transactions, FakeProvider(payload={"totalBudget": -1}), now=now)

    # Only April and May fall in the 90-day window; June spending is still pending
    assert {line.category: line.suggested_amount for line in budget.suggestions} == {
        "konsumsi": 200_000,
        "sewa": 266_667,
    }
    assert budget.total_budget == 466_667
    assert budget.strategy_note == FALLBACK_BUDGET_NOTE
