"""Pydantic schemas for validating structured narrative-service responses"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ActionPlanResponse(BaseModel):
    """Strategic steps suggested for a financial trend"""

    steps: List[str] = Field(..., min_length=1, description="Ordered, actionable steps")


class BudgetLine(BaseModel):
    """Allocation for one spending category"""

    category: str = Field(..., min_length=1)
    suggested_amount: float = Field(..., ge=0, alias="suggestedAmount")
    reason: str = ""

    model_config = {"populate_by_name": True}


class BudgetSuggestionResponse(BaseModel):
    """Next month's budget proposal"""

    suggestions: List[BudgetLine]
    total_budget: float = Field(..., ge=0, alias="totalBudget")
    strategy_note: str = Field("", alias="strategyNote")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_allocation(cls, allocation: Dict[str, float], note: str) -> "BudgetSuggestionResponse":
        return cls(
            suggestions=[
                BudgetLine(category=category, suggested_amount=amount, reason="Average verified monthly spend")
                for category, amount in allocation.items()
            ],
            total_budget=sum(allocation.values()),
            strategy_note=note,
        )
