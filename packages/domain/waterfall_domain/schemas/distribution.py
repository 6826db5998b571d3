"""Distribution request and result models.

A DistributionRequest is the single input to the waterfall engine: one cash
distribution poured through an ordered set of tiers across a set of
investors. A DistributionResult is its complete output:
- Total distributed and amount left undistributed
- Total consumed per tier, in processing order
- One summary row per requested investor
- The flat list of line items everything else is derived from

Both sides serialize to JSON with ``model_dump_json`` so callers can store
input/output snapshots next to each round.
"""

from typing import List, Optional
from decimal import Decimal
from datetime import date
from pydantic import Field, field_validator

from .base import DomainModel, InvestmentId, MoneyAmount
from .investors import Investor
from .tiers import TierConfig, TierName


# =============================================================================
# Request
# =============================================================================

class DistributionRequest(DomainModel):
    """One cash distribution event to run through the waterfall.

    Example:
        DistributionRequest(
            distribution_date=date(2026, 1, 1),
            total_distributable=Decimal("1200000"),
            investors=[lp_a, lp_b],
            tiers=[
                CapitalReturnTier(tier_order=1),
                PreferredReturnTier(tier_order=2, pref_rate=Decimal("0.08")),
                CatchUpTier(tier_order=3, catch_up_pct=Decimal("0.2")),
                ProfitSplitTier(tier_order=4, gp_split_pct=Decimal("0.2"), lp_split_pct=Decimal("0.8")),
            ],
        )
    """

    distribution_date: date = Field(
        description="Date of the distribution (preferred return accrues up to here)"
    )

    total_distributable: MoneyAmount = Field(
        description="Cash available for this round"
    )

    investors: List[Investor] = Field(
        default_factory=list,
        description="Investment positions with prior-round accumulators"
    )

    tiers: List[TierConfig] = Field(
        default_factory=list,
        description="Tier configurations (processed by ascending tier_order)"
    )

    @field_validator('investors')
    @classmethod
    def validate_unique_investments(cls, investors: List[Investor]) -> List[Investor]:
        """Investment identifiers must be unique within a request."""
        seen = set()
        for investor in investors:
            if investor.investment_id in seen:
                raise ValueError(f"Duplicate investment_id: {investor.investment_id}")
            seen.add(investor.investment_id)
        return investors


# =============================================================================
# Result
# =============================================================================

class LineItem(DomainModel):
    """One allocation fact: an amount paid to one investor by one tier."""

    investment_id: InvestmentId
    investor_name: str
    is_gp: bool
    tier_name: TierName
    tier_order: int
    amount: MoneyAmount = Field(
        description="Amount allocated, rounded to the cent"
    )


class TierBreakdown(DomainModel):
    """Total consumed by one processed tier."""

    tier_name: TierName
    tier_order: int
    total: MoneyAmount


class InvestorSummary(DomainModel):
    """Per-investor totals for one round, by tier kind."""

    investment_id: InvestmentId
    investor_name: str
    is_gp: bool
    return_of_capital: MoneyAmount = Decimal("0")
    preferred_return: MoneyAmount = Decimal("0")
    catch_up: MoneyAmount = Decimal("0")
    profit_split: MoneyAmount = Decimal("0")
    total: MoneyAmount = Decimal("0")

    def amount_for(self, tier_name: str) -> Decimal:
        """Subtotal for a tier kind (e.g., "catch_up")."""
        return getattr(self, tier_name)


class DistributionResult(DomainModel):
    """Output of one waterfall calculation.

    Invariants:
        total_distributed + remaining_undistributed == total_distributable
        sum(line_items.amount) == total_distributed
    """

    total_distributed: MoneyAmount
    remaining_undistributed: MoneyAmount
    tier_breakdown: List[TierBreakdown] = Field(default_factory=list)
    investors: List[InvestorSummary] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)

    def summary_for(self, investment_id: str) -> Optional[InvestorSummary]:
        """Find the summary row for an investment, or None."""
        return next(
            (s for s in self.investors if s.investment_id == investment_id),
            None
        )

    def tier_total(self, tier_name: str) -> Decimal:
        """Total consumed by every processed tier of a kind (0 if none ran)."""
        return sum(
            (t.total for t in self.tier_breakdown if t.tier_name == tier_name),
            Decimal("0")
        )

    def line_items_for(
        self,
        investment_id: Optional[str] = None,
        tier_name: Optional[str] = None,
    ) -> List[LineItem]:
        """Filter line items by investment and/or tier kind."""
        return [
            item for item in self.line_items
            if (investment_id is None or item.investment_id == investment_id)
            and (tier_name is None or item.tier_name == tier_name)
        ]
