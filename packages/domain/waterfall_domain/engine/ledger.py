"""Round-over-round carry-forward helpers.

The engine is stateless: round N+1 only sees round N through the prior_*
accumulators on each Investor. These helpers are for the caller that owns
the ledger. They fold historical line items or a finished result into the
next round's investors. The engine itself never calls them.
"""

from typing import Dict, Iterable, List, Mapping, Sequence
from decimal import Decimal

from ..schemas import (
    DistributionResult,
    Investor,
    LineItem,
    TIER_NAMES,
    ZERO,
    round_currency,
)

PriorTotals = Dict[str, Decimal]
"""Cumulative payout per tier kind, keyed by tier_name."""


def _prior_field(tier_name: str) -> str:
    return f"prior_{tier_name}"


def accumulate_priors(line_items: Iterable[LineItem]) -> Dict[str, PriorTotals]:
    """Sum historical line items per investment and tier kind.

    Returns:
        {investment_id: {tier_name: cumulative amount}} with every tier kind
        present for each investment that appears in the line items
    """
    priors: Dict[str, PriorTotals] = {}
    for item in line_items:
        totals = priors.setdefault(
            item.investment_id, {name: ZERO for name in TIER_NAMES}
        )
        totals[item.tier_name] = round_currency(totals[item.tier_name] + item.amount)
    return priors


def apply_priors(
    investors: Sequence[Investor],
    priors: Mapping[str, PriorTotals],
) -> List[Investor]:
    """Set each investor's prior accumulators from cumulative ledger totals.

    Investors with no ledger history keep zero priors. Inputs are not
    mutated; new Investor values are returned.
    """
    updated = []
    for inv in investors:
        totals = priors.get(inv.investment_id, {})
        updated.append(inv.model_copy(update={
            _prior_field(name): totals.get(name, ZERO) for name in TIER_NAMES
        }))
    return updated


def carry_forward(
    investors: Sequence[Investor],
    result: DistributionResult,
) -> List[Investor]:
    """Add a round's per-kind payouts to each investor's prior accumulators.

    Example:
        round1 = calculate_waterfall(request1)
        next_investors = carry_forward(request1.investors, round1)
        round2 = calculate_waterfall(DistributionRequest(
            distribution_date=date(2026, 1, 1),
            total_distributable=Decimal("600000"),
            investors=next_investors,
            tiers=request1.tiers,
        ))
    """
    updated = []
    for inv in investors:
        summary = result.summary_for(inv.investment_id)
        if summary is None:
            updated.append(inv)
            continue
        updated.append(inv.model_copy(update={
            _prior_field(name): round_currency(
                getattr(inv, _prior_field(name)) + summary.amount_for(name)
            )
            for name in TIER_NAMES
        }))
    return updated
