"""Tier processors.

One pure function per tier kind. Each consumes from the remaining pool and
returns the line items it produced plus the amount consumed. Processors
never mutate their inputs and never raise for business edge cases: no
recipients, no need, or an empty pool all resolve to "consumes nothing".
"""

from typing import List, Optional, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ..schemas import (
    Investor,
    LineItem,
    CapitalReturnTier,
    PreferredReturnTier,
    CatchUpTier,
    ProfitSplitTier,
    ZERO,
    round_currency,
)
from .rounding import Allocation, absorb_residual, capital_weights, pro_rata_shares


@dataclass
class TierAllocation:
    """What one tier paid out: its line items and the total consumed."""

    items: List[LineItem] = field(default_factory=list)
    consumed: Decimal = ZERO


def _line_items(allocations: List[Allocation], tier_name: str, tier_order: int) -> List[LineItem]:
    return [
        LineItem(
            investment_id=investor.investment_id,
            investor_name=investor.investor_name,
            is_gp=investor.is_gp,
            tier_name=tier_name,
            tier_order=tier_order,
            amount=amount,
        )
        for investor, amount in allocations
    ]


def _allocate_by_need(
    needs: Sequence[tuple],
    remaining: Decimal,
    tier_name: str,
    tier_order: int,
) -> TierAllocation:
    """Shared pro-rata-by-need allocation for capital and preferred return."""
    total_need = sum((need for _, need in needs), ZERO)
    if total_need <= 0 or remaining <= 0:
        return TierAllocation()

    available = min(remaining, total_need)
    shares = pro_rata_shares(needs, available, total_need)
    first_eligible = next((inv for inv, need in needs if need > 0), None)
    shares = absorb_residual(shares, available, fallback=first_eligible)

    items = _line_items(shares, tier_name, tier_order)
    return TierAllocation(items=items, consumed=round_currency(sum((i.amount for i in items), ZERO)))


# =============================================================================
# Return of Capital
# =============================================================================

def process_return_of_capital(
    investors: Sequence[Investor],
    remaining: Decimal,
    tier: CapitalReturnTier,
) -> TierAllocation:
    """Return unreturned capital pro-rata by need.

    need = max(0, called_amount - prior_return_of_capital)

    Example:
        Two LPs with $500K need each, $800K remaining:
        each receives 800,000 * 500,000 / 1,000,000 = $400,000
    """
    needs = [(inv, inv.unreturned_capital) for inv in investors]
    return _allocate_by_need(needs, remaining, tier.tier_name, tier.tier_order)


# =============================================================================
# Preferred Return
# =============================================================================

def accrued_days(contribution_date: date, distribution_date: date) -> int:
    """Actual days from contribution to distribution, floored at zero."""
    return max(0, (distribution_date - contribution_date).days)


def accrued_preferred_return(
    investor: Investor,
    pref_rate: Decimal,
    distribution_date: date,
    day_count_basis: int = 365,
) -> Decimal:
    """Simple (non-compounding) preferred return accrued to the distribution date, to the cent."""
    days = accrued_days(investor.contribution_date, distribution_date)
    return round_currency(investor.called_amount * pref_rate * days / day_count_basis)


def process_preferred_return(
    investors: Sequence[Investor],
    remaining: Decimal,
    tier: PreferredReturnTier,
    distribution_date: date,
    day_count_basis: int = 365,
) -> TierAllocation:
    """Pay accrued preferred return to LPs pro-rata by unpaid accrual.

    need = max(0, accrued - prior_preferred_return)

    GP positions are excluded entirely.
    """
    if remaining <= 0 or tier.pref_rate <= 0:
        return TierAllocation()

    needs = []
    for inv in investors:
        if inv.is_gp:
            continue
        accrued = accrued_preferred_return(inv, tier.pref_rate, distribution_date, day_count_basis)
        needs.append((inv, max(ZERO, accrued - inv.prior_preferred_return)))

    return _allocate_by_need(needs, remaining, tier.tier_name, tier.tier_order)


# =============================================================================
# Catch-Up
# =============================================================================

def catch_up_target(profits_so_far: Decimal, catch_up_pct: Decimal) -> Decimal:
    """Cumulative GP catch-up that gives the GP catch_up_pct of total profit."""
    return round_currency(profits_so_far * catch_up_pct / (1 - catch_up_pct))


def process_catch_up(
    investors: Sequence[Investor],
    remaining: Decimal,
    tier: CatchUpTier,
    profits_so_far: Decimal,
) -> TierAllocation:
    """Catch the GP up to its target share of profit distributed so far.

    The need is a single pooled target across all GP positions, so it is
    split by called-capital weight within the GP group (evenly if the group
    has no capital).

    Example:
        $72K of preferred return paid, 20% catch-up, no prior catch-up:
        target = 72,000 * 0.2 / 0.8 = $18,000
    """
    if remaining <= 0 or tier.catch_up_pct <= 0:
        return TierAllocation()

    gp_investors = [inv for inv in investors if inv.is_gp]
    if not gp_investors:
        return TierAllocation()

    gp_prior_catch_up = sum((inv.prior_catch_up for inv in gp_investors), ZERO)
    target = catch_up_target(profits_so_far, tier.catch_up_pct)
    need = max(ZERO, round_currency(target - gp_prior_catch_up))
    if need <= 0:
        return TierAllocation()

    available = min(remaining, need)
    shares = pro_rata_shares(capital_weights(gp_investors), available)
    shares = absorb_residual(shares, available, fallback=gp_investors[0])

    items = _line_items(shares, tier.tier_name, tier.tier_order)
    return TierAllocation(items=items, consumed=round_currency(available))


# =============================================================================
# Profit Split
# =============================================================================

def process_profit_split(
    investors: Sequence[Investor],
    remaining: Decimal,
    tier: ProfitSplitTier,
) -> TierAllocation:
    """Split the remaining pool into GP and LP pools, each by capital weight.

    A pool is only funded when its group has at least one investor; an
    unfunded pool stays in the round's undistributed remainder. GP items
    precede LP items, and the combined list is reconciled to the funded
    pools as a whole.

    Example:
        $410K remaining, 20/80 split, one GP and one LP:
        GP $82,000, LP $328,000
    """
    if remaining <= 0:
        return TierAllocation()

    gp_investors = [inv for inv in investors if inv.is_gp]
    lp_investors = [inv for inv in investors if not inv.is_gp]

    gp_pool = round_currency(remaining * tier.gp_split_pct) if gp_investors else ZERO
    lp_pool = round_currency(remaining * tier.lp_split_pct) if lp_investors else ZERO
    # Shares summing above 1, or half-cent rounding on both pools, overshoot the pool
    lp_pool = min(lp_pool, remaining - gp_pool)
    target = gp_pool + lp_pool

    shares = (
        pro_rata_shares(capital_weights(gp_investors), gp_pool)
        + pro_rata_shares(capital_weights(lp_investors), lp_pool)
    )

    fallback: Optional[Investor] = None
    if gp_pool > 0:
        fallback = gp_investors[0]
    elif lp_pool > 0:
        fallback = lp_investors[0]
    shares = absorb_residual(shares, target, fallback=fallback)

    items = _line_items(shares, tier.tier_name, tier.tier_order)
    return TierAllocation(items=items, consumed=round_currency(target))
