"""Waterfall orchestrator.

Pours one distribution through its tiers in ascending tier_order:

    not started -> processing tier i -> exhausted | completed

Before each tier the remaining pool is checked; once it reaches zero the
remaining tiers are skipped and no breakdown entries are emitted for them.
Preferred return and catch-up consumption feed a running profits-so-far
accumulator that the catch-up tier targets against. Capital return and
profit split do not count as profit.
"""

import logging
from typing import List, Optional

from ..schemas import (
    DistributionRequest,
    DistributionResult,
    LineItem,
    TierBreakdown,
    WaterfallCFG,
    CapitalReturnTier,
    PreferredReturnTier,
    CatchUpTier,
    ProfitSplitTier,
    ZERO,
    round_currency,
)
from .summary import summarize_investors
from .tiers import (
    TierAllocation,
    process_return_of_capital,
    process_preferred_return,
    process_catch_up,
    process_profit_split,
)

logger = logging.getLogger(__name__)


def calculate_waterfall(
    request: DistributionRequest,
    cfg: Optional[WaterfallCFG] = None,
) -> DistributionResult:
    """Allocate one cash distribution across investors through the tiers.

    Pure and deterministic: the distribution date is explicit input, so the
    same request always yields the same result.

    Args:
        request: Distribution date, cash available, investors and tiers
        cfg: Engine configuration (defaults to WaterfallCFG())

    Returns:
        DistributionResult with one summary row per requested investor

    Example:
        result = calculate_waterfall(request)
        result.summary_for("lp-a").preferred_return  # Decimal("40000.00")
    """
    cfg = cfg or WaterfallCFG()
    investors = request.investors
    total_distributable = round_currency(request.total_distributable)

    if total_distributable <= 0 or not investors or not request.tiers:
        logger.debug(
            "Nothing to distribute: total=%s investors=%d tiers=%d",
            total_distributable, len(investors), len(request.tiers),
        )
        return DistributionResult(
            total_distributed=ZERO,
            remaining_undistributed=total_distributable,
            tier_breakdown=[],
            investors=summarize_investors(investors, []),
            line_items=[],
        )

    # sorted() is stable: equal tier_order keeps input order
    sorted_tiers = sorted(request.tiers, key=lambda t: t.tier_order)

    line_items: List[LineItem] = []
    tier_breakdown: List[TierBreakdown] = []
    remaining = total_distributable
    profits_so_far = ZERO

    for tier in sorted_tiers:
        if remaining <= 0:
            logger.debug("Pool exhausted before tier %s (order %d)", tier.tier_name, tier.tier_order)
            break

        allocation: TierAllocation
        if isinstance(tier, CapitalReturnTier):
            allocation = process_return_of_capital(investors, remaining, tier)
        elif isinstance(tier, PreferredReturnTier):
            allocation = process_preferred_return(
                investors, remaining, tier, request.distribution_date, cfg.day_count_basis
            )
            profits_so_far += allocation.consumed
        elif isinstance(tier, CatchUpTier):
            allocation = process_catch_up(investors, remaining, tier, profits_so_far)
            profits_so_far += allocation.consumed
        elif isinstance(tier, ProfitSplitTier):
            allocation = process_profit_split(investors, remaining, tier)
        else:
            logger.debug("Skipping unsupported tier %r", tier)
            continue

        line_items.extend(allocation.items)
        remaining = round_currency(remaining - allocation.consumed)
        tier_breakdown.append(TierBreakdown(
            tier_name=tier.tier_name,
            tier_order=tier.tier_order,
            total=allocation.consumed,
        ))
        logger.debug(
            "Tier %s (order %d) consumed %s, %s remaining",
            tier.tier_name, tier.tier_order, allocation.consumed, remaining,
        )

    return DistributionResult(
        total_distributed=round_currency(total_distributable - remaining),
        remaining_undistributed=remaining,
        tier_breakdown=tier_breakdown,
        investors=summarize_investors(investors, line_items),
        line_items=line_items,
    )
