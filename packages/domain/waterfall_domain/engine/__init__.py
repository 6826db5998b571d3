"""Waterfall distribution engine.

A deterministic, side-effect free calculation that allocates one cash
distribution across investors through an ordered sequence of tiers.

Architecture:
    DistributionRequest -> calculate_waterfall() -> DistributionResult

Components:
- Tier processors: one pure function per tier kind
- Rounding: pro-rata shares reconciled to the exact cent
- Orchestrator: sorts tiers, drains the pool, tracks profits so far
- Summary: folds line items into per-investor rows
- Parsing: loosely-typed payloads -> validated requests
- Ledger: caller-side carry-forward of prior accumulators

Usage:
    from waterfall_domain.engine import calculate_waterfall, carry_forward

    result = calculate_waterfall(request)
    next_investors = carry_forward(request.investors, result)
"""

from .orchestrator import calculate_waterfall
from .summary import summarize_investors
from .tiers import (
    TierAllocation,
    process_return_of_capital,
    process_preferred_return,
    process_catch_up,
    process_profit_split,
    accrued_days,
    accrued_preferred_return,
    catch_up_target,
)
from .rounding import pro_rata_shares, absorb_residual, capital_weights
from .parsing import ParsedRequest, SkippedTier, parse_request, parse_request_json
from .ledger import accumulate_priors, apply_priors, carry_forward

__all__ = [
    "calculate_waterfall",
    "summarize_investors",
    "TierAllocation",
    "process_return_of_capital",
    "process_preferred_return",
    "process_catch_up",
    "process_profit_split",
    "accrued_days",
    "accrued_preferred_return",
    "catch_up_target",
    "pro_rata_shares",
    "absorb_residual",
    "capital_weights",
    "ParsedRequest",
    "SkippedTier",
    "parse_request",
    "parse_request_json",
    "accumulate_priors",
    "apply_priors",
    "carry_forward",
]
