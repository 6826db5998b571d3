"""Distribution tier configurations using discriminated unions.

A waterfall is an ordered sequence of tiers. Each tier kind has its own
parameters:
- Return of capital: no parameters
- Preferred return: annualized simple rate
- Catch-up: GP target share of cumulative profit
- Profit split: GP and LP shares of the residual pool

Using a discriminated union on ``tier_name`` keeps the set of kinds closed.
Unrecognized kinds are filtered out at the parsing boundary
(``waterfall_domain.engine.parsing``) and never reach the engine.
"""

from typing import Annotated, Dict, Literal, Union
from decimal import Decimal
from pydantic import Field

from .base import DomainModel, Percentage, Rate


TierName = Literal["return_of_capital", "preferred_return", "catch_up", "profit_split"]

TIER_NAMES = ("return_of_capital", "preferred_return", "catch_up", "profit_split")

TIER_LABELS: Dict[str, str] = {
    "return_of_capital": "Return of Capital",
    "preferred_return": "Pref Return",
    "catch_up": "Catch-Up",
    "profit_split": "Profit Split",
}


# =============================================================================
# Return of Capital
# =============================================================================

class CapitalReturnTier(DomainModel):
    """Return contributed capital pro-rata by unreturned amount.

    Every investor (GP and LP) with called capital above its prior returned
    capital participates. When the pool cannot cover the total need, each
    investor receives ``available * need / total_need``.
    """

    tier_name: Literal["return_of_capital"] = "return_of_capital"

    tier_order: int = Field(
        description="Processing sequence (ascending, need not be contiguous)"
    )


# =============================================================================
# Preferred Return
# =============================================================================

class PreferredReturnTier(DomainModel):
    """Simple, non-compounding preferred return to LPs.

    Accrual per LP:
        called_amount * pref_rate * days / 365

    where days is the actual day count from contribution date to distribution
    date (floored at zero). GP positions never receive preferred return.

    Example:
        $500K called on 2025-01-01, 8% pref, distributed 2026-01-01:
        500,000 * 0.08 * 365 / 365 = $40,000
    """

    tier_name: Literal["preferred_return"] = "preferred_return"

    tier_order: int = Field(
        description="Processing sequence (ascending, need not be contiguous)"
    )

    pref_rate: Rate = Field(
        default=Decimal("0"),
        description="Annualized preferred return rate (e.g., 0.08 = 8%)"
    )


# =============================================================================
# Catch-Up
# =============================================================================

class CatchUpTier(DomainModel):
    """GP catch-up to a target share of cumulative profit.

    Target cumulative catch-up:
        profits_so_far * catch_up_pct / (1 - catch_up_pct)

    where profits_so_far is the preferred return and catch-up consumed by
    earlier tiers of the same round. A catch_up_pct of 1 or more has no
    finite target and is rejected.

    Example:
        $72K pref paid, 20% catch-up: 72,000 * 0.2 / 0.8 = $18,000 to GP
    """

    tier_name: Literal["catch_up"] = "catch_up"

    tier_order: int = Field(
        description="Processing sequence (ascending, need not be contiguous)"
    )

    catch_up_pct: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        lt=1,
        description="GP target share of cumulative profit (0.0 to <1.0)"
    )


# =============================================================================
# Profit Split
# =============================================================================

class ProfitSplitTier(DomainModel):
    """Split the residual pool between GP and LP groups.

    The GP pool is ``remaining * gp_split_pct`` and the LP pool is
    ``remaining * lp_split_pct``. A pool whose group has no investors is left
    undistributed rather than redirected to the other group.

    Shares are expected to sum to 1.0 but this is not enforced. Anything
    short of 1.0 stays undistributed; above 1.0 the LP pool is capped at what
    the GP pool leaves.
    """

    tier_name: Literal["profit_split"] = "profit_split"

    tier_order: int = Field(
        description="Processing sequence (ascending, need not be contiguous)"
    )

    gp_split_pct: Percentage = Field(
        default=Decimal("0"),
        description="GP share of the residual pool"
    )

    lp_split_pct: Percentage = Field(
        default=Decimal("1"),
        description="LP share of the residual pool"
    )


# =============================================================================
# Discriminated Union
# =============================================================================

TierConfig = Annotated[
    Union[
        CapitalReturnTier,
        PreferredReturnTier,
        CatchUpTier,
        ProfitSplitTier,
    ],
    Field(discriminator='tier_name')
]
"""Discriminated union of all tier configurations.

The 'tier_name' field serves as the discriminator, allowing Pydantic to
validate the right parameters for each kind:

    PreferredReturnTier(tier_order=2, pref_rate=Decimal("0.08"))

    # Invalid - catch-up has no finite target at 100%
    CatchUpTier(tier_order=3, catch_up_pct=Decimal("1.0"))
"""
