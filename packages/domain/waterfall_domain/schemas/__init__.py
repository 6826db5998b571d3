"""Distribution domain schemas.

This package contains all Pydantic models for the waterfall domain layer:
- Base types and conventions
- Investor positions with prior-round accumulators
- Tier configurations (discriminated union)
- Distribution requests and results
- Engine and reporting configuration

Usage:
    from waterfall_domain.schemas import (
        Investor, DistributionRequest, DistributionResult,
        CapitalReturnTier, PreferredReturnTier, CatchUpTier, ProfitSplitTier,
    )
"""

# Base types
from .base import (
    DomainModel,
    MoneyAmount,
    MAX_MONEY_AMOUNT,
    Percentage,
    Rate,
    InvestmentId,
    CENT,
    ZERO,
    round_currency,
)

# Investors
from .investors import Investor

# Tiers
from .tiers import (
    TierName,
    TIER_NAMES,
    TIER_LABELS,
    CapitalReturnTier,
    PreferredReturnTier,
    CatchUpTier,
    ProfitSplitTier,
    TierConfig,
)

# Distribution
from .distribution import (
    DistributionRequest,
    LineItem,
    TierBreakdown,
    InvestorSummary,
    DistributionResult,
)

# Configuration
from .config import (
    WaterfallCFG,
    DistributionReportCFG,
)

__all__ = [
    # Base types
    "DomainModel",
    "MoneyAmount",
    "MAX_MONEY_AMOUNT",
    "Percentage",
    "Rate",
    "InvestmentId",
    "CENT",
    "ZERO",
    "round_currency",
    # Investors
    "Investor",
    # Tiers
    "TierName",
    "TIER_NAMES",
    "TIER_LABELS",
    "CapitalReturnTier",
    "PreferredReturnTier",
    "CatchUpTier",
    "ProfitSplitTier",
    "TierConfig",
    # Distribution
    "DistributionRequest",
    "LineItem",
    "TierBreakdown",
    "InvestorSummary",
    "DistributionResult",
    # Configuration
    "WaterfallCFG",
    "DistributionReportCFG",
]
