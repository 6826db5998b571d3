"""Base classes and type system for distribution domain models.

This module provides the foundational types, validators, and base classes
used throughout the waterfall schema system.
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Annotated
from pydantic import BaseModel, Field, ConfigDict

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Validation on assignment for runtime safety
    - Support for Decimal and date types
    - Enum value serialization
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

# Cent-exact sums of amounts below this stay well inside the default
# 28-digit decimal context.
MAX_MONEY_AMOUNT = Decimal("1e18")

MoneyAmount = Annotated[
    Decimal,
    Field(ge=0, lt=MAX_MONEY_AMOUNT, description="Currency amount (non-negative, below 10^18)")
]

Percentage = Annotated[
    Decimal,
    Field(ge=0, le=1, description="Percentage as decimal (0.0 to 1.0)")
]

Rate = Annotated[
    Decimal,
    Field(ge=0, description="Annualized rate as decimal (e.g., 0.08 = 8%)")
]


# =============================================================================
# ID Conventions
# =============================================================================

InvestmentId = Annotated[
    str,
    Field(
        min_length=1,
        description="Unique investment identifier (UUID or ledger key)"
    )
]


# =============================================================================
# Currency Rounding
# =============================================================================

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round_currency(amount) -> Decimal:
    """Round an amount to the cent, halves away from zero.

    Accepts anything Decimal can represent exactly (int, str, Decimal).
    Precision grows with the amount so large intermediates (e.g. accrued
    preference at a very high rate) still quantize.
    """
    amount = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
