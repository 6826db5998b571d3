"""Configuration models for the engine and the reporting blocks.

Configuration is explicit: CFG objects are passed to the engine or placed in
a BlockContext. Nothing is read from the environment.
"""

from typing import Literal
from pydantic import Field

from .base import DomainModel


class WaterfallCFG(DomainModel):
    """Engine configuration.

    The defaults reproduce the standard calculation (actual days over a
    365-day year). Funds whose LPA specifies actual/360 accrual can set
    ``day_count_basis=360``.

    Example:
        calculate_waterfall(request, WaterfallCFG(day_count_basis=360))
    """

    day_count_basis: Literal[365, 360] = Field(
        default=365,
        description="Denominator (days per year) for preferred return accrual"
    )


class DistributionReportCFG(DomainModel):
    """Configuration for the reporting blocks.

    Example:
        DistributionReportCFG(
            include_zero_rows=False,  # Hide investors with no activity
            include_dpi=True,
            show_by_class=True,
        )
    """

    include_zero_rows: bool = Field(
        default=True,
        description="Keep investors with no payout this round in by-investor frames"
    )

    include_dpi: bool = Field(
        default=True,
        description="Calculate DPI (cumulative distributions / called capital)"
    )

    show_by_class: bool = Field(
        default=True,
        description="Aggregate returns by investor class (GP vs LP)"
    )
