"""Investor position models.

An Investor is one investment position in the fund being distributed. It
carries the called capital, the contribution date used for preferred-return
accrual, and four "prior" accumulators with the cumulative payouts from
previous distribution rounds.

The prior accumulators are supplied by the caller from ledger state. The
engine never derives them from history; see ``waterfall_domain.engine.ledger``
for the helpers that fold a round's output into the next round's investors.
"""

from datetime import date
from decimal import Decimal
from pydantic import ConfigDict, Field

from .base import DomainModel, InvestmentId, MoneyAmount


class Investor(DomainModel):
    """A single investment position entering a distribution round.

    GP/LP classification drives tier eligibility:
        - Return of capital: everyone with unreturned capital
        - Preferred return: LPs only
        - Catch-up: GPs only
        - Profit split: GP pool to GPs, LP pool to LPs

    Investors are frozen so a calculation can never mutate its inputs.

    Example:
        Investor(
            investment_id="lp-a",
            investor_name="LP Alpha",
            is_gp=False,
            called_amount=Decimal("500000"),
            contribution_date=date(2025, 1, 1),
            prior_return_of_capital=Decimal("400000"),
        )
    """

    model_config = ConfigDict(frozen=True)

    investment_id: InvestmentId = Field(
        description="Unique investment identifier"
    )

    investor_name: str = Field(
        description="Display name of the investor"
    )

    is_gp: bool = Field(
        default=False,
        description="True for General Partner positions, False for Limited Partners"
    )

    called_amount: MoneyAmount = Field(
        default=Decimal("0"),
        description="Contributed / called capital"
    )

    contribution_date: date = Field(
        description="Date capital was contributed (preferred return accrues from here)"
    )

    prior_return_of_capital: MoneyAmount = Field(
        default=Decimal("0"),
        description="Capital returned in previous rounds"
    )

    prior_preferred_return: MoneyAmount = Field(
        default=Decimal("0"),
        description="Preferred return paid in previous rounds"
    )

    prior_catch_up: MoneyAmount = Field(
        default=Decimal("0"),
        description="Catch-up paid in previous rounds"
    )

    prior_profit_split: MoneyAmount = Field(
        default=Decimal("0"),
        description="Profit split paid in previous rounds"
    )

    @property
    def prior_total(self) -> Decimal:
        """Cumulative payout across all tiers from previous rounds."""
        return (
            self.prior_return_of_capital
            + self.prior_preferred_return
            + self.prior_catch_up
            + self.prior_profit_split
        )

    @property
    def unreturned_capital(self) -> Decimal:
        """Called capital not yet returned by previous rounds (never negative)."""
        return max(Decimal("0"), self.called_amount - self.prior_return_of_capital)
