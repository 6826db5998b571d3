"""Investor returns computation block.

Combines a round's distribution with the prior-round accumulators carried on
each investor to report cumulative position metrics:
- Cumulative distributions: prior rounds + this round
- Unreturned capital: called capital not yet returned after this round
- DPI (Distributions to Paid-In): cumulative distributions / called capital
"""

from typing import List, Optional
from decimal import Decimal
import pandas as pd

from .base import Block, BlockContext
from ..schemas import DistributionRequest, DistributionResult, DistributionReportCFG


BY_INVESTOR_COLUMNS = [
    "investment_id",
    "investor_name",
    "investor_class",
    "called_amount",
    "prior_distributions",
    "this_round",
    "cumulative_distributions",
    "unreturned_capital",
    "dpi",
]

BY_CLASS_COLUMNS = [
    "investor_class",
    "called_amount",
    "prior_distributions",
    "this_round",
    "cumulative_distributions",
    "unreturned_capital",
    "dpi",
]


class InvestorReturnsBlock(Block):
    """Computes cumulative return metrics per investor.

    Inputs (from context):
        - distribution_request: DistributionRequest (called capital, priors)
        - distribution_result: DistributionResult from DistributionBlock
        - report_cfg: DistributionReportCFG

    Outputs (to context):
        - returns_by_investor: DataFrame with return metrics by investor:
            * investment_id, investor_name
            * investor_class: "GP" or "LP"
            * called_amount: Contributed capital
            * prior_distributions: Paid in previous rounds (all tiers)
            * this_round: Paid in this round
            * cumulative_distributions: prior_distributions + this_round
            * unreturned_capital: Capital still owed after this round
            * dpi: cumulative_distributions / called_amount (if include_dpi=True)

        - returns_by_class: DataFrame aggregated by investor class
          (empty if show_by_class=False)

        - returns_summary: DataFrame with single row of fund-level totals

    Example:
        # After running DistributionBlock
        context.set("report_cfg", DistributionReportCFG(include_dpi=True))

        block = InvestorReturnsBlock()
        block.execute(context)

        returns_df = context.get("returns_by_investor")
    """

    def __init__(
        self,
        request_key: str = "distribution_request",
        distribution_key: str = "distribution_result",
        config_key: str = "report_cfg",
    ):
        """Initialize InvestorReturnsBlock.

        Args:
            request_key: Context key for DistributionRequest
            distribution_key: Context key for the DistributionResult
            config_key: Context key for DistributionReportCFG
        """
        self.request_key = request_key
        self.distribution_key = distribution_key
        self.config_key = config_key

    def inputs(self) -> List[str]:
        return [self.request_key, self.distribution_key, self.config_key]

    def outputs(self) -> List[str]:
        return [
            "returns_by_investor",
            "returns_by_class",
            "returns_summary",
        ]

    def execute(self, context: BlockContext) -> None:
        request: DistributionRequest = context.get(self.request_key)
        result: DistributionResult = context.get(self.distribution_key)
        config: DistributionReportCFG = context.get(self.config_key)

        by_investor_df = self._compute_by_investor(request, result, config)
        context.set("returns_by_investor", by_investor_df)

        if config.show_by_class:
            by_class_df = self._compute_by_class(by_investor_df, config)
        else:
            by_class_df = pd.DataFrame(columns=BY_CLASS_COLUMNS)
        context.set("returns_by_class", by_class_df)

        context.set("returns_summary", self._compute_summary(by_investor_df, config))

    def _compute_by_investor(
        self,
        request: DistributionRequest,
        result: DistributionResult,
        config: DistributionReportCFG,
    ) -> pd.DataFrame:
        """Join this round's payouts onto the investors' ledger positions.

        Args:
            request: DistributionRequest with investors and priors
            result: DistributionResult for this round
            config: DistributionReportCFG for row filtering and metrics

        Returns:
            DataFrame with return metrics by investor
        """
        this_round = {s.investment_id: s.total for s in result.investors}
        returned_this_round = {s.investment_id: s.return_of_capital for s in result.investors}

        rows = []
        for inv in request.investors:
            paid_now = this_round.get(inv.investment_id, Decimal("0"))
            if not config.include_zero_rows and paid_now == 0:
                continue

            cumulative = inv.prior_total + paid_now
            unreturned = max(
                Decimal("0"),
                inv.unreturned_capital - returned_this_round.get(inv.investment_id, Decimal("0")),
            )

            dpi = None
            if config.include_dpi and inv.called_amount > 0:
                dpi = float(cumulative / inv.called_amount)

            rows.append({
                "investment_id": inv.investment_id,
                "investor_name": inv.investor_name,
                "investor_class": "GP" if inv.is_gp else "LP",
                "called_amount": float(inv.called_amount),
                "prior_distributions": float(inv.prior_total),
                "this_round": float(paid_now),
                "cumulative_distributions": float(cumulative),
                "unreturned_capital": float(unreturned),
                "dpi": dpi,
            })

        return pd.DataFrame(rows, columns=BY_INVESTOR_COLUMNS)

    def _compute_by_class(
        self, by_investor_df: pd.DataFrame, config: DistributionReportCFG
    ) -> pd.DataFrame:
        """Aggregate returns by investor class (GP vs LP)."""
        if by_investor_df.empty:
            return pd.DataFrame(columns=BY_CLASS_COLUMNS)

        by_class = by_investor_df.groupby("investor_class").agg({
            "called_amount": "sum",
            "prior_distributions": "sum",
            "this_round": "sum",
            "cumulative_distributions": "sum",
            "unreturned_capital": "sum",
        }).reset_index()

        # DPI from class totals
        by_class["dpi"] = by_class.apply(
            lambda row: (
                row["cumulative_distributions"] / row["called_amount"]
                if config.include_dpi and row["called_amount"] > 0
                else None
            ),
            axis=1,
        )

        return by_class[BY_CLASS_COLUMNS]

    def _compute_summary(
        self, by_investor_df: pd.DataFrame, config: DistributionReportCFG
    ) -> pd.DataFrame:
        """Single row of fund-level totals."""
        if by_investor_df.empty:
            return pd.DataFrame([{
                "total_called": 0.0,
                "total_this_round": 0.0,
                "total_cumulative": 0.0,
                "total_unreturned_capital": 0.0,
                "aggregate_dpi": None,
            }])

        total_called = by_investor_df["called_amount"].sum()
        total_cumulative = by_investor_df["cumulative_distributions"].sum()

        aggregate_dpi: Optional[float] = None
        if config.include_dpi and total_called > 0:
            aggregate_dpi = float(total_cumulative / total_called)

        return pd.DataFrame([{
            "total_called": float(total_called),
            "total_this_round": float(by_investor_df["this_round"].sum()),
            "total_cumulative": float(total_cumulative),
            "total_unreturned_capital": float(by_investor_df["unreturned_capital"].sum()),
            "aggregate_dpi": aggregate_dpi,
        }])
