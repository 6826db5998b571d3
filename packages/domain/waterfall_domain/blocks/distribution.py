"""Distribution computation block.

Runs the waterfall engine for a DistributionRequest and exposes the result
as DataFrames for reporting consumers:
1. Line items (one row per allocation fact)
2. By investor (per-tier subtotals and total)
3. By tier (total consumed in processing order)
"""

from typing import List, Optional
import pandas as pd

from .base import Block, BlockContext
from ..engine import calculate_waterfall
from ..schemas import DistributionRequest, DistributionResult, WaterfallCFG, TIER_LABELS, TIER_NAMES


LINE_ITEM_COLUMNS = [
    "investment_id",
    "investor_name",
    "is_gp",
    "tier_name",
    "tier_label",
    "tier_order",
    "amount",
]

BY_INVESTOR_COLUMNS = [
    "investment_id",
    "investor_name",
    "is_gp",
    *TIER_NAMES,
    "total",
    "distribution_pct",
]

BY_TIER_COLUMNS = [
    "tier_name",
    "tier_label",
    "tier_order",
    "total",
    "distribution_pct",
]


class DistributionBlock(Block):
    """Computes a waterfall distribution and its reporting frames.

    Inputs (from context):
        - distribution_request: DistributionRequest to calculate
        - waterfall_cfg (optional): WaterfallCFG, only when cfg_key is given

    Outputs (to context):
        - distribution_result: the DistributionResult model itself

        - distribution_line_items: DataFrame, one row per line item:
            * investment_id, investor_name, is_gp
            * tier_name, tier_label, tier_order
            * amount

        - distribution_by_investor: DataFrame, one row per requested investor:
            * investment_id, investor_name, is_gp
            * return_of_capital, preferred_return, catch_up, profit_split
            * total: Amount received this round
            * distribution_pct: Share of the round's total distributed

        - distribution_by_tier: DataFrame, one row per processed tier:
            * tier_name, tier_label, tier_order
            * total: Amount consumed by the tier
            * distribution_pct: Share of the round's total distributed

    Amounts are floats in the DataFrames; the exact Decimal values stay on
    distribution_result.

    Example:
        context = BlockContext()
        context.set("distribution_request", request)

        block = DistributionBlock()
        block.execute(context)

        by_investor_df = context.get("distribution_by_investor")
    """

    def __init__(
        self,
        request_key: str = "distribution_request",
        cfg_key: Optional[str] = None,
    ):
        """Initialize DistributionBlock.

        Args:
            request_key: Context key for DistributionRequest input
            cfg_key: Context key for WaterfallCFG (None = engine defaults)
        """
        self.request_key = request_key
        self.cfg_key = cfg_key

    def inputs(self) -> List[str]:
        if self.cfg_key:
            return [self.request_key, self.cfg_key]
        return [self.request_key]

    def outputs(self) -> List[str]:
        return [
            "distribution_result",
            "distribution_line_items",
            "distribution_by_investor",
            "distribution_by_tier",
        ]

    def execute(self, context: BlockContext) -> None:
        request: DistributionRequest = context.get(self.request_key)
        cfg: Optional[WaterfallCFG] = context.get(self.cfg_key) if self.cfg_key else None

        result = calculate_waterfall(request, cfg)

        context.set("distribution_result", result)
        context.set("distribution_line_items", self._compute_line_items(result))
        context.set("distribution_by_investor", self._compute_by_investor(result))
        context.set("distribution_by_tier", self._compute_by_tier(result))

    def _compute_line_items(self, result: DistributionResult) -> pd.DataFrame:
        rows = [
            {
                "investment_id": item.investment_id,
                "investor_name": item.investor_name,
                "is_gp": item.is_gp,
                "tier_name": item.tier_name,
                "tier_label": TIER_LABELS[item.tier_name],
                "tier_order": item.tier_order,
                "amount": float(item.amount),
            }
            for item in result.line_items
        ]
        return pd.DataFrame(rows, columns=LINE_ITEM_COLUMNS)

    def _compute_by_investor(self, result: DistributionResult) -> pd.DataFrame:
        """One row per requested investor, in request order."""
        total_distributed = result.total_distributed
        rows = []

        for summary in result.investors:
            row = {
                "investment_id": summary.investment_id,
                "investor_name": summary.investor_name,
                "is_gp": summary.is_gp,
            }
            for tier_name in TIER_NAMES:
                row[tier_name] = float(summary.amount_for(tier_name))
            row["total"] = float(summary.total)
            row["distribution_pct"] = (
                float(summary.total / total_distributed * 100)
                if total_distributed > 0
                else 0.0
            )
            rows.append(row)

        return pd.DataFrame(rows, columns=BY_INVESTOR_COLUMNS)

    def _compute_by_tier(self, result: DistributionResult) -> pd.DataFrame:
        total_distributed = result.total_distributed
        rows = [
            {
                "tier_name": tier.tier_name,
                "tier_label": TIER_LABELS[tier.tier_name],
                "tier_order": tier.tier_order,
                "total": float(tier.total),
                "distribution_pct": (
                    float(tier.total / total_distributed * 100)
                    if total_distributed > 0
                    else 0.0
                ),
            }
            for tier in result.tier_breakdown
        ]
        return pd.DataFrame(rows, columns=BY_TIER_COLUMNS)
