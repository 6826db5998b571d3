"""Computation blocks for distribution reporting.

This package contains the reporting layer that turns a DistributionRequest
into DataFrames suitable for statements, exports or other consumption.

Architecture:
    Schemas (data models) → Engine (calculation) → Blocks (DataFrames)

Key concepts:
- Blocks are reusable computation units with explicit dependencies
- Each block declares its inputs and outputs
- Dependency graph enables topological execution
- Tabular outputs are pandas DataFrames for downstream consumption

Available blocks:
- DistributionBlock: Runs the waterfall and tabulates line items, investors, tiers
- InvestorReturnsBlock: Cumulative distributions, unreturned capital and DPI

Usage:
    from waterfall_domain.blocks import BlockContext, BlockExecutor, DistributionBlock

    context = BlockContext()
    context.set("distribution_request", request)

    BlockExecutor([DistributionBlock()]).execute(context)

    by_investor_df = context.get("distribution_by_investor")
"""

from .base import Block, BlockExecutor, BlockContext, CircularDependencyError
from .distribution import DistributionBlock
from .returns import InvestorReturnsBlock

__all__ = [
    "Block",
    "BlockExecutor",
    "BlockContext",
    "CircularDependencyError",
    "DistributionBlock",
    "InvestorReturnsBlock",
]
