"""Waterfall Domain - tiered capital distribution engine.

This package provides the distribution layer for fund accounting:
- Investor positions with prior-round accumulators
- Tier configurations (return of capital, preferred return, catch-up, profit split)
- A pure waterfall engine with exact-cent reconciliation
- Reporting blocks that tabulate results as DataFrames

The domain layer is designed to be:
- Framework-agnostic (no web, database or UI dependencies)
- Deterministic (no clock, no randomness, no hidden state)
- Testable (pure Python with Pydantic validation)
"""

import logging

from .schemas import *  # noqa: F403, F401
from .engine import calculate_waterfall, carry_forward, parse_request  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
