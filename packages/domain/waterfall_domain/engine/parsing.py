"""Request parsing boundary.

Distribution requests usually arrive as loosely-typed rows: JSON bodies,
database records with nullable columns, stored input snapshots. This module
normalizes them into a validated DistributionRequest.

Normalization rules:
- Null tier parameters fall back to their defaults (pref 0, catch-up 0,
  GP split 0, LP split 1)
- A missing contribution date falls back to the distribution date
- A missing investor name becomes "Unknown"
- Missing called capital or prior accumulators become 0
- Tiers with an unrecognized tier_name are skipped and reported

Anything else that is malformed (negative amounts, catch-up of 100%,
duplicate investments) raises pydantic.ValidationError.
"""

import json
import logging
from typing import Any, Dict, List, Mapping
from dataclasses import dataclass, field

from ..schemas import DistributionRequest, TIER_NAMES

logger = logging.getLogger(__name__)

_INVESTOR_AMOUNT_FIELDS = (
    "called_amount",
    "prior_return_of_capital",
    "prior_preferred_return",
    "prior_catch_up",
    "prior_profit_split",
)


@dataclass
class SkippedTier:
    """Diagnostic for a tier the parser could not recognize."""

    index: int
    tier_name: Any
    tier_order: Any
    reason: str


@dataclass
class ParsedRequest:
    """A validated request plus the diagnostics produced while parsing it."""

    request: DistributionRequest
    skipped_tiers: List[SkippedTier] = field(default_factory=list)


def _drop_nulls(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in row.items() if value is not None}


def _normalize_investor(row: Mapping[str, Any], distribution_date: Any) -> Dict[str, Any]:
    investor = _drop_nulls(row)
    investor.setdefault("investor_name", "Unknown")
    investor.setdefault("contribution_date", distribution_date)
    for amount_field in _INVESTOR_AMOUNT_FIELDS:
        investor.setdefault(amount_field, 0)
    return investor


def parse_request(payload: Mapping[str, Any]) -> ParsedRequest:
    """Validate a raw distribution payload.

    Args:
        payload: Mapping with distribution_date, total_distributable,
            investors and tiers (e.g., a decoded JSON body)

    Returns:
        ParsedRequest with the validated request and any skipped tiers

    Raises:
        pydantic.ValidationError: If a recognized field is out of domain

    Example:
        parsed = parse_request({
            "distribution_date": "2026-01-01",
            "total_distributable": "1200000",
            "investors": [{"investment_id": "lp-a", "called_amount": "500000", ...}],
            "tiers": [{"tier_name": "preferred_return", "tier_order": 2, "pref_rate": None}],
        })
        result = calculate_waterfall(parsed.request)
    """
    distribution_date = payload.get("distribution_date")

    tiers: List[Dict[str, Any]] = []
    skipped: List[SkippedTier] = []
    for index, row in enumerate(payload.get("tiers") or []):
        tier_name = row.get("tier_name")
        if tier_name not in TIER_NAMES:
            skipped.append(SkippedTier(
                index=index,
                tier_name=tier_name,
                tier_order=row.get("tier_order"),
                reason=f"Unrecognized tier_name {tier_name!r}",
            ))
            logger.warning(
                "Skipping tier %d: unrecognized tier_name %r (order %r)",
                index, tier_name, row.get("tier_order"),
            )
            continue
        tiers.append(_drop_nulls(row))

    investors = [
        _normalize_investor(row, distribution_date)
        for row in payload.get("investors") or []
    ]

    request = DistributionRequest(
        distribution_date=distribution_date,
        total_distributable=payload.get("total_distributable") or 0,
        investors=investors,
        tiers=tiers,
    )
    return ParsedRequest(request=request, skipped_tiers=skipped)


def parse_request_json(data: str) -> ParsedRequest:
    """Parse a JSON-encoded distribution payload (see parse_request)."""
    return parse_request(json.loads(data))
