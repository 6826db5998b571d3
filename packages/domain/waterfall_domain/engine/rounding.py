"""Pro-rata allocation with exact-cent reconciliation.

Every tier splits an amount across recipients by weight and rounds each
share to the cent independently. Independent rounding can leave the sum a
few cents above or below the intended total, so the first recipient with a
non-zero share absorbs the signed residual. The recipient-selection rule is
observable (it decides who gets the extra cent) and must not change.
"""

from typing import List, Optional, Sequence, Tuple
from decimal import Decimal

from ..schemas import Investor, ZERO, round_currency

Allocation = Tuple[Investor, Decimal]


def capital_weights(investors: Sequence[Investor]) -> List[Tuple[Investor, Decimal]]:
    """Weight investors by called capital, or evenly if the group has none."""
    total_capital = sum((inv.called_amount for inv in investors), ZERO)
    if total_capital > 0:
        return [(inv, inv.called_amount / total_capital) for inv in investors]
    even = Decimal(1) / Decimal(len(investors)) if investors else ZERO
    return [(inv, even) for inv in investors]


def pro_rata_shares(
    weighted: Sequence[Tuple[Investor, Decimal]],
    amount: Decimal,
    total_weight: Decimal = Decimal(1),
) -> List[Allocation]:
    """Split amount by weight / total_weight, rounding each share to the cent.

    Recipients whose rounded share is zero are dropped.
    """
    if total_weight <= 0:
        return []

    shares: List[Allocation] = []
    for investor, weight in weighted:
        if weight <= 0:
            continue
        share = round_currency(amount * weight / total_weight)
        if share > 0:
            shares.append((investor, share))
    return shares


def absorb_residual(
    shares: List[Allocation],
    target: Decimal,
    fallback: Optional[Investor] = None,
) -> List[Allocation]:
    """Make the shares sum exactly to target.

    The first share absorbs the signed residual (a share never drops below
    zero; an over-allocation it cannot absorb moves on to the next share,
    and shares reduced to zero are dropped). If every share rounded to
    zero, the fallback recipient (the first eligible investor) receives the
    whole target so the tier still reconciles.
    """
    target = round_currency(target)
    if not shares:
        if fallback is not None and target > 0:
            return [(fallback, target)]
        return []

    allocated = sum((amount for _, amount in shares), ZERO)
    residual = target - allocated
    if residual >= 0:
        if residual > 0:
            first_investor, first_amount = shares[0]
            shares = [(first_investor, first_amount + residual)] + shares[1:]
        return shares

    # Over-allocation: take it back from the first share, spilling to the
    # next ones only when a share would go below zero.
    adjusted: List[Allocation] = []
    for investor, amount in shares:
        taken = min(amount, -residual)
        residual += taken
        if amount - taken > 0:
            adjusted.append((investor, amount - taken))
    return adjusted
