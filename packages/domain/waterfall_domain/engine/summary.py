"""Summary aggregation.

Folds the flat line-item list into one summary row per investment. Every
requested investor gets a row, even with no line items. Subtotals are
re-rounded to the cent at each accumulation step.
"""

from typing import Dict, List, Sequence

from ..schemas import Investor, InvestorSummary, LineItem, round_currency


def summarize_investors(
    investors: Sequence[Investor],
    line_items: Sequence[LineItem],
) -> List[InvestorSummary]:
    """Build per-investor subtotals by tier kind plus a grand total.

    Rows follow the order of ``investors``. Line items for investments not in
    the list are ignored.
    """
    summaries: Dict[str, InvestorSummary] = {}
    for inv in investors:
        summaries[inv.investment_id] = InvestorSummary(
            investment_id=inv.investment_id,
            investor_name=inv.investor_name,
            is_gp=inv.is_gp,
        )

    for item in line_items:
        summary = summaries.get(item.investment_id)
        if summary is None:
            continue
        subtotal = getattr(summary, item.tier_name)
        setattr(summary, item.tier_name, round_currency(subtotal + item.amount))
        summary.total = round_currency(summary.total + item.amount)

    return list(summaries.values())
