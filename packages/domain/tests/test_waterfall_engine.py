"""Scenario tests for the waterfall engine.

Tests cover:
1. Two LPs through a standard four-tier waterfall (unclaimed GP pool)
2. GP catch-up with one GP and one LP
3. Partial distribution (capital not fully returned)
4. Multi-round distributions carrying prior accumulators
5. Degenerate requests (zero cash, no investors, no tiers)
6. Tier ordering, pool exhaustion and rounding residuals
"""

from decimal import Decimal
from datetime import date

import pytest

from waterfall_domain.schemas import (
    Investor,
    DistributionRequest,
    CapitalReturnTier,
    PreferredReturnTier,
    CatchUpTier,
    ProfitSplitTier,
    WaterfallCFG,
)
from waterfall_domain.engine import calculate_waterfall, carry_forward


# =============================================================================
# Fixtures
# =============================================================================

STANDARD_TIERS = [
    CapitalReturnTier(tier_order=1),
    PreferredReturnTier(tier_order=2, pref_rate=Decimal("0.08")),
    CatchUpTier(tier_order=3, catch_up_pct=Decimal("0.2")),
    ProfitSplitTier(tier_order=4, gp_split_pct=Decimal("0.2"), lp_split_pct=Decimal("0.8")),
]

LP_A = Investor(
    investment_id="lp-a",
    investor_name="LP Alpha",
    is_gp=False,
    called_amount=Decimal("500000"),
    contribution_date=date(2025, 1, 1),
)

LP_B = Investor(
    investment_id="lp-b",
    investor_name="LP Beta",
    is_gp=False,
    called_amount=Decimal("500000"),
    contribution_date=date(2025, 1, 1),
)

GP_INVESTOR = Investor(
    investment_id="gp-1",
    investor_name="GP Manager",
    is_gp=True,
    called_amount=Decimal("100000"),
    contribution_date=date(2025, 1, 1),
)

LP_LARGE = LP_A.model_copy(update={
    "investment_id": "lp-large",
    "investor_name": "LP Large",
    "called_amount": Decimal("900000"),
})


def make_request(total, investors, tiers=None, distribution_date=date(2026, 1, 1)):
    return DistributionRequest(
        distribution_date=distribution_date,
        total_distributable=Decimal(str(total)),
        investors=investors,
        tiers=STANDARD_TIERS if tiers is None else tiers,
    )


# =============================================================================
# Scenario 1: Two LPs, no GP
# =============================================================================

class TestTwoLimitedPartners:
    """Two $500K LPs, $1.2M distributed through the standard tiers."""

    @pytest.fixture
    def result(self):
        return calculate_waterfall(make_request(1_200_000, [LP_A, LP_B]))

    def test_returns_capital_first(self, result):
        """Each LP gets its $500K back before anything else."""
        assert result.summary_for("lp-a").return_of_capital == Decimal("500000")
        assert result.summary_for("lp-b").return_of_capital == Decimal("500000")

    def test_preferred_return_equal(self, result):
        """500K * 8% * 365/365 = $40K each."""
        assert result.summary_for("lp-a").preferred_return == Decimal("40000")
        assert result.summary_for("lp-b").preferred_return == Decimal("40000")

    def test_zero_catch_up_without_gp(self, result):
        """Catch-up tier runs but pays nothing without a GP."""
        assert result.tier_total("catch_up") == Decimal("0")
        assert not result.line_items_for(tier_name="catch_up")

    def test_gp_pool_left_undistributed(self, result):
        """$120K profit: LP pool $96K split equally, GP pool $24K unclaimed."""
        assert result.summary_for("lp-a").profit_split == Decimal("48000")
        assert result.summary_for("lp-b").profit_split == Decimal("48000")
        assert result.remaining_undistributed == Decimal("24000")
        assert result.total_distributed == Decimal("1176000")

    def test_tier_breakdown_in_processing_order(self, result):
        assert [(t.tier_name, t.total) for t in result.tier_breakdown] == [
            ("return_of_capital", Decimal("1000000")),
            ("preferred_return", Decimal("80000")),
            ("catch_up", Decimal("0")),
            ("profit_split", Decimal("96000")),
        ]

    def test_investor_totals_match_distributed(self, result):
        assert sum(s.total for s in result.investors) == result.total_distributed


# =============================================================================
# Scenario 2: GP catch-up
# =============================================================================

class TestGPCatchUp:
    """One $100K GP and one $900K LP, $1.5M distributed."""

    @pytest.fixture
    def result(self):
        return calculate_waterfall(make_request(1_500_000, [GP_INVESTOR, LP_LARGE]))

    def test_returns_capital_to_both(self, result):
        assert result.summary_for("gp-1").return_of_capital == Decimal("100000")
        assert result.summary_for("lp-large").return_of_capital == Decimal("900000")

    def test_preferred_return_lp_only(self, result):
        assert result.summary_for("gp-1").preferred_return == Decimal("0")
        assert result.summary_for("lp-large").preferred_return == Decimal("72000")

    def test_gp_catches_up(self, result):
        """72K pref * 0.2 / 0.8 = $18K."""
        assert result.summary_for("gp-1").catch_up == Decimal("18000")
        assert result.summary_for("lp-large").catch_up == Decimal("0")

    def test_profit_split_20_80(self, result):
        """$410K left: GP $82K, LP $328K."""
        assert result.summary_for("gp-1").profit_split == Decimal("82000")
        assert result.summary_for("lp-large").profit_split == Decimal("328000")

    def test_everything_distributed(self, result):
        assert result.total_distributed == Decimal("1500000")
        assert result.remaining_undistributed == Decimal("0")

    def test_gp_and_lp_totals(self, result):
        assert result.summary_for("gp-1").total == Decimal("200000")
        assert result.summary_for("lp-large").total == Decimal("1300000")


# =============================================================================
# Scenario 3: Partial distribution
# =============================================================================

class TestPartialDistribution:
    """Two $500K LPs, only $800K available."""

    @pytest.fixture
    def result(self):
        return calculate_waterfall(make_request(800_000, [LP_A, LP_B]))

    def test_capital_pro_rata(self, result):
        assert result.summary_for("lp-a").return_of_capital == Decimal("400000")
        assert result.summary_for("lp-b").return_of_capital == Decimal("400000")

    def test_no_pref_or_profit(self, result):
        for investment_id in ("lp-a", "lp-b"):
            summary = result.summary_for(investment_id)
            assert summary.preferred_return == Decimal("0")
            assert summary.profit_split == Decimal("0")

    def test_all_funds_distributed(self, result):
        assert result.total_distributed == Decimal("800000")
        assert result.remaining_undistributed == Decimal("0")

    def test_exhausted_tiers_not_in_breakdown(self, result):
        """Pool hits zero after capital return; later tiers are skipped."""
        assert [t.tier_name for t in result.tier_breakdown] == ["return_of_capital"]


# =============================================================================
# Scenario 4: Multi-round
# =============================================================================

class TestMultiRound:
    """Round 2 picks up where round 1 left off via prior accumulators."""

    def test_second_round_picks_up(self):
        round1_request = make_request(800_000, [LP_A, LP_B], distribution_date=date(2025, 7, 1))
        round1 = calculate_waterfall(round1_request)

        round2_investors = carry_forward(round1_request.investors, round1)
        assert round2_investors[0].prior_return_of_capital == Decimal("400000")

        round2 = calculate_waterfall(make_request(600_000, round2_investors))

        # Remaining capital: 500K - 400K = 100K each
        assert round2.summary_for("lp-a").return_of_capital == Decimal("100000")
        assert round2.summary_for("lp-b").return_of_capital == Decimal("100000")

        # Pref accrues from the contribution date: 40K each
        assert round2.summary_for("lp-a").preferred_return > 0
        assert round2.summary_for("lp-b").preferred_return == Decimal("40000")

        # GP pool (20% of 320K) has no recipients
        assert round2.total_distributed == Decimal("536000")
        assert round2.remaining_undistributed == Decimal("64000")

    def test_prior_preferred_return_reduces_need(self):
        """Pref already paid in earlier rounds is not paid again."""
        lp = LP_A.model_copy(update={
            "prior_return_of_capital": Decimal("500000"),
            "prior_preferred_return": Decimal("30000"),
        })
        result = calculate_waterfall(make_request(100_000, [lp]))

        assert result.summary_for("lp-a").return_of_capital == Decimal("0")
        assert result.summary_for("lp-a").preferred_return == Decimal("10000")

    def test_prior_catch_up_reduces_need(self):
        gp = GP_INVESTOR.model_copy(update={"prior_catch_up": Decimal("5000")})
        result = calculate_waterfall(make_request(1_500_000, [gp, LP_LARGE]))

        assert result.summary_for("gp-1").catch_up == Decimal("13000")


# =============================================================================
# Scenario 5: Degenerate requests
# =============================================================================

class TestDegenerateRequests:
    """Zero cash, no investors and no tiers all return complete results."""

    def test_zero_distributable(self):
        result = calculate_waterfall(make_request(0, [LP_A]))
        assert result.total_distributed == Decimal("0")
        assert result.remaining_undistributed == Decimal("0")
        assert result.line_items == []
        assert result.tier_breakdown == []

    def test_zero_distributable_still_summarizes_investors(self):
        result = calculate_waterfall(make_request(0, [LP_A, GP_INVESTOR]))
        assert [s.investment_id for s in result.investors] == ["lp-a", "gp-1"]
        assert all(s.total == 0 for s in result.investors)

    def test_empty_investor_list(self):
        result = calculate_waterfall(make_request(100_000, []))
        assert result.total_distributed == Decimal("0")
        assert result.remaining_undistributed == Decimal("100000")
        assert result.investors == []

    def test_empty_tier_list(self):
        result = calculate_waterfall(make_request(100_000, [LP_A], tiers=[]))
        assert result.total_distributed == Decimal("0")
        assert result.remaining_undistributed == Decimal("100000")
        assert len(result.investors) == 1
        assert result.summary_for("lp-a").total == Decimal("0")


# =============================================================================
# Additional scenarios
# =============================================================================

def test_single_investor():
    """$700K to one LP: 500K capital, 40K pref, 80% of 160K = 128K."""
    result = calculate_waterfall(make_request(700_000, [LP_A]))
    lp = result.summary_for("lp-a")

    assert lp.return_of_capital == Decimal("500000")
    assert lp.preferred_return == Decimal("40000")
    assert lp.profit_split == Decimal("128000")
    assert result.total_distributed == Decimal("668000")
    assert result.remaining_undistributed == Decimal("32000")


def test_all_gp_fund():
    """A GP-only fund gets capital back, no pref, no catch-up, and the GP pool."""
    gp_only = GP_INVESTOR.model_copy(update={"called_amount": Decimal("500000")})
    result = calculate_waterfall(make_request(800_000, [gp_only]))
    gp = result.investors[0]

    assert gp.return_of_capital == Decimal("500000")
    assert gp.preferred_return == Decimal("0")
    assert gp.catch_up == Decimal("0")
    # 20% of the remaining 300K; the LP pool has no recipients
    assert gp.profit_split == Decimal("60000")
    assert result.remaining_undistributed == Decimal("240000")
    assert all(item.amount >= 0 for item in result.line_items)


def test_split_shares_over_one_capped_at_pool():
    """A 30/80 split pays the GP its 30% and the LP what is left."""
    split = ProfitSplitTier(tier_order=1, gp_split_pct=Decimal("0.3"), lp_split_pct=Decimal("0.8"))
    result = calculate_waterfall(make_request(100, [GP_INVESTOR, LP_A], tiers=[split]))

    assert result.summary_for("gp-1").profit_split == Decimal("30")
    assert result.summary_for("lp-a").profit_split == Decimal("70")
    assert result.total_distributed == Decimal("100")
    assert result.remaining_undistributed == Decimal("0")
    assert result.tier_total("profit_split") == Decimal("100")


def test_largest_total_reconciles():
    """The top of the currency range still distributes to the cent."""
    total = Decimal("999999999999999999.99")
    result = calculate_waterfall(make_request(total, [GP_INVESTOR, LP_LARGE]))

    assert result.total_distributed == total
    assert result.remaining_undistributed == Decimal("0")
    assert sum((i.amount for i in result.line_items), Decimal("0")) == total


def test_extreme_pref_rate_is_capped_by_pool():
    """Accrual far beyond the pool does not break rounding."""
    tiers = [PreferredReturnTier(tier_order=1, pref_rate=Decimal("1e24"))]
    result = calculate_waterfall(make_request(1_000_000, [LP_A], tiers=tiers))

    assert result.summary_for("lp-a").preferred_return == Decimal("1000000")
    assert result.remaining_undistributed == Decimal("0")


def test_tiers_sorted_by_order():
    """Input order of tiers does not matter, tier_order does."""
    shuffled = [STANDARD_TIERS[3], STANDARD_TIERS[1], STANDARD_TIERS[0], STANDARD_TIERS[2]]
    in_order = calculate_waterfall(make_request(1_500_000, [GP_INVESTOR, LP_LARGE]))
    out_of_order = calculate_waterfall(make_request(1_500_000, [GP_INVESTOR, LP_LARGE], tiers=shuffled))

    assert in_order == out_of_order


def test_non_contiguous_tier_order():
    tiers = [
        ProfitSplitTier(tier_order=40, gp_split_pct=Decimal("0.2"), lp_split_pct=Decimal("0.8")),
        CapitalReturnTier(tier_order=10),
    ]
    result = calculate_waterfall(make_request(1_100_000, [LP_A, LP_B], tiers=tiers))

    assert [t.tier_order for t in result.tier_breakdown] == [10, 40]
    assert result.summary_for("lp-a").profit_split == Decimal("40000")


def test_equal_tier_order_keeps_input_order():
    """Ties are broken by input order: profit split drains the pool first."""
    tiers = [
        ProfitSplitTier(tier_order=1, gp_split_pct=Decimal("0"), lp_split_pct=Decimal("1")),
        CapitalReturnTier(tier_order=1),
    ]
    result = calculate_waterfall(make_request(100_000, [LP_A], tiers=tiers))

    assert [t.tier_name for t in result.tier_breakdown] == ["profit_split"]
    assert result.summary_for("lp-a").profit_split == Decimal("100000")
    assert result.summary_for("lp-a").return_of_capital == Decimal("0")


def test_catch_up_before_preferred_return_has_no_profit():
    """Catch-up only targets profit paid by earlier tiers of the round."""
    tiers = [
        CapitalReturnTier(tier_order=1),
        CatchUpTier(tier_order=2, catch_up_pct=Decimal("0.2")),
        PreferredReturnTier(tier_order=3, pref_rate=Decimal("0.08")),
    ]
    result = calculate_waterfall(make_request(1_500_000, [GP_INVESTOR, LP_LARGE], tiers=tiers))

    assert result.summary_for("gp-1").catch_up == Decimal("0")
    assert result.summary_for("lp-large").preferred_return == Decimal("72000")


def test_rounding_residual_goes_to_first_recipient():
    """$100 over three equal needs: 33.33 each, the first absorbs the extra cent."""
    investors = [
        Investor(
            investment_id=f"lp-{n}",
            investor_name=f"LP {n}",
            called_amount=Decimal("100"),
            contribution_date=date(2025, 1, 1),
        )
        for n in (1, 2, 3)
    ]
    result = calculate_waterfall(make_request(100, investors, tiers=[CapitalReturnTier(tier_order=1)]))

    assert [item.amount for item in result.line_items] == [
        Decimal("33.34"), Decimal("33.33"), Decimal("33.33"),
    ]
    assert result.total_distributed == Decimal("100")


def test_cash_below_one_cent_per_investor():
    """When every share rounds to zero, the first eligible investor takes the cent."""
    investors = [
        LP_A,
        LP_B,
        LP_A.model_copy(update={"investment_id": "lp-c", "investor_name": "LP Gamma"}),
    ]
    result = calculate_waterfall(make_request("0.01", investors, tiers=[CapitalReturnTier(tier_order=1)]))

    assert len(result.line_items) == 1
    assert result.line_items[0].investment_id == "lp-a"
    assert result.total_distributed == Decimal("0.01")
    assert result.remaining_undistributed == Decimal("0")


def test_actual_360_day_count():
    """500K * 8% * 365/360 = 40,555.56."""
    result = calculate_waterfall(
        make_request(1_200_000, [LP_A, LP_B]),
        WaterfallCFG(day_count_basis=360),
    )
    assert result.summary_for("lp-a").preferred_return == Decimal("40555.56")


def test_contribution_after_distribution_accrues_nothing():
    late_lp = LP_A.model_copy(update={"contribution_date": date(2026, 6, 1)})
    result = calculate_waterfall(make_request(600_000, [late_lp]))

    assert result.summary_for("lp-a").preferred_return == Decimal("0")
    assert result.tier_total("preferred_return") == Decimal("0")


def test_idempotent():
    request = make_request(1_500_000, [GP_INVESTOR, LP_LARGE])
    first = calculate_waterfall(request)
    second = calculate_waterfall(request)

    assert first.model_dump_json() == second.model_dump_json()


def test_inputs_not_mutated():
    request = make_request(1_500_000, [GP_INVESTOR, LP_LARGE])
    before = request.model_dump_json()
    calculate_waterfall(request)

    assert request.model_dump_json() == before
