"""Tests for fundamentals.metrics.benchmarks."""

from __future__ import annotations

import pytest

from fundamentals.config import IndustryBenchmarks
from fundamentals.data.models import (
    Interpretation,
    OverviewFacts,
    ScoreResult,
    StatementHistory,
    StatementSnapshot,
)
from fundamentals.metrics.benchmarks import (
    compare_to_industry,
    company_metric_values,
    current_ratio_interpretation,
    fcf_yield_interpretation,
    free_cash_flow_interpretation,
    quick_ratio_interpretation,
    roic_interpretation,
)
from fundamentals.metrics.ratios import compute_ratios
from fundamentals.metrics.sentinels import Sentinel, ratio_value


class TestInterpretations:

    def test_free_cash_flow(self) -> None:
        assert free_cash_flow_interpretation(10.0) == "Positive"
        assert free_cash_flow_interpretation(0.0) == "Negative"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("6.00", "Strong"), ("5.00", "Moderate"), ("3.01", "Moderate"), ("3.00", "Weak")],
    )
    def test_fcf_yield(self, value: str, expected: str) -> None:
        assert fcf_yield_interpretation(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("15.88", "Excellent"), ("15.00", "Good"), ("10.50", "Good"), ("10.00", "Poor")],
    )
    def test_roic(self, value: str, expected: str) -> None:
        assert roic_interpretation(value) == expected

    def test_liquidity(self) -> None:
        assert current_ratio_interpretation("2.50") == "Strong"
        assert current_ratio_interpretation("2.00") == "Adequate"
        assert current_ratio_interpretation("0.90") == "Weak"
        assert quick_ratio_interpretation("1.50") == "Strong"
        assert quick_ratio_interpretation("0.75") == "Adequate"
        assert quick_ratio_interpretation("0.50") == "Weak"

    def test_sentinels_accepted(self) -> None:
        assert current_ratio_interpretation(Sentinel.MAX_RATIO) == "Strong"
        assert fcf_yield_interpretation(Sentinel.ZERO) == "Weak"

    @pytest.mark.parametrize(
        "interpret",
        [
            fcf_yield_interpretation,
            roic_interpretation,
            current_ratio_interpretation,
            quick_ratio_interpretation,
        ],
    )
    @pytest.mark.parametrize("value", ["N/A", "-", "nan"])
    def test_unparseable_reads_as_insufficient_data(self, interpret, value: str) -> None:
        assert interpret(value) == "Insufficient Data"


class TestRatioValue:

    def test_sentinel_and_strings(self) -> None:
        assert ratio_value(Sentinel.NEGATIVE_EQUITY) == -999.99
        assert ratio_value("15.88") == pytest.approx(15.88)
        assert ratio_value(2) == 2.0

    @pytest.mark.parametrize("value", ["N/A", "", None, "inf", float("nan")])
    def test_not_a_number(self, value: object) -> None:
        assert ratio_value(value) is None  # type: ignore[arg-type]


class TestCompareToIndustry:

    def test_relative_performance(self) -> None:
        result = compare_to_industry({"roic": 15.0}, {"roic": 12.0})
        (cmp,) = result.metrics
        assert cmp.relative_performance == pytest.approx(25.0)
        assert cmp.is_better is True

    def test_lower_is_better_for_leverage(self) -> None:
        result = compare_to_industry(
            {"debt_to_equity": 0.5}, {"debt_to_equity": 0.8},
        )
        (cmp,) = result.metrics
        assert cmp.is_better is True
        assert cmp.relative_performance == pytest.approx(-37.5)

    def test_negative_equity_leverage_not_better(self) -> None:
        (cmp,) = compare_to_industry(
            {"debt_to_equity": -999.99}, {"debt_to_equity": 0.8},
        ).metrics
        assert cmp.is_better is False

    def test_zero_industry_value(self) -> None:
        (cmp,) = compare_to_industry({"roic": 5.0}, {"roic": 0.0}).metrics
        assert cmp.relative_performance is None

    def test_missing_company_metric_counts_as_zero(self) -> None:
        (cmp,) = compare_to_industry({}, {"roic": 12.0}).metrics
        assert cmp.company_value == 0.0
        assert cmp.is_better is False

    def test_default_benchmarks(self) -> None:
        result = compare_to_industry({"altman_z": 5.0})
        assert [c.metric for c in result.metrics] == list(IndustryBenchmarks().as_dict())

    def test_better_percentage(self) -> None:
        result = compare_to_industry(
            {"roic": 20.0, "current_ratio": 1.0, "debt_to_equity": 0.5, "fcf_yield": 6.0},
            {"roic": 12.0, "current_ratio": 1.8, "debt_to_equity": 0.8, "fcf_yield": 5.0},
        )
        assert result.better_count == 3
        assert result.better_percentage == pytest.approx(75.0)
        assert result.is_above_average is True

    def test_empty_industry(self) -> None:
        result = compare_to_industry({"roic": 1.0}, {})
        assert result.metrics == ()
        assert result.better_percentage == 0.0
        assert result.is_above_average is False


class TestCompanyMetricValues:

    def test_end_to_end(self) -> None:
        snap = StatementSnapshot(
            total_assets=1000.0,
            total_current_assets=400.0,
            total_current_liabilities=200.0,
            total_shareholder_equity=400.0,
            inventory=100.0,
            short_term_debt=50.0,
            long_term_debt=250.0,
            ebit=180.0,
            income_before_tax=160.0,
            income_tax_expense=40.0,
            operating_cash_flow=220.0,
            capital_expenditures=70.0,
        )
        ratios = compute_ratios(
            StatementHistory(snapshots=(snap,)),
            OverviewFacts(market_capitalization=3000.0),
        )
        altman = ScoreResult(score=5.754, interpretation=Interpretation.SAFE)
        piotroski = ScoreResult(score=7, interpretation=Interpretation.GOOD)

        values = company_metric_values(ratios, altman, piotroski)

        assert set(values) == set(IndustryBenchmarks().as_dict())
        assert values["altman_z"] == pytest.approx(5.754)
        assert values["piotroski_score"] == 7.0
        assert values["current_ratio"] == 2.0
        assert values["quick_ratio"] == 1.5
        assert values["debt_to_equity"] == 0.75
        assert values["roic"] == pytest.approx(15.88)
        assert values["fcf_yield"] == 5.0

        result = compare_to_industry(values)
        assert result.better_count == 6
