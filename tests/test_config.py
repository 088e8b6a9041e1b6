"""Tests for fundamentals.config."""

from fundamentals.config import (
    FALLBACK_TAX_RATE,
    RATIO_CAP,
    AltmanConfig,
    IndustryBenchmarks,
    LeverageBands,
    PeriodKind,
    PiotroskiConfig,
    ProjectionConfig,
    RatioConfig,
)


class TestRatioConfig:
    def test_defaults(self) -> None:
        config = RatioConfig()
        assert config.fallback_tax_rate == FALLBACK_TAX_RATE == 0.21
        assert config.ratio_cap == RATIO_CAP == 999.99


class TestLeverageBands:
    def test_bands_ascending(self) -> None:
        b = LeverageBands()
        bounds = [
            b.very_low_max, b.low_max, b.moderate_max,
            b.elevated_max, b.high_max, b.very_high_max,
        ]
        assert bounds == sorted(bounds)


class TestAltmanConfig:
    def test_classic_coefficients(self) -> None:
        c = AltmanConfig()
        assert (
            c.working_capital_weight,
            c.retained_earnings_weight,
            c.ebit_weight,
            c.market_value_weight,
            c.sales_weight,
        ) == (1.2, 1.4, 3.3, 0.6, 1.0)

    def test_zones(self) -> None:
        c = AltmanConfig()
        assert c.grey_min < c.safe_min


class TestPiotroskiConfig:
    def test_defaults(self) -> None:
        c = PiotroskiConfig()
        assert c.dilution_tolerance == 0.02
        assert c.average_min < c.good_min < c.excellent_min <= 9


class TestProjectionConfig:
    def test_defaults(self) -> None:
        c = ProjectionConfig()
        assert c.min_growth_rate <= c.default_growth_rate <= c.max_growth_rate
        assert c.history_window is None

    def test_period_kind_values(self) -> None:
        assert PeriodKind("annual") is PeriodKind.ANNUAL
        assert PeriodKind("quarterly") is PeriodKind.QUARTERLY


class TestIndustryBenchmarks:
    def test_as_dict(self) -> None:
        d = IndustryBenchmarks(roic=10.0).as_dict()
        assert d["roic"] == 10.0
        assert set(d) == {
            "altman_z", "piotroski_score", "current_ratio", "quick_ratio",
            "debt_to_equity", "roic", "fcf_yield",
        }
