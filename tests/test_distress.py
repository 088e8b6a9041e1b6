"""Tests for fundamentals.metrics.distress (Altman Z-Score)."""

from __future__ import annotations

from typing import Any

import pytest

from fundamentals.config import AltmanConfig
from fundamentals.data.models import (
    Interpretation,
    OverviewFacts,
    ScoreResult,
    StatementHistory,
    StatementSnapshot,
)
from fundamentals.metrics.distress import ALTMAN_COMPONENTS, altman_z_score, altman_zone


def _make_history(**overrides: Any) -> StatementHistory:
    defaults: dict[str, Any] = {
        "total_assets": 1000.0,
        "total_current_assets": 400.0,
        "total_current_liabilities": 200.0,
        "total_liabilities": 600.0,
        "retained_earnings": 300.0,
        "ebit": 180.0,
        "operating_income": 200.0,
        "total_revenue": 1500.0,
    }
    defaults.update(overrides)
    return StatementHistory(snapshots=(StatementSnapshot(**defaults),), symbol="TEST")


OVERVIEW = OverviewFacts(market_capitalization=3000.0)


class TestAltmanComponents:
    """Each component equals its defined ratio."""

    def test_returns_score_result(self) -> None:
        assert isinstance(altman_z_score(OVERVIEW, _make_history()), ScoreResult)

    def test_component_names(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        assert tuple(result.components) == ALTMAN_COMPONENTS

    def test_working_capital_to_assets(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        # (400 - 200) / 1000
        assert result.components["A"] == pytest.approx(0.2)

    def test_retained_earnings_to_assets(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        assert result.components["B"] == pytest.approx(0.3)

    def test_ebit_to_assets(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        assert result.components["C"] == pytest.approx(0.18)

    def test_ebit_fallback_to_operating_income(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history(ebit=0.0))
        assert result.components["C"] == pytest.approx(0.2)

    def test_market_value_to_liabilities(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        # 3000 / 600
        assert result.components["D"] == pytest.approx(5.0)

    def test_zero_liabilities_gives_zero_d(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history(total_liabilities=0.0))
        assert result.components["D"] == 0.0

    def test_sales_to_assets(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        assert result.components["E"] == pytest.approx(1.5)


class TestAltmanScore:

    def test_weighted_sum(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        # 1.2*0.2 + 1.4*0.3 + 3.3*0.18 + 0.6*5.0 + 1.0*1.5
        assert result.score == pytest.approx(5.754)
        assert result.interpretation is Interpretation.SAFE

    def test_distress(self) -> None:
        history = _make_history(
            total_current_assets=100.0,
            total_current_liabilities=300.0,
            retained_earnings=-200.0,
            ebit=10.0,
            total_revenue=500.0,
        )
        result = altman_z_score(OverviewFacts(market_capitalization=100.0), history)
        assert result.score < 1.80
        assert result.interpretation is Interpretation.DISTRESS

    def test_non_positive_assets(self) -> None:
        for assets in (0.0, -5.0):
            result = altman_z_score(OVERVIEW, _make_history(total_assets=assets))
            assert result.score == 0
            assert result.interpretation is Interpretation.INSUFFICIENT_DATA
            assert result.interpretation == "Insufficient Data"

    def test_empty_history(self) -> None:
        result = altman_z_score(OVERVIEW, StatementHistory())
        assert result.score == 0
        assert result.interpretation is Interpretation.INSUFFICIENT_DATA

    def test_components_read_only(self) -> None:
        result = altman_z_score(OVERVIEW, _make_history())
        with pytest.raises(TypeError):
            result.components["A"] = 1.0  # type: ignore[index]

    def test_custom_coefficients(self) -> None:
        config = AltmanConfig(market_value_weight=0.0)
        result = altman_z_score(OVERVIEW, _make_history(), config)
        assert result.score == pytest.approx(5.754 - 3.0)


class TestAltmanZone:

    @pytest.mark.parametrize(
        ("z", "expected"),
        [
            (3.5, Interpretation.SAFE),
            (3.0, Interpretation.SAFE),
            (2.99, Interpretation.GREY),
            (2.0, Interpretation.GREY),
            (1.80, Interpretation.GREY),
            (1.79, Interpretation.DISTRESS),
            (-1.0, Interpretation.DISTRESS),
        ],
    )
    def test_boundaries(self, z: float, expected: Interpretation) -> None:
        assert altman_zone(z) is expected

    def test_labels(self) -> None:
        assert altman_zone(4.0) == "Safe Zone – Low Risk"
        assert altman_zone(2.5) == "Grey Zone – Moderate Risk"
        assert altman_zone(1.0) == "Distress Zone – High Risk"
