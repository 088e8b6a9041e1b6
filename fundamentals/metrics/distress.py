"""Distress risk: Altman Z-Score."""

from __future__ import annotations

import logging

from fundamentals.config import AltmanConfig
from fundamentals.data.models import (
    Interpretation,
    OverviewFacts,
    ScoreResult,
    StatementHistory,
)
from fundamentals.metrics.ratios import resolve_ebit

logger = logging.getLogger(__name__)

ALTMAN_COMPONENTS = ("A", "B", "C", "D", "E")


def altman_zone(z: float, config: AltmanConfig | None = None) -> Interpretation:
    """Classify a Z-Score into its risk zone."""
    config = config or AltmanConfig()
    if z > config.safe_min:
        return Interpretation.SAFE
    if z >= config.grey_min:
        return Interpretation.GREY
    return Interpretation.DISTRESS


def altman_z_score(
    overview: OverviewFacts,
    history: StatementHistory,
    config: AltmanConfig | None = None,
) -> ScoreResult:
    """Compute the Altman Z-Score from the current statement period.

    Components:
        A: working capital / total assets
        B: retained earnings / total assets
        C: EBIT / total assets
        D: market capitalisation / total liabilities (0 if no liabilities)
        E: revenue / total assets

    Z = 1.2A + 1.4B + 3.3C + 0.6D + 1.0E with the default coefficients.

    Args:
        overview: Company facts supplying market capitalisation.
        history: Statement history; only the current period is used.
        config: Coefficients and zone boundaries.

    Returns:
        ScoreResult with the raw Z, its zone and components A-E. Score 0
        and INSUFFICIENT_DATA when total assets are not positive.
    """
    config = config or AltmanConfig()

    if history.is_empty:
        logger.warning("%s: no statement periods for Altman Z", history.symbol)
        return ScoreResult(score=0.0, interpretation=Interpretation.INSUFFICIENT_DATA)

    current = history.current
    total_assets = current.total_assets
    if total_assets <= 0.0:
        logger.warning(
            "%s: total assets not positive (%.2f), Altman Z unavailable",
            history.symbol, total_assets,
        )
        return ScoreResult(score=0.0, interpretation=Interpretation.INSUFFICIENT_DATA)

    working_capital = (
        current.total_current_assets - current.total_current_liabilities
    )
    if current.total_liabilities == 0.0:
        market_to_liabilities = 0.0
        logger.debug(
            "%s: total liabilities are zero, component D set to 0",
            history.symbol,
        )
    else:
        market_to_liabilities = (
            overview.market_capitalization / current.total_liabilities
        )

    components = {
        "A": working_capital / total_assets,
        "B": current.retained_earnings / total_assets,
        "C": resolve_ebit(current) / total_assets,
        "D": market_to_liabilities,
        "E": current.total_revenue / total_assets,
    }

    z = (
        config.working_capital_weight * components["A"]
        + config.retained_earnings_weight * components["B"]
        + config.ebit_weight * components["C"]
        + config.market_value_weight * components["D"]
        + config.sales_weight * components["E"]
    )

    return ScoreResult(
        score=z,
        interpretation=altman_zone(z, config),
        components=components,
    )
