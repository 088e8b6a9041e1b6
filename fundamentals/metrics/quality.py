"""Quality metrics: Piotroski F-Score from two statement periods."""

from __future__ import annotations

import logging

from fundamentals.config import PiotroskiConfig
from fundamentals.data.models import (
    Interpretation,
    ScoreResult,
    StatementHistory,
    StatementSnapshot,
)

logger = logging.getLogger(__name__)

PIOTROSKI_CRITERIA = (
    "positive_net_income",
    "positive_operating_cash_flow",
    "improving_roa",
    "earnings_quality",
    "decreasing_long_term_debt",
    "improving_current_ratio",
    "no_dilution",
    "improving_gross_margin",
    "improving_asset_turnover",
)

PIOTROSKI_CATEGORIES: dict[str, str] = {
    "positive_net_income": "Profitability",
    "positive_operating_cash_flow": "Profitability",
    "improving_roa": "Profitability",
    "earnings_quality": "Profitability",
    "decreasing_long_term_debt": "Leverage",
    "improving_current_ratio": "Leverage",
    "no_dilution": "Leverage",
    "improving_gross_margin": "Efficiency",
    "improving_asset_turnover": "Efficiency",
}


def _ratio(numerator: float, denominator: float) -> float | None:
    """numerator / denominator, or None for a zero denominator."""
    if denominator == 0.0:
        return None
    return numerator / denominator


def _improved(current: float | None, prior: float | None) -> bool:
    """Strict improvement; undefined on either side fails."""
    if current is None or prior is None:
        return False
    return current > prior


def _roa(s: StatementSnapshot) -> float | None:
    return _ratio(s.net_income, s.total_assets)


def _current_ratio(s: StatementSnapshot) -> float | None:
    return _ratio(s.total_current_assets, s.total_current_liabilities)


def _gross_margin(s: StatementSnapshot) -> float | None:
    return _ratio(s.gross_profit, s.total_revenue)


def _asset_turnover(s: StatementSnapshot) -> float | None:
    return _ratio(s.total_revenue, s.total_assets)


def piotroski_band(
    score: int, config: PiotroskiConfig | None = None
) -> Interpretation:
    config = config or PiotroskiConfig()
    if score >= config.excellent_min:
        return Interpretation.EXCELLENT
    if score >= config.good_min:
        return Interpretation.GOOD
    if score >= config.average_min:
        return Interpretation.AVERAGE
    return Interpretation.WEAK


def piotroski_f_score(
    history: StatementHistory, config: PiotroskiConfig | None = None
) -> ScoreResult:
    """Compute the Piotroski F-Score for the latest period.

    Nine binary signals, one point each. Signals comparing against the
    prior period fail when no prior period exists; any signal with a
    zero denominator fails. Ratio improvements are strict, so an unchanged
    ratio does not score; long-term debt scores when it does not rise.

    Args:
        history: Statement history, most recent first. The first two
            periods are used.
        config: Dilution tolerance and interpretation bands.

    Returns:
        ScoreResult with integer score in [0, 9] and a pass/fail flag per
        criterion name. Score 0 and INSUFFICIENT_DATA for an empty history.
    """
    config = config or PiotroskiConfig()

    if history.is_empty:
        logger.warning("%s: empty statement history", history.symbol)
        return ScoreResult(
            score=0,
            interpretation=Interpretation.INSUFFICIENT_DATA,
            components={name: False for name in PIOTROSKI_CRITERIA},
        )

    cur = history.current
    prior = history.prior
    has_prior = prior is not None
    if not has_prior:
        logger.debug(
            "%s: no prior period, year-over-year signals default to False",
            history.symbol,
        )

    # 1. Positive net income
    positive_net_income = cur.net_income > 0

    # 2. Positive operating cash flow
    positive_ocf = cur.operating_cash_flow > 0

    # 3. ROA improving
    improving_roa = has_prior and _improved(_roa(cur), _roa(prior))

    # 4. Earnings quality: cash flow exceeds accounting profit
    earnings_quality = cur.operating_cash_flow > cur.net_income

    # 5. Long-term debt not increasing
    decreasing_ltd = has_prior and cur.long_term_debt <= prior.long_term_debt

    # 6. Current ratio improving
    improving_cr = has_prior and _improved(
        _current_ratio(cur), _current_ratio(prior)
    )

    # 7. No dilution (within tolerance); needs a prior share count
    if has_prior and prior.common_shares_outstanding > 0:
        no_dilution = cur.common_shares_outstanding <= (
            prior.common_shares_outstanding * (1 + config.dilution_tolerance)
        )
    else:
        no_dilution = False

    # 8. Gross margin improving
    improving_gm = has_prior and _improved(
        _gross_margin(cur), _gross_margin(prior)
    )

    # 9. Asset turnover improving
    improving_at = has_prior and _improved(
        _asset_turnover(cur), _asset_turnover(prior)
    )

    components = {
        "positive_net_income": bool(positive_net_income),
        "positive_operating_cash_flow": bool(positive_ocf),
        "improving_roa": bool(improving_roa),
        "earnings_quality": bool(earnings_quality),
        "decreasing_long_term_debt": bool(decreasing_ltd),
        "improving_current_ratio": bool(improving_cr),
        "no_dilution": bool(no_dilution),
        "improving_gross_margin": bool(improving_gm),
        "improving_asset_turnover": bool(improving_at),
    }
    score = sum(components.values())

    return ScoreResult(
        score=score,
        interpretation=piotroski_band(score, config),
        components=components,
    )


def criteria_by_category(result: ScoreResult) -> dict[str, dict[str, bool]]:
    """Group a Piotroski result's criteria by category for display.

    Returns:
        {category: {criterion: passed}} in Profitability, Leverage,
        Efficiency order.
    """
    grouped: dict[str, dict[str, bool]] = {
        "Profitability": {},
        "Leverage": {},
        "Efficiency": {},
    }
    for name in PIOTROSKI_CRITERIA:
        if name in result.components:
            grouped[PIOTROSKI_CATEGORIES[name]][name] = bool(
                result.components[name]
            )
    return grouped
