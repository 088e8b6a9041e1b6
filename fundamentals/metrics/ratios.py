"""Single-period ratios: liquidity, leverage, free cash flow and ROIC.

Every function is total. Degenerate inputs (zero denominators, missing
periods) produce a Sentinel rather than an exception, so results can be
rendered directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fundamentals.config import LeverageBands, RatioConfig
from fundamentals.data.models import (
    OverviewFacts,
    StatementHistory,
    StatementSnapshot,
)
from fundamentals.metrics.sentinels import (
    NO_DATA_LABEL,
    Sentinel,
    format_ratio,
    ratio_value,
)

logger = logging.getLogger(__name__)

NEGATIVE_EQUITY_LABEL = "Negative Equity – Critical"
NO_DEBT_LABEL = "No Debt"

PERCENT_IN_RANGE = "Within Range"
PERCENT_ABOVE_RANGE = "Exceeds 100% – Check Source Data"
PERCENT_BELOW_RANGE = "Below 0% – Check Source Data"
PERCENT_NO_DATA = NO_DATA_LABEL


@dataclass(frozen=True)
class BoundedPercentage:
    """A percentage of shares outstanding, kept even when out of range.

    Attributes:
        value: Percentage (may exceed 100 when source data double-counts).
        interpretation: Range marker for display.
        out_of_range: True when value is below 0 or above 100.
    """

    value: float
    interpretation: str
    out_of_range: bool


@dataclass(frozen=True)
class RatioMetrics:
    """All single-period ratios for one instrument.

    Attributes:
        free_cash_flow: Operating cash flow less capital expenditure.
        fcf_yield: FCF / market cap in percent.
        roic: NOPAT / invested capital in percent.
        current_ratio: Current assets / current liabilities.
        quick_ratio: (Current assets - inventory) / current liabilities.
        debt_to_equity: Interest-bearing debt / shareholder equity.
        debt_to_equity_band: Leverage band for debt_to_equity.
    """

    free_cash_flow: float
    fcf_yield: str
    roic: str
    current_ratio: str
    quick_ratio: str
    debt_to_equity: str
    debt_to_equity_band: str


def resolve_ebit(snapshot: StatementSnapshot) -> float:
    """First available EBIT measure.

    Order: reported EBIT, operating income, then pre-tax income plus tax
    expense. A zero value counts as unavailable.
    """
    if snapshot.ebit != 0.0:
        return snapshot.ebit
    if snapshot.operating_income != 0.0:
        return snapshot.operating_income
    return snapshot.income_before_tax + snapshot.income_tax_expense


def effective_tax_rate(
    snapshot: StatementSnapshot, config: RatioConfig | None = None
) -> float:
    """Income tax expense / pre-tax income, clamped to [0, 1].

    Falls back to the configured statutory rate when pre-tax income is
    zero or negative.
    """
    config = config or RatioConfig()
    if snapshot.income_before_tax <= 0.0:
        return config.fallback_tax_rate
    rate = snapshot.income_tax_expense / snapshot.income_before_tax
    return min(max(rate, 0.0), 1.0)


def total_debt(snapshot: StatementSnapshot) -> float:
    """Interest-bearing debt: the reported total, else the sum of its parts."""
    if snapshot.total_debt > 0.0:
        return snapshot.total_debt
    return (
        snapshot.short_term_debt
        + snapshot.current_long_term_debt
        + snapshot.long_term_debt
    )


def free_cash_flow(history: StatementHistory) -> float:
    """Current-period operating cash flow less capital expenditure."""
    current = history.current
    return current.operating_cash_flow - abs(current.capital_expenditures)


def fcf_yield(overview: OverviewFacts, history: StatementHistory) -> str:
    """Free cash flow as a percentage of market capitalisation."""
    market_cap = overview.market_capitalization
    if market_cap <= 0.0:
        logger.debug(
            "%s: market cap is zero or negative, FCF yield set to sentinel",
            history.symbol,
        )
        return Sentinel.ZERO
    return format_ratio(free_cash_flow(history) / market_cap * 100)


def roic(history: StatementHistory, config: RatioConfig | None = None) -> str:
    """Return on invested capital in percent.

    NOPAT = EBIT * (1 - effective tax rate).
    Invested capital = total assets - current liabilities + short-term
    debt; short-term debt is interest-bearing, so it is added back.
    """
    current = history.current
    ebit = resolve_ebit(current)
    nopat = ebit * (1 - effective_tax_rate(current, config))
    invested_capital = (
        current.total_assets
        - current.total_current_liabilities
        + current.short_term_debt
    )
    if invested_capital <= 0.0:
        logger.debug(
            "%s: invested capital is not positive (%.2f), ROIC set to sentinel",
            history.symbol, invested_capital,
        )
        return Sentinel.ZERO
    return format_ratio(nopat / invested_capital * 100)


def current_ratio(history: StatementHistory) -> str:
    """Current assets / current liabilities."""
    current = history.current
    if current.total_current_liabilities == 0.0:
        return Sentinel.MAX_RATIO
    return format_ratio(
        current.total_current_assets / current.total_current_liabilities
    )


def quick_ratio(history: StatementHistory) -> str:
    """(Current assets - inventory) / current liabilities."""
    current = history.current
    if current.total_current_liabilities == 0.0:
        return Sentinel.MAX_RATIO
    return format_ratio(
        (current.total_current_assets - current.inventory)
        / current.total_current_liabilities
    )


def debt_to_equity(
    history: StatementHistory, config: RatioConfig | None = None
) -> str:
    """Interest-bearing debt / shareholder equity.

    Zero equity gives MAX_RATIO; negative equity gives NEGATIVE_EQUITY
    whatever the debt. Defined results are capped at +/- ratio_cap.
    """
    config = config or RatioConfig()
    current = history.current
    equity = current.total_shareholder_equity

    if equity == 0.0:
        return Sentinel.MAX_RATIO
    if equity < 0.0:
        logger.warning(
            "%s: negative shareholder equity (%.2f)", history.symbol, equity,
        )
        return Sentinel.NEGATIVE_EQUITY

    ratio = total_debt(current) / equity
    capped = min(max(ratio, -config.ratio_cap), config.ratio_cap)
    return format_ratio(capped)


def debt_to_equity_interpretation(
    value: str | float, bands: LeverageBands | None = None
) -> str:
    """Map a debt-to-equity ratio to its leverage band.

    Negative values (negative equity) take precedence over every band.
    Unparseable input reads as insufficient data.
    """
    bands = bands or LeverageBands()
    ratio = ratio_value(value)

    if ratio is None:
        return NO_DATA_LABEL
    if ratio < 0:
        return NEGATIVE_EQUITY_LABEL
    if ratio == 0:
        return NO_DEBT_LABEL
    if ratio < bands.very_low_max:
        return "Very Low Leverage"
    if ratio < bands.low_max:
        return "Low Leverage"
    if ratio < bands.moderate_max:
        return "Moderate Leverage"
    if ratio < bands.elevated_max:
        return "Elevated Leverage"
    if ratio < bands.high_max:
        return "High Leverage"
    if ratio < bands.very_high_max:
        return "Very High Leverage – Caution"
    return "Excessive Leverage – Critical"


def share_percentage(
    quantity: float, overview: OverviewFacts
) -> BoundedPercentage:
    """Express a share count (holdings, short interest) as % of outstanding.

    Values outside [0, 100] are returned unchanged but flagged, since
    provider figures can legitimately overlap or lag.
    """
    shares = overview.shares_outstanding
    if shares <= 0.0:
        return BoundedPercentage(
            value=0.0, interpretation=PERCENT_NO_DATA, out_of_range=False,
        )

    pct = quantity / shares * 100
    if pct > 100.0:
        logger.debug("share percentage above 100%% (%.2f)", pct)
        return BoundedPercentage(pct, PERCENT_ABOVE_RANGE, True)
    if pct < 0.0:
        return BoundedPercentage(pct, PERCENT_BELOW_RANGE, True)
    return BoundedPercentage(pct, PERCENT_IN_RANGE, False)


def compute_ratios(
    history: StatementHistory,
    overview: OverviewFacts | None = None,
    config: RatioConfig | None = None,
) -> RatioMetrics:
    """Compute every single-period ratio for one instrument.

    Args:
        history: Statement history; only the current period is used.
        overview: Company facts. Without them FCF yield is the zero
            sentinel.
        config: Ratio parameters.

    Returns:
        RatioMetrics with display-ready values.
    """
    overview = overview or OverviewFacts()
    if history.is_empty:
        logger.warning("%s: empty statement history", history.symbol)

    de = debt_to_equity(history, config)
    return RatioMetrics(
        free_cash_flow=free_cash_flow(history),
        fcf_yield=fcf_yield(overview, history),
        roic=roic(history, config),
        current_ratio=current_ratio(history),
        quick_ratio=quick_ratio(history),
        debt_to_equity=de,
        debt_to_equity_band=debt_to_equity_interpretation(de),
    )
