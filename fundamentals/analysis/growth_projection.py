"""Weighted-growth revenue and earnings projection.

Deterministic extrapolation of a historical revenue/net income series:

1. Period-over-period revenue growth rates, averaged with linear
   recency weights (oldest rate has weight 1, newest has weight k) and
   clamped to a sane band.
2. Net margin held at its historical mean.
3. revenue(t+1) = revenue(t) * (1 + g), net_income(t+1) = revenue(t+1) * m.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

import numpy as np
import pandas as pd

from fundamentals.config import PeriodKind, ProjectionConfig
from fundamentals.data.models import GrowthSeries, GrowthSeriesPoint, safe_float

logger = logging.getLogger(__name__)

PROJECTED_SUFFIX = "e"

_YEAR_RE = re.compile(r"^\s*(?:FY\s*)?(\d{4})\s*e?\s*$", re.IGNORECASE)
_QUARTER_FIRST_RE = re.compile(r"^\s*Q([1-4])\s*[-/ ]?\s*(\d{4})\s*e?\s*$", re.IGNORECASE)
_YEAR_FIRST_RE = re.compile(r"^\s*(\d{4})\s*[-/ ]?\s*Q([1-4])\s*e?\s*$", re.IGNORECASE)
_YEAR_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{2})(?:-\d{2})?\s*$")


def _period_kind(kind: PeriodKind | str) -> PeriodKind:
    if isinstance(kind, PeriodKind):
        return kind
    try:
        return PeriodKind(str(kind).lower())
    except ValueError:
        raise ValueError(
            f"Unknown period kind {kind!r}. Must be 'annual' or 'quarterly'."
        ) from None


def _parse_quarter(label: str) -> tuple[int, int] | None:
    """(year, quarter) from a quarterly label, or None."""
    m = _QUARTER_FIRST_RE.match(label)
    if m:
        return int(m.group(2)), int(m.group(1))
    m = _YEAR_FIRST_RE.match(label)
    if m:
        return int(m.group(1)), int(m.group(2))
    m = _YEAR_MONTH_RE.match(label)
    if m:
        month = int(m.group(2))
        if 1 <= month <= 12:
            return int(m.group(1)), (month - 1) // 3 + 1
    return None


def next_period_label(
    label: str, kind: PeriodKind | str, step: int = 1
) -> str:
    """Label for the period ``step`` periods after ``label``.

    Annual labels advance the year ("2023" -> "2024e"). Quarterly labels
    advance the quarter and wrap Q4 into Q1 of the next year
    ("Q4 2023" -> "Q1 2024e"). Year-month labels ("2023-12") are read as
    the quarter containing that month.

    Args:
        label: Last known period label.
        kind: Period granularity.
        step: Number of periods ahead (>= 1).

    Returns:
        Projected period label with the estimate suffix.
    """
    kind = _period_kind(kind)

    if kind is PeriodKind.ANNUAL:
        m = _YEAR_RE.match(label)
        if m is None:
            # Annual data labelled with a full date still starts with the year.
            m = _YEAR_MONTH_RE.match(label)
        if m is not None:
            return f"{int(m.group(1)) + step}{PROJECTED_SUFFIX}"
    else:
        parsed = _parse_quarter(label)
        if parsed is not None:
            year, quarter = parsed
            index = year * 4 + (quarter - 1) + step
            return f"Q{index % 4 + 1} {index // 4}{PROJECTED_SUFFIX}"

    logger.debug("Unparseable period label %r, using offset label", label)
    return f"{label}+{step}{PROJECTED_SUFFIX}"


def build_historical_series(
    rows: pd.DataFrame | Iterable[tuple[str, float, float]],
) -> tuple[GrowthSeriesPoint, ...]:
    """Build historical points from raw (period, revenue, net_income) rows.

    Each point carries its revenue growth versus the previous period and
    its net margin, both in percent; either is None where undefined
    (first period, non-positive base revenue).

    Args:
        rows: Oldest-first rows, or a DataFrame with period, revenue and
            net_income columns in that order of time.

    Returns:
        Tuple of non-projected GrowthSeriesPoint.
    """
    if isinstance(rows, pd.DataFrame):
        missing = {"period", "revenue", "net_income"} - set(rows.columns)
        if missing:
            raise ValueError(f"Missing required columns: {sorted(missing)}")
        records: list[tuple[str, float, float]] = list(
            rows[["period", "revenue", "net_income"]].itertuples(
                index=False, name=None
            )
        )
    else:
        records = list(rows)

    points: list[GrowthSeriesPoint] = []
    prev_revenue: float | None = None
    for period, revenue, net_income in records:
        revenue = safe_float(revenue)
        net_income = safe_float(net_income)

        growth = None
        if prev_revenue is not None and prev_revenue > 0:
            growth = (revenue - prev_revenue) / prev_revenue * 100
        margin = net_income / revenue * 100 if revenue > 0 else None

        points.append(
            GrowthSeriesPoint(
                period=str(period),
                revenue=revenue,
                net_income=net_income,
                is_projected=False,
                growth_rate=growth,
                margin=margin,
            )
        )
        prev_revenue = revenue

    return tuple(points)


def weighted_growth_rate(
    revenues: Sequence[float], config: ProjectionConfig | None = None
) -> float:
    """Recency-weighted mean of period-over-period revenue growth.

    weighted = sum(rate_i * rank_i) / sum(rank_i), rank 1 = oldest rate.
    Rates whose base revenue is not positive are skipped. Falls back to
    the default rate with fewer than two periods or no usable rates, and
    clamps the result to [min_growth_rate, max_growth_rate].

    Returns:
        Growth rate as a decimal fraction (0.20 = 20%).
    """
    config = config or ProjectionConfig()
    values = [safe_float(r) for r in revenues]
    if config.history_window is not None and config.history_window > 0:
        values = values[-config.history_window:]

    if len(values) < 2:
        return config.default_growth_rate

    rates = [
        (cur - prev) / prev
        for prev, cur in zip(values[:-1], values[1:])
        if prev > 0
    ]
    if not rates:
        logger.debug("No usable growth rates, using default")
        return config.default_growth_rate

    ranks = np.arange(1, len(rates) + 1, dtype=np.float64)
    weighted = float(np.average(np.asarray(rates, dtype=np.float64), weights=ranks))

    clamped = min(max(weighted, config.min_growth_rate), config.max_growth_rate)
    if clamped != weighted:
        logger.debug(
            "Weighted growth %.4f clamped to %.4f", weighted, clamped,
        )
    return clamped


def average_net_margin(points: Sequence[GrowthSeriesPoint]) -> float:
    """Mean net_income / revenue over periods with positive revenue.

    Returns:
        Margin as a decimal fraction, 0.0 when no period qualifies.
    """
    margins = [p.net_income / p.revenue for p in points if p.revenue > 0]
    if not margins:
        return 0.0
    return float(np.mean(margins))


def project_growth(
    history: Sequence[GrowthSeriesPoint],
    horizon: int,
    period_kind: PeriodKind | str = PeriodKind.ANNUAL,
    config: ProjectionConfig | None = None,
) -> GrowthSeries:
    """Extend a historical series with ``horizon`` projected periods.

    Historical points are carried over unchanged. Each projected point
    records the growth rate and margin used, in percent.

    Args:
        history: Historical points, oldest first.
        horizon: Number of periods to project (>= 0).
        period_kind: Annual or quarterly labelling.
        config: Projection parameters.

    Returns:
        GrowthSeries of historical then projected points. Empty when the
        history is empty.

    Raises:
        ValueError: If horizon is negative or period_kind is unknown.
    """
    if horizon < 0:
        raise ValueError(f"horizon must be non-negative, got {horizon}")
    kind = _period_kind(period_kind)
    config = config or ProjectionConfig()

    historical = tuple(history)
    if not historical:
        return GrowthSeries()

    growth = weighted_growth_rate([p.revenue for p in historical], config)
    margin = average_net_margin(historical)

    projected: list[GrowthSeriesPoint] = []
    revenue = historical[-1].revenue
    last_label = historical[-1].period
    for step in range(1, horizon + 1):
        revenue = revenue * (1 + growth)
        projected.append(
            GrowthSeriesPoint(
                period=next_period_label(last_label, kind, step),
                revenue=revenue,
                net_income=revenue * margin,
                is_projected=True,
                growth_rate=growth * 100,
                margin=margin * 100,
            )
        )

    return GrowthSeries(points=historical + tuple(projected))
