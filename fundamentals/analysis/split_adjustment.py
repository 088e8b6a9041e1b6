"""Split adjustment of historical price and volume series.

Each raw observation at date d is divided by the product of the ratios
of every split effective after d, so a series spanning several splits is
re-based in one pass:

    factor(d) = prod(ratio for event in table if event.effective_date > d)
    adjusted_close = raw_close / factor
    adjusted_volume = raw_volume * factor
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date

import numpy as np
import pandas as pd

from fundamentals.data.models import (
    AdjustedPricePoint,
    PricePoint,
    SplitEvent,
    SplitTable,
)

logger = logging.getLogger(__name__)


def adjustment_factors(
    dates: Sequence[date], table: SplitTable | None
) -> np.ndarray:
    """Cumulative split factor for each date.

    Args:
        dates: Observation dates (any order).
        table: Splits for the instrument. None or empty gives factor 1.

    Returns:
        Float array aligned with ``dates``.
    """
    factors = np.ones(len(dates), dtype=np.float64)
    if table is None or not table.events or len(dates) == 0:
        return factors

    for event in table.events:
        before = np.fromiter(
            (d < event.effective_date for d in dates), dtype=bool, count=len(dates)
        )
        factors[before] *= event.ratio
    return factors


def adjust_prices(
    points: Sequence[PricePoint], table: SplitTable | None = None
) -> list[AdjustedPricePoint]:
    """Express raw price points in post-split terms.

    Args:
        points: Raw observations for one instrument.
        table: That instrument's splits (may be None or empty).

    Returns:
        One AdjustedPricePoint per input point, same order.
    """
    if not points:
        return []

    factors = adjustment_factors([p.date for p in points], table)

    adjusted: list[AdjustedPricePoint] = []
    for point, factor in zip(points, factors):
        factor = float(factor)
        adjusted.append(
            AdjustedPricePoint(
                date=point.date,
                raw_close=point.raw_close,
                raw_volume=point.raw_volume,
                adjusted_close=point.raw_close / factor,
                adjusted_volume=point.raw_volume * factor,
                adjustment_factor=factor,
                is_adjusted=factor > 1.0,
            )
        )

    count = sum(1 for a in adjusted if a.is_adjusted)
    if count:
        logger.debug(
            "%s: adjusted %d of %d points across %d splits",
            table.symbol if table else "", count, len(adjusted),
            len(table.events) if table else 0,
        )
    return adjusted


def adjust_for_instrument(
    symbol: str,
    points: Sequence[PricePoint],
    tables: Mapping[str, SplitTable],
) -> list[AdjustedPricePoint]:
    """Adjust a series using the instrument's entry in ``tables``.

    Instruments without an entry pass through unchanged.
    """
    table = tables.get(symbol)
    if table is None:
        logger.debug("%s: no known splits", symbol)
    return adjust_prices(points, table)


def adjust_frame(frame: pd.DataFrame, table: SplitTable | None = None) -> pd.DataFrame:
    """Vectorised adjustment of a price DataFrame.

    Args:
        frame: Columns date, close, volume (one row per observation).
        table: Splits for the instrument.

    Returns:
        Copy of ``frame`` with adjusted_close, adjusted_volume,
        adjustment_factor and is_adjusted columns added.

    Raises:
        ValueError: If required columns are missing.
    """
    required = {"date", "close", "volume"}
    missing = required - set(frame.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")

    df = frame.copy()
    dates = [d.date() for d in pd.to_datetime(df["date"])]
    factors = adjustment_factors(dates, table)

    df["adjustment_factor"] = factors
    df["adjusted_close"] = df["close"].astype(float) / factors
    df["adjusted_volume"] = df["volume"].astype(float) * factors
    df["is_adjusted"] = factors > 1.0
    return df


def rescale_indicator(
    adjusted: Sequence[AdjustedPricePoint],
    values: Mapping[date, float],
) -> dict[date, float]:
    """Express a raw-price indicator in split-adjusted terms.

    Indicators computed on raw closes (a moving average, say) carry the
    same split discontinuities as the closes themselves; dividing by the
    point's adjustment factor aligns them with the adjusted series.

    Args:
        adjusted: Adjusted points for the instrument.
        values: Indicator values keyed by observation date.

    Returns:
        Rescaled values for every date present in both inputs.
    """
    factors = {p.date: p.adjustment_factor for p in adjusted}
    return {
        d: float(v) / factors[d]
        for d, v in values.items()
        if d in factors
    }


def splits_in_range(
    table: SplitTable | None, start: date, end: date | None = None
) -> list[SplitEvent]:
    """Split events effective within [start, end] (end open if None)."""
    if table is None:
        return []
    return [
        event for event in table.events
        if event.effective_date >= start
        and (end is None or event.effective_date <= end)
    ]
