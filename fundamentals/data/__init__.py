"""Engine value objects and boundary normalisation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fundamentals.data.models import (
    AdjustedPricePoint,
    GrowthSeries,
    GrowthSeriesPoint,
    Interpretation,
    OverviewFacts,
    PricePoint,
    ScoreResult,
    SplitEvent,
    SplitTable,
    StatementHistory,
    StatementSnapshot,
)
from fundamentals.data.normalize import (
    history_from_reports,
    load_split_tables,
    overview_from_payload,
    price_points_from_frame,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AdjustedPricePoint",
    "GrowthSeries",
    "GrowthSeriesPoint",
    "Interpretation",
    "OverviewFacts",
    "PricePoint",
    "ScoreResult",
    "SplitEvent",
    "SplitTable",
    "StatementHistory",
    "StatementSnapshot",
    "history_from_reports",
    "load_inputs",
    "load_split_tables",
    "overview_from_payload",
    "price_points_from_frame",
]


def load_inputs(
    symbol: str,
    overview: Mapping[str, Any] | None,
    income: Mapping[str, Any] | None,
    balance: Mapping[str, Any] | None,
    cash_flow: Mapping[str, Any] | None,
    quarterly: bool = False,
) -> tuple[OverviewFacts, StatementHistory]:
    """Normalise the four fetched payloads for one instrument.

    Loading sequence:
        1. Pick annualReports (or quarterlyReports) from each statement.
        2. Join the periods by fiscal date, most recent first.
        3. Read market cap and shares from the overview.

    Payloads that failed to fetch may be passed as None; the engine then
    degrades to its insufficient-data results instead of failing.

    Args:
        symbol: Instrument identifier.
        overview: Company overview payload.
        income: Income statement payload.
        balance: Balance sheet payload.
        cash_flow: Cash-flow statement payload.
        quarterly: Use quarterly rather than annual reports.

    Returns:
        (OverviewFacts, StatementHistory)
    """
    key = "quarterlyReports" if quarterly else "annualReports"

    def _reports(payload: Mapping[str, Any] | None) -> Iterable[Mapping[str, Any]]:
        if not payload:
            return ()
        return payload.get(key) or ()

    history = history_from_reports(
        income=_reports(income),
        balance=_reports(balance),
        cash_flow=_reports(cash_flow),
        symbol=symbol,
    )
    facts = overview_from_payload(overview or {})
    if facts.market_capitalization <= 0:
        logger.info("%s: no market capitalisation in overview", symbol)

    return facts, history
