"""Boundary normalisation of provider payloads into engine value objects.

Statement payloads follow the Alpha Vantage report shape: one dict per
fiscal period with camelCase keys and string values, where missing
figures are reported as "None". Everything is converted once here; the
metric modules never see raw payloads.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from fundamentals.data.models import (
    OverviewFacts,
    PricePoint,
    SplitEvent,
    SplitTable,
    StatementHistory,
    StatementSnapshot,
    safe_float,
)

logger = logging.getLogger(__name__)

# Column mappings: provider camelCase -> snapshot snake_case
_BALANCE_COLUMNS = {
    "totalAssets": "total_assets",
    "totalCurrentAssets": "total_current_assets",
    "totalCurrentLiabilities": "total_current_liabilities",
    "totalLiabilities": "total_liabilities",
    "retainedEarnings": "retained_earnings",
    "totalShareholderEquity": "total_shareholder_equity",
    "inventory": "inventory",
    "shortTermDebt": "short_term_debt",
    "longTermDebt": "long_term_debt",
    "currentLongTermDebt": "current_long_term_debt",
    "totalDebt": "total_debt",
    "commonStockSharesOutstanding": "common_shares_outstanding",
}

_INCOME_COLUMNS = {
    "totalRevenue": "total_revenue",
    "grossProfit": "gross_profit",
    "operatingIncome": "operating_income",
    "ebit": "ebit",
    "netIncome": "net_income",
    "incomeBeforeTax": "income_before_tax",
    "incomeTaxExpense": "income_tax_expense",
}

_CASHFLOW_COLUMNS = {
    "operatingCashflow": "operating_cash_flow",
    "capitalExpenditures": "capital_expenditures",
}

# Some providers spell these differently.
_ALIASES = {
    "operatingCashFlow": "operating_cash_flow",
    "capitalExpenditure": "capital_expenditures",
    "commonSharesOutstanding": "common_shares_outstanding",
    "revenue": "total_revenue",
}

_REPORT_COLUMNS: dict[str, str] = {
    **_BALANCE_COLUMNS,
    **_INCOME_COLUMNS,
    **_CASHFLOW_COLUMNS,
    **_ALIASES,
}

_RATIO_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(?::|/|-for-|\s+for\s+)\s*(\d+(?:\.\d+)?)\s*$",
    re.IGNORECASE,
)


def snapshot_from_report(report: Mapping[str, Any]) -> StatementSnapshot:
    """Convert one provider report (any statement type) to a snapshot.

    Unknown keys are ignored; missing keys become 0.0.
    """
    values: dict[str, Any] = {}
    for key, field_name in _REPORT_COLUMNS.items():
        if key in report and field_name not in values:
            values[field_name] = report[key]
    return StatementSnapshot(
        fiscal_date_ending=str(report.get("fiscalDateEnding") or ""),
        **values,
    )


def _merge_reports(*reports: Mapping[str, Any] | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for report in reports:
        if report:
            merged.update(report)
    return merged


def history_from_reports(
    income: Iterable[Mapping[str, Any]] = (),
    balance: Iterable[Mapping[str, Any]] = (),
    cash_flow: Iterable[Mapping[str, Any]] = (),
    symbol: str = "",
    limit: int | None = None,
) -> StatementHistory:
    """Join period-aligned statement reports into a StatementHistory.

    Reports are matched on fiscalDateEnding. Periods are ordered
    most-recent-first regardless of input order; a period present in
    only some statements keeps zeros for the missing figures.

    Args:
        income: Income statement reports.
        balance: Balance sheet reports.
        cash_flow: Cash-flow statement reports.
        symbol: Instrument identifier for log context.
        limit: Keep at most this many most recent periods.

    Returns:
        StatementHistory (empty if no reports carry a date).
    """
    by_date: dict[str, list[Mapping[str, Any]]] = {}
    for reports in (income, balance, cash_flow):
        for report in reports or ():
            key = str(report.get("fiscalDateEnding") or "")
            if not key:
                logger.warning("%s: report without fiscalDateEnding skipped", symbol)
                continue
            by_date.setdefault(key, []).append(report)

    ordered = sorted(by_date, reverse=True)
    if limit is not None:
        ordered = ordered[:limit]

    snapshots = tuple(
        snapshot_from_report(_merge_reports(*by_date[key])) for key in ordered
    )
    if not snapshots:
        logger.warning("%s: no statement periods", symbol)
    return StatementHistory(snapshots=snapshots, symbol=symbol)


def overview_from_payload(payload: Mapping[str, Any]) -> OverviewFacts:
    """Company overview payload (MarketCapitalization, SharesOutstanding)."""
    return OverviewFacts(
        market_capitalization=payload.get("MarketCapitalization"),  # type: ignore[arg-type]
        shares_outstanding=payload.get("SharesOutstanding"),  # type: ignore[arg-type]
    )


def parse_split_ratio(value: object) -> float:
    """Parse a split ratio given as a number or "4:1", "4/1", "4-for-1".

    Raises:
        ValueError: If the value is not a positive finite ratio.
    """
    m = _RATIO_RE.match(value) if isinstance(value, str) else None
    if m:
        new, old = float(m.group(1)), float(m.group(2))
        ratio = new / old if old else 0.0
    else:
        ratio = safe_float(value)
    if ratio <= 0:
        raise ValueError(f"Invalid split ratio {value!r}")
    return ratio


def _split_tables_from_mapping(
    data: Mapping[str, Any],
) -> dict[str, SplitTable]:
    tables: dict[str, SplitTable] = {}
    for symbol, entries in data.items():
        if not isinstance(entries, list):
            raise ValueError(
                f"Split entries for {symbol!r} must be a list, "
                f"got {type(entries).__name__}"
            )
        events: list[SplitEvent] = []
        for entry in entries:
            try:
                effective = entry.get("effective_date", entry.get("date"))
                events.append(
                    SplitEvent(
                        effective_date=effective,
                        ratio=parse_split_ratio(
                            entry.get("ratio", entry.get("split_ratio"))
                        ),
                    )
                )
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("%s: skipping split entry %r (%s)", symbol, entry, exc)
        tables[str(symbol)] = SplitTable(events=tuple(events), symbol=str(symbol))
    return tables


def load_split_tables(source: Mapping[str, Any] | str | Path) -> dict[str, SplitTable]:
    """Load split tables keyed by instrument identifier.

    Expected shape (mapping or JSON file)::

        {"AAPL": [{"effective_date": "2020-08-31", "ratio": "4:1"}, ...]}

    ``date`` and ``split_ratio`` are accepted as alternative keys. Invalid
    entries are logged and skipped; the rest of the table still loads.

    Args:
        source: Mapping, or path to a JSON file.

    Returns:
        {symbol: SplitTable}

    Raises:
        ValueError: If the top level is not a mapping of lists.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        logger.info("Loaded split table file %s", path)
    else:
        data = source

    if not isinstance(data, Mapping):
        raise ValueError("Split table must be a mapping of symbol to entries")

    tables = _split_tables_from_mapping(data)
    logger.info(
        "Split tables for %d instruments (%d events)",
        len(tables), sum(len(t) for t in tables.values()),
    )
    return tables


def price_points_from_frame(frame: pd.DataFrame) -> list[PricePoint]:
    """Convert a DataFrame with date, close, volume columns to PricePoints.

    Raises:
        ValueError: If required columns are missing.
    """
    required = {"date", "close", "volume"}
    missing = required - set(frame.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")

    dates = pd.to_datetime(frame["date"])
    return [
        PricePoint(date=d.date(), raw_close=close, raw_volume=volume)
        for d, close, volume in zip(dates, frame["close"], frame["volume"])
    ]
