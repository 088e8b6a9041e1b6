"""Value objects consumed and produced by the analytics engine."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType

import pandas as pd


def safe_float(value: object) -> float:
    """Extract a finite float from a scalar value, defaulting to 0.0.

    Args:
        value: Scalar value (may be None, NaN, a provider placeholder
            string such as "None" or "-", or non-finite).

    Returns:
        Finite float, or 0.0 on any failure.
    """
    if value is None:
        return 0.0
    try:
        f = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(f):
        return 0.0
    return f


def to_date(value: object) -> date:
    """Coerce a date, datetime, pandas Timestamp or ISO string to a date.

    Raises:
        ValueError: If the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Not a date: {value!r}")


class Interpretation(str, Enum):
    """Categorical readings attached to a ScoreResult."""

    SAFE = "Safe Zone – Low Risk"
    GREY = "Grey Zone – Moderate Risk"
    DISTRESS = "Distress Zone – High Risk"
    INSUFFICIENT_DATA = "Insufficient Data"

    EXCELLENT = "Excellent Fundamentals"
    GOOD = "Good Fundamentals"
    AVERAGE = "Average Fundamentals"
    WEAK = "Weak Fundamentals"


@dataclass(frozen=True)
class StatementSnapshot:
    """One fiscal period's reported figures.

    Every numeric field is normalised on construction: missing, None,
    non-numeric and non-finite values become 0.0. Capital expenditure is
    stored as a magnitude because providers disagree on its sign.

    Attributes:
        fiscal_date_ending: Period end date as reported (ISO string).
        total_debt: Provider's combined interest-bearing debt, 0.0 when
            not reported.
        current_long_term_debt: Current portion of long-term debt.
    """

    # Balance sheet
    total_assets: float = 0.0
    total_current_assets: float = 0.0
    total_current_liabilities: float = 0.0
    total_liabilities: float = 0.0
    retained_earnings: float = 0.0
    total_shareholder_equity: float = 0.0
    inventory: float = 0.0
    short_term_debt: float = 0.0
    long_term_debt: float = 0.0
    current_long_term_debt: float = 0.0
    total_debt: float = 0.0
    common_shares_outstanding: float = 0.0

    # Income statement
    total_revenue: float = 0.0
    gross_profit: float = 0.0
    operating_income: float = 0.0
    ebit: float = 0.0
    net_income: float = 0.0
    income_before_tax: float = 0.0
    income_tax_expense: float = 0.0

    # Cash flow
    operating_cash_flow: float = 0.0
    capital_expenditures: float = 0.0

    fiscal_date_ending: str = ""

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "fiscal_date_ending":
                continue
            object.__setattr__(self, f.name, safe_float(getattr(self, f.name)))
        object.__setattr__(
            self, "capital_expenditures", abs(self.capital_expenditures)
        )
        object.__setattr__(
            self, "fiscal_date_ending", str(self.fiscal_date_ending or "")
        )


@dataclass(frozen=True)
class StatementHistory:
    """Statement snapshots for one instrument, most recent first.

    Attributes:
        snapshots: Periods ordered most-recent-first.
        symbol: Instrument identifier, used for log context only.
    """

    snapshots: tuple[StatementSnapshot, ...] = ()
    symbol: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "snapshots", tuple(self.snapshots))

    @property
    def is_empty(self) -> bool:
        return not self.snapshots

    @property
    def current(self) -> StatementSnapshot:
        """Most recent period, or an all-zero snapshot when empty."""
        if not self.snapshots:
            return StatementSnapshot()
        return self.snapshots[0]

    @property
    def prior(self) -> StatementSnapshot | None:
        if len(self.snapshots) < 2:
            return None
        return self.snapshots[1]


@dataclass(frozen=True)
class OverviewFacts:
    """Point-in-time company facts, independent of statement period."""

    market_capitalization: float = 0.0
    shares_outstanding: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "market_capitalization", safe_float(self.market_capitalization)
        )
        object.__setattr__(
            self, "shares_outstanding", safe_float(self.shares_outstanding)
        )


@dataclass(frozen=True)
class ScoreResult:
    """Output of a scorer.

    Attributes:
        score: Numeric score (float for Altman, int for Piotroski).
        interpretation: Categorical reading of the score.
        components: Named sub-terms (ratios or pass/fail flags), read-only.
    """

    score: float
    interpretation: Interpretation
    components: Mapping[str, float | bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "components", MappingProxyType(dict(self.components))
        )


@dataclass(frozen=True)
class GrowthSeriesPoint:
    """One period of a revenue/earnings series.

    Attributes:
        period: Display label, e.g. "2023", "Q4 2023" or "2024e".
        revenue: Total revenue.
        net_income: Net income.
        is_projected: True for extrapolated periods.
        growth_rate: Revenue growth in percent (None if undefined).
        margin: Net margin in percent (None if undefined).
    """

    period: str
    revenue: float
    net_income: float
    is_projected: bool = False
    growth_rate: float | None = None
    margin: float | None = None


@dataclass(frozen=True)
class GrowthSeries:
    """Historical points followed by projected points."""

    points: tuple[GrowthSeriesPoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[GrowthSeriesPoint]:
        return iter(self.points)

    @property
    def historical(self) -> tuple[GrowthSeriesPoint, ...]:
        return tuple(p for p in self.points if not p.is_projected)

    @property
    def projected(self) -> tuple[GrowthSeriesPoint, ...]:
        return tuple(p for p in self.points if p.is_projected)

    def to_frame(self) -> pd.DataFrame:
        """Tabular view for renderers, one row per period."""
        return pd.DataFrame(
            [
                {
                    "period": p.period,
                    "revenue": p.revenue,
                    "net_income": p.net_income,
                    "is_projected": p.is_projected,
                    "growth_rate": p.growth_rate,
                    "margin": p.margin,
                }
                for p in self.points
            ],
            columns=[
                "period", "revenue", "net_income",
                "is_projected", "growth_rate", "margin",
            ],
        )


@dataclass(frozen=True)
class SplitEvent:
    """A corporate stock split.

    Attributes:
        effective_date: First trading date in post-split terms.
        ratio: New shares per old share (4.0 for a 4-for-1 split, 0.1
            for a 1-for-10 reverse split).

    Raises:
        ValueError: If ratio is not a finite positive number.
    """

    effective_date: date
    ratio: float

    def __post_init__(self) -> None:
        try:
            ratio = float(self.ratio)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid split ratio {self.ratio!r}") from None
        if not math.isfinite(ratio) or ratio <= 0:
            raise ValueError(
                f"Split ratio must be a finite positive number, got {self.ratio!r}"
            )
        object.__setattr__(self, "ratio", ratio)
        object.__setattr__(self, "effective_date", to_date(self.effective_date))


@dataclass(frozen=True)
class SplitTable:
    """Known splits for one instrument, held sorted by effective date."""

    events: tuple[SplitEvent, ...] = ()
    symbol: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "events",
            tuple(sorted(self.events, key=lambda e: e.effective_date)),
        )

    def __len__(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class PricePoint:
    """One raw (unadjusted) daily observation."""

    date: date
    raw_close: float
    raw_volume: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_date(self.date))
        object.__setattr__(self, "raw_close", safe_float(self.raw_close))
        object.__setattr__(self, "raw_volume", safe_float(self.raw_volume))


@dataclass(frozen=True)
class AdjustedPricePoint(PricePoint):
    """A PricePoint expressed in post-split terms.

    Attributes:
        adjusted_close: raw_close / adjustment_factor.
        adjusted_volume: raw_volume * adjustment_factor.
        adjustment_factor: Product of all split ratios effective after date.
        is_adjusted: True when adjustment_factor > 1.
    """

    adjusted_close: float
    adjusted_volume: float
    adjustment_factor: float
    is_adjusted: bool
