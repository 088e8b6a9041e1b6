"""Engine configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Statutory US corporate rate, used when the effective rate is undefined
# (zero or negative pre-tax income).
FALLBACK_TAX_RATE: float = 0.21

# Ratios are bounded so dashboards can always render and compare them.
RATIO_CAP: float = 999.99


class PeriodKind(Enum):
    """Reporting period granularity for projections."""

    ANNUAL = "annual"
    QUARTERLY = "quarterly"


@dataclass
class RatioConfig:
    """Single-period ratio parameters."""

    fallback_tax_rate: float = FALLBACK_TAX_RATE
    ratio_cap: float = RATIO_CAP


@dataclass
class LeverageBands:
    """Upper bounds (exclusive) of the debt-to-equity bands.

    A ratio of exactly zero is "No Debt"; anything at or above
    ``very_high_max`` is excessive.
    """

    very_low_max: float = 0.3
    low_max: float = 0.5
    moderate_max: float = 1.0
    elevated_max: float = 1.5
    high_max: float = 2.0
    very_high_max: float = 3.0


@dataclass
class AltmanConfig:
    """Altman Z-Score coefficients and zone boundaries."""

    working_capital_weight: float = 1.2
    retained_earnings_weight: float = 1.4
    ebit_weight: float = 3.3
    market_value_weight: float = 0.6
    sales_weight: float = 1.0

    # Z > safe_min is safe; grey_min <= Z <= safe_min is grey.
    safe_min: float = 2.99
    grey_min: float = 1.80


@dataclass
class PiotroskiConfig:
    """Piotroski F-Score parameters and display bands."""

    # Share count may grow this much before it counts as dilution.
    dilution_tolerance: float = 0.02

    excellent_min: int = 8
    good_min: int = 6
    average_min: int = 4


@dataclass
class ProjectionConfig:
    """Weighted-growth projection parameters."""

    default_growth_rate: float = 0.05
    min_growth_rate: float = -0.20
    max_growth_rate: float = 0.50

    # Most recent periods used for the growth rate (None = all).
    history_window: int | None = None


@dataclass
class IndustryBenchmarks:
    """Reference industry averages for the comparison table."""

    altman_z: float = 3.2
    piotroski_score: float = 6.0
    current_ratio: float = 1.8
    quick_ratio: float = 1.2
    debt_to_equity: float = 0.8
    roic: float = 12.0
    fcf_yield: float = 5.0

    def as_dict(self) -> dict[str, float]:
        return {
            "altman_z": self.altman_z,
            "piotroski_score": self.piotroski_score,
            "current_ratio": self.current_ratio,
            "quick_ratio": self.quick_ratio,
            "debt_to_equity": self.debt_to_equity,
            "roic": self.roic,
            "fcf_yield": self.fcf_yield,
        }
