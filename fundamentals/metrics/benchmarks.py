"""Display interpretations and industry-average comparison."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from fundamentals.config import IndustryBenchmarks
from fundamentals.data.models import ScoreResult
from fundamentals.metrics.ratios import RatioMetrics
from fundamentals.metrics.sentinels import NO_DATA_LABEL, ratio_value

logger = logging.getLogger(__name__)

# Metrics where a lower company value is the better outcome.
LOWER_IS_BETTER = frozenset({"debt_to_equity"})


@dataclass(frozen=True)
class MetricComparison:
    """One metric against its industry average.

    Attributes:
        metric: Metric key.
        company_value: Company figure.
        industry_value: Industry average.
        relative_performance: (company - industry) / industry in percent.
            None when the industry average is zero.
        is_better: Company beats the average in the favourable direction.
    """

    metric: str
    company_value: float
    industry_value: float
    relative_performance: float | None
    is_better: bool


@dataclass(frozen=True)
class IndustryComparison:
    """Per-metric comparisons and the overall better-than-average share."""

    metrics: tuple[MetricComparison, ...] = field(default_factory=tuple)
    better_count: int = 0
    better_percentage: float = 0.0

    @property
    def is_above_average(self) -> bool:
        """More than half of the metrics beat the industry."""
        return self.better_count > len(self.metrics) / 2


def free_cash_flow_interpretation(fcf: float) -> str:
    return "Positive" if fcf > 0 else "Negative"


def fcf_yield_interpretation(value: str | float) -> str:
    pct = ratio_value(value)
    if pct is None:
        return NO_DATA_LABEL
    if pct > 5:
        return "Strong"
    if pct > 3:
        return "Moderate"
    return "Weak"


def roic_interpretation(value: str | float) -> str:
    pct = ratio_value(value)
    if pct is None:
        return NO_DATA_LABEL
    if pct > 15:
        return "Excellent"
    if pct > 10:
        return "Good"
    return "Poor"


def current_ratio_interpretation(value: str | float) -> str:
    ratio = ratio_value(value)
    if ratio is None:
        return NO_DATA_LABEL
    if ratio > 2:
        return "Strong"
    if ratio > 1:
        return "Adequate"
    return "Weak"


def quick_ratio_interpretation(value: str | float) -> str:
    ratio = ratio_value(value)
    if ratio is None:
        return NO_DATA_LABEL
    if ratio > 1:
        return "Strong"
    if ratio > 0.5:
        return "Adequate"
    return "Weak"


def _numeric(value: str | float) -> float:
    number = ratio_value(value)
    return 0.0 if number is None else number


def company_metric_values(
    ratios: RatioMetrics, altman: ScoreResult, piotroski: ScoreResult
) -> dict[str, float]:
    """Numeric company values keyed like IndustryBenchmarks.as_dict()."""
    return {
        "altman_z": float(altman.score),
        "piotroski_score": float(piotroski.score),
        "current_ratio": _numeric(ratios.current_ratio),
        "quick_ratio": _numeric(ratios.quick_ratio),
        "debt_to_equity": _numeric(ratios.debt_to_equity),
        "roic": _numeric(ratios.roic),
        "fcf_yield": _numeric(ratios.fcf_yield),
    }


def compare_to_industry(
    company: Mapping[str, float],
    industry: Mapping[str, float] | IndustryBenchmarks | None = None,
) -> IndustryComparison:
    """Compare company metrics against industry averages.

    Only metrics present in the industry mapping are compared; a metric
    missing from ``company`` counts as 0.

    Args:
        company: Company values by metric key.
        industry: Industry averages by metric key (defaults to
            IndustryBenchmarks()).

    Returns:
        IndustryComparison with one entry per industry metric.
    """
    if industry is None:
        industry = IndustryBenchmarks()
    if isinstance(industry, IndustryBenchmarks):
        industry = industry.as_dict()

    comparisons: list[MetricComparison] = []
    for metric, industry_value in industry.items():
        company_value = float(company.get(metric, 0.0))
        if metric not in company:
            logger.debug("%s missing from company metrics, using 0", metric)

        if industry_value == 0:
            relative = None
        else:
            relative = (company_value - industry_value) / industry_value * 100

        if metric in LOWER_IS_BETTER:
            # Negative leverage means negative equity, never an improvement.
            is_better = 0 <= company_value < industry_value
        else:
            is_better = company_value > industry_value

        comparisons.append(
            MetricComparison(
                metric=metric,
                company_value=company_value,
                industry_value=float(industry_value),
                relative_performance=relative,
                is_better=is_better,
            )
        )

    better = sum(1 for c in comparisons if c.is_better)
    pct = better / len(comparisons) * 100 if comparisons else 0.0

    return IndustryComparison(
        metrics=tuple(comparisons),
        better_count=better,
        better_percentage=pct,
    )
