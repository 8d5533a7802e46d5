"""Correlate developer activity with an external daily metric.

Pearson product-moment correlation over date-aligned series:

    r = (nΣxy - ΣxΣy) / sqrt((nΣx² - (Σx)²)(nΣy² - (Σy)²))

Confidence comes from the Fisher z-test of the strongest pair: with
``z = atanh(|r|) * sqrt(n - 3)`` and a two-sided p-value from the standard
normal, confidence is ``1 - p``. Fewer than 4 aligned points gives 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from statistics import NormalDist
from typing import TYPE_CHECKING, Any

from devpulse.datasources.dashboard_api.models import CorrelationResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devpulse.datasources.dashboard_api.models import (
        AirQualityReading,
        CryptoPrice,
        GitHubActivity,
    )

_STANDARD_NORMAL = NormalDist()

# Largest |r| fed to atanh; keeps perfect correlations finite.
_MAX_ABS_R = 0.999999

# Pairs whose |r| is below this are not reported as significant.
SIGNIFICANCE_THRESHOLD = 0.3
HIGH_CONFIDENCE_THRESHOLD = 0.8


class CorrelationBand(StrEnum):
    """Qualitative strength of a coefficient."""

    WEAK = "weak"
    MODERATE = "moderate"
    NOTABLE = "notable"
    STRONG = "strong"


class MetricFamily(StrEnum):
    """What developer activity is being compared against."""

    CRYPTO = "crypto"
    AIR_QUALITY = "air_quality"


INTERPRETATIONS: dict[MetricFamily, dict[CorrelationBand, str]] = {
    MetricFamily.CRYPTO: {
        CorrelationBand.WEAK: (
            "Weak correlation: Developer activity and crypto prices appear largely independent."
        ),
        CorrelationBand.MODERATE: (
            "Moderate correlation: Some relationship exists between dev activity "
            "and crypto market."
        ),
        CorrelationBand.NOTABLE: (
            "Notable correlation: Developer activity shows meaningful connection "
            "to crypto prices."
        ),
        CorrelationBand.STRONG: (
            "Strong correlation: Significant relationship between development trends "
            "and market movement."
        ),
    },
    MetricFamily.AIR_QUALITY: {
        CorrelationBand.WEAK: (
            "Weak correlation: Developer activity and air quality appear largely independent."
        ),
        CorrelationBand.MODERATE: (
            "Moderate correlation: Some relationship exists between dev activity "
            "and local air quality."
        ),
        CorrelationBand.NOTABLE: (
            "Notable correlation: Developer activity shows meaningful connection "
            "to air pollution levels."
        ),
        CorrelationBand.STRONG: (
            "Strong correlation: Significant relationship between development trends "
            "and air quality."
        ),
    },
}


# =============================================================================
# Primitives
# =============================================================================


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation of the first ``min(len(xs), len(ys))`` elements.

    Returns 0.0 when fewer than two points are available or either series has
    no variance.
    """
    n = min(len(xs), len(ys))
    if n < 2:
        return 0.0

    x = [float(v) for v in xs[:n]]
    y = [float(v) for v in ys[:n]]
    if len(set(x)) < 2 or len(set(y)) < 2:
        return 0.0
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y, strict=True))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    var_x = n * sum_x2 - sum_x * sum_x
    var_y = n * sum_y2 - sum_y * sum_y
    if var_x <= 0 or var_y <= 0:
        return 0.0
    denominator = math.sqrt(var_x * var_y)
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0

    r = (n * sum_xy - sum_x * sum_y) / denominator
    return max(-1.0, min(1.0, r))


def align_by_date(left: Sequence[Any], right: Sequence[Any]) -> list[tuple[Any, Any]]:
    """Pair points from two series that share a date, oldest first."""
    right_by_date = {point.date: point for point in right}
    pairs = [(point, right_by_date[point.date]) for point in left if point.date in right_by_date]
    pairs.sort(key=lambda pair: pair[0].date)
    return pairs


def classify_strength(coefficient: float) -> CorrelationBand:
    """Map |r| to a qualitative band."""
    magnitude = abs(coefficient)
    if magnitude < 0.3:
        return CorrelationBand.WEAK
    if magnitude < 0.5:
        return CorrelationBand.MODERATE
    if magnitude < 0.7:
        return CorrelationBand.NOTABLE
    return CorrelationBand.STRONG


def interpret(correlations: dict[str, float], family: MetricFamily) -> str:
    """Describe the strongest of ``correlations`` in one sentence."""
    strongest = max((abs(r) for r in correlations.values()), default=0.0)
    return INTERPRETATIONS[family][classify_strength(strongest)]


def correlation_confidence(r: float, n: int) -> float:
    """Confidence (1 - two-sided p-value) that ``r`` differs from zero."""
    if n < 4:
        return 0.0
    magnitude = min(abs(r), _MAX_ABS_R)
    z = math.atanh(magnitude) * math.sqrt(n - 3)
    p_value = 2 * (1 - _STANDARD_NORMAL.cdf(z))
    return round(max(0.0, min(1.0, 1 - p_value)), 4)


def confidence_interval(r: float, n: int, level: float = 0.95) -> tuple[float, float] | None:
    """Fisher-z confidence interval for a correlation coefficient.

    Returns None when ``n < 4`` (the standard error is undefined).
    """
    if n < 4 or not 0 < level < 1:
        return None
    clamped = max(-_MAX_ABS_R, min(_MAX_ABS_R, r))
    z = math.atanh(clamped)
    standard_error = 1 / math.sqrt(n - 3)
    z_critical = _STANDARD_NORMAL.inv_cdf(1 - (1 - level) / 2)
    lower = math.tanh(z - z_critical * standard_error)
    upper = math.tanh(z + z_critical * standard_error)
    return max(-1.0, lower), min(1.0, upper)


# =============================================================================
# Named pairs
# =============================================================================


def _build_result(
    entity_id: str,
    period: int,
    series: dict[str, tuple[list[float], list[float]]],
    data_points: int,
    family: MetricFamily,
) -> CorrelationResult:
    correlations = {name: round(pearson(xs, ys), 3) for name, (xs, ys) in series.items()}
    strongest = max((abs(r) for r in correlations.values()), default=0.0)
    return CorrelationResult(
        entity_id=entity_id,
        period=period,
        correlations=correlations,
        confidence=correlation_confidence(strongest, data_points),
        data_points=data_points,
        interpretation=interpret(correlations, family),
    )


def correlate_activity_with_prices(
    coin_id: str,
    period: int,
    activity: Sequence[GitHubActivity],
    prices: Sequence[CryptoPrice],
) -> CorrelationResult:
    """Correlate GitHub activity with a coin's price and volume."""
    aligned = align_by_date(activity, prices)
    commits = [float(a.commits) for a, _ in aligned]
    pull_requests = [float(a.pull_requests) for a, _ in aligned]
    stars = [float(a.stars) for a, _ in aligned]
    price = [p.price for _, p in aligned]
    volume = [p.volume for _, p in aligned]
    return _build_result(
        coin_id,
        period,
        {
            "commits_price": (commits, price),
            "commits_volume": (commits, volume),
            "pull_requests_price": (pull_requests, price),
            "stars_price": (stars, price),
        },
        len(aligned),
        MetricFamily.CRYPTO,
    )


def correlate_activity_with_air_quality(
    city_id: str,
    period: int,
    activity: Sequence[GitHubActivity],
    readings: Sequence[AirQualityReading],
) -> CorrelationResult:
    """Correlate GitHub activity with a city's AQI and PM2.5."""
    aligned = align_by_date(activity, readings)
    commits = [float(a.commits) for a, _ in aligned]
    stars = [float(a.stars) for a, _ in aligned]
    aqi = [float(q.aqi) for _, q in aligned]
    pm25 = [q.pm25 for _, q in aligned]
    return _build_result(
        city_id,
        period,
        {
            "commits_aqi": (commits, aqi),
            "stars_aqi": (stars, aqi),
            "commits_pm25": (commits, pm25),
            "stars_pm25": (stars, pm25),
        },
        len(aligned),
        MetricFamily.AIR_QUALITY,
    )


def ensure_interpretation(result: CorrelationResult, family: MetricFamily) -> CorrelationResult:
    """Fill in ``interpretation`` when the API left it out."""
    if not result.interpretation:
        result.interpretation = interpret(result.correlations, family)
    return result


# =============================================================================
# Significance
# =============================================================================


@dataclass
class SignificantPair:
    """A coefficient strong enough to report."""

    metric: str
    coefficient: float
    strength: CorrelationBand
    direction: str


@dataclass
class CorrelationSignificance:
    """Reportable findings for a correlation result."""

    has_significant_correlations: bool
    confidence_level: str
    significant: list[SignificantPair] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)


def confidence_level(confidence: float) -> str:
    if confidence >= 0.9:
        return "very high"
    if confidence >= 0.8:
        return "high"
    if confidence >= 0.6:
        return "moderate"
    return "low"


def analyze_significance(result: CorrelationResult) -> CorrelationSignificance:
    """List the pairs with |r| >= 0.3 and summarise them in plain sentences."""
    significant = [
        SignificantPair(
            metric=name,
            coefficient=r,
            strength=classify_strength(r),
            direction="positive" if r > 0 else "negative",
        )
        for name, r in result.correlations.items()
        if abs(r) >= SIGNIFICANCE_THRESHOLD
    ]

    has_significant = bool(significant) and result.confidence >= HIGH_CONFIDENCE_THRESHOLD
    highlights: list[str] = []
    if has_significant:
        if any(pair.strength is CorrelationBand.STRONG for pair in significant):
            highlights.append(
                "Strong correlations detected with high confidence "
                f"({round(result.confidence * 100)}%)"
            )
        if any(pair.direction == "positive" for pair in significant):
            highlights.append("Positive correlations: the metrics tend to rise together")
        if any(pair.direction == "negative" for pair in significant):
            highlights.append("Negative correlations: one metric tends to fall as the other rises")
    elif result.confidence < 0.5:
        highlights.append(
            "Low confidence in correlation results due to insufficient data or high variability"
        )
    else:
        highlights.append("No statistically significant correlations detected")

    return CorrelationSignificance(
        has_significant_correlations=has_significant,
        confidence_level=confidence_level(result.confidence),
        significant=significant,
        highlights=highlights,
    )
