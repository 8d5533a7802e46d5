"""Cross-series statistics.

Dependency rule: analysis/ imports datasource *models* only. It never
fetches data.

Modules:
  - correlation: Pearson correlation over date-aligned series, Fisher-z
    confidence, qualitative interpretation and significance summaries
"""

from devpulse.analysis.correlation import (
    CorrelationBand,
    CorrelationSignificance,
    MetricFamily,
    SignificantPair,
    align_by_date,
    analyze_significance,
    classify_strength,
    confidence_interval,
    correlate_activity_with_air_quality,
    correlate_activity_with_prices,
    correlation_confidence,
    ensure_interpretation,
    interpret,
    pearson,
)

__all__ = [
    "CorrelationBand",
    "CorrelationSignificance",
    "MetricFamily",
    "SignificantPair",
    "align_by_date",
    "analyze_significance",
    "classify_strength",
    "confidence_interval",
    "correlate_activity_with_air_quality",
    "correlate_activity_with_prices",
    "correlation_confidence",
    "ensure_interpretation",
    "interpret",
    "pearson",
]
