"""Synthetic data source.

Generates demo-quality series (activity, prices, air quality) and the
correlations between them when the live API is unreachable.

Public API:
  - generator: SyntheticSeriesGenerator
  - activity: generate_activity (weekday/trend/noise model)
  - markets: generate_prices (bounded random walk), generate_air_quality
"""

from devpulse.datasources.synthetic.activity import WEEKEND_FACTOR, generate_activity
from devpulse.datasources.synthetic.generator import SyntheticSeriesGenerator
from devpulse.datasources.synthetic.markets import generate_air_quality, generate_prices

__all__ = [
    "WEEKEND_FACTOR",
    "SyntheticSeriesGenerator",
    "generate_activity",
    "generate_air_quality",
    "generate_prices",
]
