"""Synthetic GitHub activity.

Each metric is a base magnitude scaled by:
  - a weekday multiplier (weekends run at 0.6x weekday volume),
  - a weekly sinusoidal trend ``1 + 0.2 * sin(2π * offset / 7)``,
  - multiplicative noise drawn from ``[0.8, 1.2]``.

Stars and forks accumulate regardless of the day of the week, so they skip
the weekday multiplier.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import TYPE_CHECKING

from devpulse.datasources.dashboard_api.models import GitHubActivity

if TYPE_CHECKING:
    import random

WEEKEND_FACTOR = 0.6
TREND_AMPLITUDE = 0.2
TREND_PERIOD_DAYS = 7
NOISE_RANGE = (0.8, 1.2)

# Typical daily volume for a tech hub / major project
BASE_COMMITS = 400
BASE_PULL_REQUESTS = 60
BASE_ISSUES = 40
BASE_CONTRIBUTORS = 70
BASE_REPOSITORIES = 30
BASE_STARS = 150
BASE_FORKS = 25


def weekday_multiplier(day: date) -> float:
    return WEEKEND_FACTOR if day.weekday() >= 5 else 1.0


def trend_factor(offset: int) -> float:
    """Slow weekly wave; ``offset`` is days before the end of the series."""
    return 1 + TREND_AMPLITUDE * math.sin(2 * math.pi * offset / TREND_PERIOD_DAYS)


def _scaled(rng: random.Random, base: int, factor: float) -> int:
    return int(base * factor * rng.uniform(*NOISE_RANGE))


def generate_activity(rng: random.Random, end: date, period: int) -> list[GitHubActivity]:
    """``period`` days of activity ending at ``end``, oldest first."""
    series: list[GitHubActivity] = []
    for offset in range(period - 1, -1, -1):
        day = end - timedelta(days=offset)
        trend = trend_factor(offset)
        weekly = weekday_multiplier(day) * trend
        series.append(
            GitHubActivity(
                date=day,
                commits=_scaled(rng, BASE_COMMITS, weekly),
                stars=_scaled(rng, BASE_STARS, trend),
                contributors=_scaled(rng, BASE_CONTRIBUTORS, weekly),
                pull_requests=_scaled(rng, BASE_PULL_REQUESTS, weekly),
                issues=_scaled(rng, BASE_ISSUES, weekly),
                forks=_scaled(rng, BASE_FORKS, trend),
                repositories=_scaled(rng, BASE_REPOSITORIES, weekly),
            )
        )
    return series
