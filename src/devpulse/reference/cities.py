"""Tech hub cities tracked by the air-quality dashboard."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

#: AQI used by the synthetic generator when a city has no baseline.
DEFAULT_BASE_AQI = 60


@dataclass(frozen=True)
class TechHubCity:
    """A city with its location and typical air quality."""

    id: str
    name: str
    lat: float
    lon: float
    country: str = "India"
    timezone: str = "Asia/Kolkata"
    base_aqi: int = DEFAULT_BASE_AQI

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


TECH_HUB_CITIES: tuple[TechHubCity, ...] = (
    TechHubCity("bangalore", "Bangalore", 12.9716, 77.5946, base_aqi=120),
    TechHubCity("mumbai", "Mumbai", 19.0760, 72.8777, base_aqi=110),
    TechHubCity("delhi", "Delhi", 28.6139, 77.2090, base_aqi=180),
    TechHubCity("hyderabad", "Hyderabad", 17.3850, 78.4867, base_aqi=95),
    TechHubCity("chennai", "Chennai", 13.0827, 80.2707, base_aqi=80),
    TechHubCity("pune", "Pune", 18.5204, 73.8567, base_aqi=95),
    TechHubCity("kolkata", "Kolkata", 22.5726, 88.3639, base_aqi=140),
    TechHubCity("ahmedabad", "Ahmedabad", 23.0225, 72.5714, base_aqi=125),
    TechHubCity("jaipur", "Jaipur", 26.9124, 75.7873, base_aqi=115),
    TechHubCity("chandigarh", "Chandigarh", 30.7333, 76.7794, base_aqi=100),
    TechHubCity("noida", "Noida", 28.5355, 77.3910, base_aqi=170),
    TechHubCity("gurgaon", "Gurgaon", 28.4595, 77.0266, base_aqi=165),
    TechHubCity("kochi", "Kochi", 9.9312, 76.2673, base_aqi=55),
    TechHubCity("thiruvananthapuram", "Thiruvananthapuram", 8.5241, 76.9366, base_aqi=50),
    TechHubCity("indore", "Indore", 22.7196, 75.8577, base_aqi=90),
    TechHubCity("coimbatore", "Coimbatore", 11.0168, 76.9558, base_aqi=60),
    TechHubCity("nagpur", "Nagpur", 21.1458, 79.0882, base_aqi=100),
    TechHubCity("lucknow", "Lucknow", 26.8467, 80.9462, base_aqi=150),
    TechHubCity("bhubaneswar", "Bhubaneswar", 20.2961, 85.8245, base_aqi=85),
    TechHubCity("visakhapatnam", "Visakhapatnam", 17.6868, 83.2185, base_aqi=75),
)

_BY_ID = {city.id: city for city in TECH_HUB_CITIES}


def get_city(city_id: str) -> TechHubCity | None:
    return _BY_ID.get(city_id)


def is_supported_city(city_id: str) -> bool:
    return city_id in _BY_ID
