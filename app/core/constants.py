"""
Core constants used across the application. Keep these simple and documented.
"""

from typing import Final

# Mean Earth radius used by the haversine distance
EARTH_RADIUS_KM: Final[float] = 6371.0

DEFAULT_CATEGORY_WEIGHT: Final[float] = 1.0
DEFAULT_QUESTION_WEIGHT: Final[float] = 1.0

DEFAULT_CURRENCY: Final[str] = "USD"
