"""
Geohash bucketing for "nearby" queries.

Redis has no geospatial filter over our JSON documents, so each experience is
indexed under the geohash cell that contains it. A nearby search reads the
cell of the query point plus its eight neighbours, then ranks the candidates
by exact haversine distance. Cell membership alone is an approximation: a
point just across a cell boundary can be close yet fall outside the 3x3 grid.
"""

import math

import pygeohash
from haversine import Unit, haversine

from app.core.constants import EARTH_RADIUS_KM
from app.core.errors import InvalidCoordinate


def validate_coordinate(latitude: float, longitude: float) -> None:
    if latitude is None or longitude is None:
        raise InvalidCoordinate(latitude, longitude)
    if math.isnan(latitude) or math.isnan(longitude):
        raise InvalidCoordinate(latitude, longitude)
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinate(latitude, longitude)


def _wrap_longitude(longitude: float) -> float:
    if -180.0 <= longitude < 180.0:
        return longitude
    return ((longitude + 180.0) % 360.0) - 180.0


def great_circle_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    # Central angle times our own radius; the library's kilometre unit uses a different Earth radius
    return haversine((lat1, lon1), (lat2, lon2), unit=Unit.RADIANS) * EARTH_RADIUS_KM


class ProximityIndex:
    """Fixed-precision geohash cells plus great-circle distance."""

    def __init__(self, precision: int = 6):
        if not 1 <= precision <= 12:
            raise ValueError(f"Geohash precision must be between 1 and 12, got {precision}")
        self.precision = precision

    def cell_for(self, latitude: float, longitude: float) -> str:
        validate_coordinate(latitude, longitude)
        return pygeohash.encode(latitude, longitude, precision=self.precision)

    def neighbor_cells(self, latitude: float, longitude: float) -> set[str]:
        """
        The cell containing the point and its eight neighbours.

        Near the poles there is no cell further north/south, so fewer than nine
        cells come back. Longitude wraps at the antimeridian.
        """
        center = self.cell_for(latitude, longitude)
        center_lat, center_lon, lat_err, lon_err = pygeohash.decode_exactly(center)
        height, width = 2 * lat_err, 2 * lon_err

        cells = {center}
        for d_lat in (-1, 0, 1):
            lat = center_lat + d_lat * height
            if not -90.0 <= lat <= 90.0:
                continue
            for d_lon in (-1, 0, 1):
                lon = _wrap_longitude(center_lon + d_lon * width)
                cells.add(pygeohash.encode(lat, lon, precision=self.precision))
        return cells

    def distance_km(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        validate_coordinate(lat1, lon1)
        validate_coordinate(lat2, lon2)
        return great_circle_km(lat1, lon1, lat2, lon2)
