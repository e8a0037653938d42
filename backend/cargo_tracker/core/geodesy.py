"""Great-circle distances between (lon, lat) points."""

import math

# Mean Earth radius (km)
EARTH_RADIUS_KM = 6371.0


def haversine_km(
    lon1: float, lat1: float,
    lon2: float, lat2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Haversine distance in km. Returns NaN for non-finite input."""
    if not all(math.isfinite(v) for v in (lon1, lat1, lon2, lat2)):
        return math.nan

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a just past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return radius_km * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class DistanceCalculator:
    """Haversine distance with a configurable Earth radius."""

    def __init__(self, radius_km: float = EARTH_RADIUS_KM) -> None:
        self.radius_km = radius_km

    def distance(self, origin: tuple[float, float], dest: tuple[float, float]) -> float:
        """Distance in km between two (lon, lat) pairs."""
        lon1, lat1 = origin
        lon2, lat2 = dest
        return haversine_km(lon1, lat1, lon2, lat2, self.radius_km)
