"""
Great-circle distance utilities.

Distances between stops are straight-line haversine distances on a sphere,
which is what GTFS transfer generators conventionally use in place of a
street network.
"""

import numpy as np


# Mean Earth radius in meters. Kept exact so generated transfer files are
# reproducible between runs and tools.
EARTH_RADIUS_METERS = 6372797.560856

# Upper bound for walking_time results, in seconds
MAX_WALKING_TIME = 2**32 - 1


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """
    Calculate straight-line distance between two points using Haversine formula.

    Args:
        lat1: Origin latitude (degrees)
        lon1: Origin longitude (degrees)
        lat2: Destination latitude (degrees)
        lon2: Destination longitude (degrees)

    Returns:
        Distance in meters
    """
    # Convert to radians
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat/2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon/2)**2
    c = 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))

    return float(c * EARTH_RADIUS_METERS)


def haversine_distances(
    lat: float,
    lon: float,
    lats: np.ndarray,
    lons: np.ndarray
) -> np.ndarray:
    """
    Calculate distances from one point to many points at once.

    Same formula as haversine_distance, evaluated over arrays so a whole row
    of the stop-to-stop distance matrix is computed in one call.

    Args:
        lat: Origin latitude (degrees)
        lon: Origin longitude (degrees)
        lats: Destination latitudes (degrees)
        lons: Destination longitudes (degrees)

    Returns:
        Array of distances in meters, aligned with lats/lons
    """
    phi1 = np.radians(lat)
    lambda1 = np.radians(lon)
    phi2 = np.radians(np.asarray(lats, dtype=float))
    lambda2 = np.radians(np.asarray(lons, dtype=float))

    dlat = phi2 - phi1
    dlon = lambda2 - lambda1
    a = np.sin(dlat/2)**2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlon/2)**2

    # Rounding can push a marginally past 1 for antipodal points
    return 2 * EARTH_RADIUS_METERS * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def walking_time(distance_meters: float, walking_speed: float) -> int:
    """Whole seconds needed to walk a distance, rounded down.

    Saturates at MAX_WALKING_TIME for extremely slow walking speeds.
    """
    with np.errstate(over='ignore'):
        seconds = np.float64(distance_meters) / walking_speed
    return int(np.floor(min(seconds, MAX_WALKING_TIME)))
