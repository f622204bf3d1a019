"""
Transfer generator.

Pairs every boarding point with every other one (itself included) and
emits a walking transfer for each pair within the configured distance.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator

import numpy as np
from tqdm import tqdm

from transfer_config import TransferConfig
from geodesy import haversine_distances, walking_time
from gtfs_loader import StopPoint


# GTFS transfer_type 2: transfer requires a minimum amount of time
TRANSFER_TYPE = 2


@dataclass(frozen=True)
class TransferRecord:
    """One row of transfers.txt."""
    from_stop_id: str
    to_stop_id: str
    transfer_type: int
    min_transfer_time: int


def generate_transfers(
    stops: Iterable[StopPoint],
    config: TransferConfig
) -> Iterator[TransferRecord]:
    """
    Generate transfers between all pairs of stops within walking distance.

    Pairs are visited in input order, outer stop first, so the output is
    deterministic. Each stop transfers to itself with distance 0.

    Args:
        stops: Stop points, normally from load_stop_points
        config: Run configuration (max_distance, walking_speed, transfer_time)

    Returns:
        Iterator of TransferRecord
    """
    stops = [stop for stop in stops if stop.is_boarding_point]
    if not stops:
        return

    stop_ids = [stop.stop_id for stop in stops]
    lats = np.array([stop.stop_lat for stop in stops], dtype=float)
    lons = np.array([stop.stop_lon for stop in stops], dtype=float)

    iterator = tqdm(stops, desc="Computing transfers", unit="stop") if config.show_progress else stops

    for origin in iterator:
        distances = haversine_distances(origin.stop_lat, origin.stop_lon, lats, lons)

        for index in np.flatnonzero(distances <= config.max_distance):
            min_transfer_time = walking_time(distances[index], config.walking_speed) + config.transfer_time
            yield TransferRecord(
                from_stop_id=origin.stop_id,
                to_stop_id=stop_ids[index],
                transfer_type=TRANSFER_TYPE,
                min_transfer_time=min_transfer_time
            )
