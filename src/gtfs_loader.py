"""
GTFS stops loader.

Reads a GTFS stops.txt file into StopPoint records. Records are decoded one
at a time: a record that cannot be decoded is reported and skipped without
affecting its neighbours. Only boarding points (location_type absent or 0)
are kept for transfer computation.
"""

import csv
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union


logger = logging.getLogger("gtfs_transfers.gtfs_loader")

REQUIRED_COLUMNS = ('stop_id', 'stop_lat', 'stop_lon')
LOCATION_TYPE_COLUMN = 'location_type'


class StopsFileError(Exception):
    """The stops file cannot be read or lacks required columns."""


@dataclass(frozen=True)
class StopPoint:
    """A stop, platform or other location from stops.txt."""
    stop_id: str
    stop_lat: float
    stop_lon: float
    location_type: Optional[int] = None

    @property
    def is_boarding_point(self) -> bool:
        """True for stops/platforms (location_type absent or 0)."""
        return not self.location_type


@dataclass(frozen=True)
class RowError:
    """A stops.txt record that could not be decoded.

    line is the physical line the record ends on (header is line 1).
    """
    line: int
    reason: str


def _is_decodable(text: str) -> bool:
    # Bytes that are not UTF-8 come through as lone surrogates
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def _parse_coordinate(text: str, name: str, limit: float):
    """Return (value, None) or (None, reason)."""
    if not text:
        return None, f"missing {name}"
    try:
        value = float(text)
    except ValueError:
        return None, f"invalid {name} {text!r}"
    if not math.isfinite(value) or abs(value) > limit:
        return None, f"{name} {text!r} out of range"
    return value, None


def _decode_row(line: int, row: Dict[str, str]) -> Union[StopPoint, RowError]:
    """Decode one stops.txt record into a StopPoint or a RowError."""
    for name, text in row.items():
        if not _is_decodable(text):
            return RowError(line, f"{name} is not valid UTF-8")

    stop_id = row['stop_id']
    if not stop_id:
        return RowError(line, "missing stop_id")

    lat, reason = _parse_coordinate(row['stop_lat'], 'stop_lat', 90.0)
    if reason:
        return RowError(line, f"stop {stop_id}: {reason}")

    lon, reason = _parse_coordinate(row['stop_lon'], 'stop_lon', 180.0)
    if reason:
        return RowError(line, f"stop {stop_id}: {reason}")

    location_type = None
    raw_type = row.get(LOCATION_TYPE_COLUMN, '')
    if raw_type:
        try:
            location_type = int(raw_type)
        except ValueError:
            return RowError(line, f"stop {stop_id}: invalid location_type {raw_type!r}")

    return StopPoint(stop_id, lat, lon, location_type)


def read_stop_rows(path) -> Iterator[Union[StopPoint, RowError]]:
    """
    Decode every data record of a stops.txt file.

    Columns are matched by header name, so their order does not matter and
    columns other than stop_id, stop_lat, stop_lon and location_type are
    ignored. Blank lines are skipped. A record whose field count differs
    from the header's is a RowError.

    Args:
        path: Path to stops.txt

    Returns:
        Iterator yielding a StopPoint or a RowError per data record, in file order

    Raises:
        StopsFileError: If the file cannot be read or a required column is missing
    """
    try:
        f = open(path, 'r', newline='', encoding='utf-8-sig', errors='surrogateescape')
    except OSError as e:
        raise StopsFileError(f"cannot open stops file {path}: {e}") from e

    with f:
        reader = csv.reader(f, skipinitialspace=True)
        try:
            header = [name.strip() for name in next(reader)]
        except StopIteration:
            raise StopsFileError(f"stops file {path} has no header row")
        except (OSError, csv.Error) as e:
            raise StopsFileError(f"cannot read header of stops file {path}: {e}") from e

        missing = [name for name in REQUIRED_COLUMNS if name not in header]
        if missing:
            raise StopsFileError(
                f"stops file {path} is missing required column(s): {', '.join(missing)}"
            )

        columns = list(REQUIRED_COLUMNS)
        if LOCATION_TYPE_COLUMN in header:
            columns.append(LOCATION_TYPE_COLUMN)
        positions = {name: header.index(name) for name in columns}

        while True:
            try:
                values = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                yield RowError(reader.line_num, f"cannot parse record: {e}")
                continue
            except OSError as e:
                raise StopsFileError(f"cannot read stops file {path}: {e}") from e

            if not any(value.strip() for value in values):
                continue
            if len(values) != len(header):
                yield RowError(
                    reader.line_num,
                    f"expected {len(header)} fields, saw {len(values)}"
                )
                continue

            row = {name: values[index].strip() for name, index in positions.items()}
            yield _decode_row(reader.line_num, row)


def load_stop_points(path) -> List[StopPoint]:
    """
    Load the boarding points of a stops.txt file.

    Undecodable records are logged and skipped. Stations, entrances and
    other nodes (location_type other than 0) are left out.

    Args:
        path: Path to stops.txt

    Returns:
        List of StopPoint in file order

    Raises:
        StopsFileError: If the file cannot be read or a required column is missing
    """
    logger.info("Loading stops from %s...", path)

    stop_points = []
    skipped = 0
    excluded = 0
    for result in read_stop_rows(path):
        if isinstance(result, RowError):
            skipped += 1
            logger.warning("Skipping stops line %d: %s", result.line, result.reason)
        elif result.is_boarding_point:
            stop_points.append(result)
        else:
            excluded += 1

    logger.info(
        "Loaded %d stop points (%d rows skipped, %d non-boarding locations excluded)",
        len(stop_points), skipped, excluded
    )
    return stop_points
