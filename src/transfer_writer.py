"""
GTFS transfers.txt writer.
"""

import logging
from dataclasses import astuple
from itertools import islice
from typing import Iterable

import pandas as pd

from transfer_generator import TransferRecord


logger = logging.getLogger("gtfs_transfers.transfer_writer")

TRANSFER_FIELDS = ('from_stop_id', 'to_stop_id', 'transfer_type', 'min_transfer_time')


class TransfersFileError(Exception):
    """The transfers file cannot be written."""


def write_transfers(
    path,
    records: Iterable[TransferRecord],
    chunk_size: int = 10000
) -> int:
    """
    Write transfer records to a transfers.txt file.

    Records are written in the order received, chunk_size rows at a time,
    so the full set of transfers never has to be held in memory.

    Args:
        path: Output file path
        records: Transfer records
        chunk_size: Number of rows per DataFrame chunk

    Returns:
        Number of transfer rows written

    Raises:
        TransfersFileError: If the file cannot be opened or written
    """
    records = iter(records)
    written = 0

    try:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            pd.DataFrame(columns=list(TRANSFER_FIELDS)).to_csv(
                f, index=False, lineterminator='\n'
            )

            while True:
                chunk = [astuple(record) for record in islice(records, chunk_size)]
                if not chunk:
                    break
                pd.DataFrame(chunk, columns=list(TRANSFER_FIELDS)).to_csv(
                    f, header=False, index=False, lineterminator='\n'
                )
                written += len(chunk)
                logger.debug("Wrote %d transfers so far", written)
    except OSError as e:
        raise TransfersFileError(f"cannot write transfers file {path}: {e}") from e

    logger.info("Wrote %d transfers to %s", written, path)
    return written
