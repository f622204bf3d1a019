import pytest

from transfer_generator import TransferRecord
from transfer_writer import TransfersFileError, write_transfers


HEADER = 'from_stop_id,to_stop_id,transfer_type,min_transfer_time'


def test_writes_header_and_rows_in_order(tmp_path):
    path = tmp_path / 'transfers.txt'
    records = [TransferRecord('B', 'A', 2, 30), TransferRecord('A', 'B', 2, 31)]

    assert write_transfers(path, records) == 2
    assert path.read_text() == f'{HEADER}\nB,A,2,30\nA,B,2,31\n'


def test_empty_input_writes_header_only(tmp_path):
    path = tmp_path / 'transfers.txt'

    assert write_transfers(path, iter([])) == 0
    assert path.read_text() == f'{HEADER}\n'


def test_quotes_values_containing_delimiters(tmp_path):
    path = tmp_path / 'transfers.txt'

    write_transfers(path, [TransferRecord('stop,1', 'stop "2"', 2, 0)])

    assert path.read_text().splitlines()[1] == '"stop,1","stop ""2""",2,0'


def test_writes_across_chunks(tmp_path):
    path = tmp_path / 'transfers.txt'
    records = (TransferRecord(str(i), str(i), 2, i) for i in range(25))

    assert write_transfers(path, records, chunk_size=10) == 25

    lines = path.read_text().splitlines()
    assert lines[0] == HEADER
    assert len(lines) == 26
    assert lines[-1] == '24,24,2,24'


def test_unwritable_path_is_fatal(tmp_path):
    with pytest.raises(TransfersFileError):
        write_transfers(tmp_path / 'missing-dir' / 'transfers.txt', [])
