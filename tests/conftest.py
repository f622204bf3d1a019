"""Shared fixtures for the transfer generation tests."""

import pytest


@pytest.fixture
def write_stops(tmp_path):
    """Write a stops.txt with the given lines and return its path."""
    def _write(*lines, name='stops.txt'):
        path = tmp_path / name
        path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
        return path
    return _write
