"""
Run configuration for transfer generation.

Settings come from command line flags, an optional YAML config file and
built-in defaults, in that order of precedence.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

import yaml


DEFAULTS = {
    'output': 'transfers.txt',
    'max_distance': 500.0,     # meters
    'walking_speed': 0.785,    # meters per second
    'transfer_time': 0,        # seconds
    'show_progress': False,
}


class ConfigError(Exception):
    """Invalid or unreadable configuration."""


@dataclass(frozen=True)
class TransferConfig:
    """Settings for one transfer generation run."""
    input_path: str
    output_path: str = DEFAULTS['output']
    max_distance: float = DEFAULTS['max_distance']
    walking_speed: float = DEFAULTS['walking_speed']
    transfer_time: int = DEFAULTS['transfer_time']
    show_progress: bool = DEFAULTS['show_progress']


def load_config_file(path: str) -> Dict:
    """
    Load settings from a YAML config file.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary of settings, keyed like DEFAULTS

    Raises:
        ConfigError: If the file is unreadable, not a mapping or has unknown keys
    """
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    unknown = sorted(set(config) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown setting(s) in {path}: {', '.join(map(str, unknown))}")

    return config


def _number(name: str, value) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return number


def build_config(
    input_path: Optional[str],
    overrides: Optional[Dict] = None,
    file_values: Optional[Dict] = None
) -> TransferConfig:
    """
    Merge and validate settings into a TransferConfig.

    Args:
        input_path: Path to stops.txt
        overrides: Settings from the command line; None values are ignored
        file_values: Settings from a config file

    Returns:
        Validated TransferConfig

    Raises:
        ConfigError: If a setting is missing or invalid
    """
    settings = dict(DEFAULTS)
    settings.update(file_values or {})
    settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

    if not input_path:
        raise ConfigError("an input stops file is required")

    walking_speed = _number('walking_speed', settings['walking_speed'])
    if walking_speed <= 0:
        raise ConfigError(f"walking_speed must be greater than 0, got {walking_speed}")

    max_distance = _number('max_distance', settings['max_distance'])

    transfer_time = settings['transfer_time']
    if isinstance(transfer_time, bool) or not isinstance(transfer_time, int) or transfer_time < 0:
        raise ConfigError(
            f"transfer_time must be a non-negative whole number of seconds, got {transfer_time!r}"
        )

    show_progress = settings['show_progress']
    if not isinstance(show_progress, bool):
        raise ConfigError(f"show_progress must be true or false, got {show_progress!r}")

    output_path = settings['output']
    if not output_path:
        raise ConfigError("output path must not be empty")

    return TransferConfig(
        input_path=str(input_path),
        output_path=str(output_path),
        max_distance=max_distance,
        walking_speed=walking_speed,
        transfer_time=transfer_time,
        show_progress=show_progress
    )
