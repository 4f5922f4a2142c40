"""
Configuration utilities for dsauthz.
Reads DSAUTHZ_* environment variables and parses duration strings.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

import os
import re
from datetime import timedelta
from typing import Any, Optional

ENV_PREFIX = "DSAUTHZ_"

TRUE_VALUES = ('true', '1', 'yes', 'on')

DURATION_UNITS = {
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
}

_DURATION_PATTERN = re.compile(r'^(\d+(?:\.\d+)?)\s*([smhd])$')


def get_config_value(key: str, default: Any = None,
                     cast_type: Optional[type] = None,
                     env_prefix: str = ENV_PREFIX) -> Any:
    """
    Read ``<env_prefix><KEY>`` from the environment.

    Unset variables yield ``default``. With ``cast_type`` set, the raw
    string is converted; ``bool`` accepts true/1/yes/on, and a value that
    fails to convert falls back to ``default``.
    """
    raw = os.environ.get(f"{env_prefix}{key.upper()}")
    if raw is None:
        return default
    if cast_type is None:
        return raw
    if cast_type is bool:
        return raw.strip().lower() in TRUE_VALUES

    try:
        return cast_type(raw)
    except (ValueError, TypeError):
        return default


def parse_duration_string(duration_str: str) -> timedelta:
    """
    Parse durations such as '30s', '5m', '2h' or '1d'.

    Raises:
        ValueError: if the value is not a number followed by one unit letter
    """
    if not isinstance(duration_str, str):
        raise ValueError("Duration must be a string")

    match = _DURATION_PATTERN.match(duration_str.strip().lower())
    if not match:
        raise ValueError(f"Invalid duration format: {duration_str}")

    value, unit = match.groups()
    return timedelta(**{DURATION_UNITS[unit]: float(value)})
