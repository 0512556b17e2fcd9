"""Application defaults with environment variable overrides."""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


DEFAULT_SAMPLE_COUNT = _env_int("FUNCSAMP_SAMPLE_COUNT", 1024)
DEFAULT_SEQUENCE_COUNT = _env_int("FUNCSAMP_SEQUENCE_COUNT", 100)

# Descriptive lines preceding the first sequence marker in a sample file.
DEFAULT_HEADER_LINES = _env_int("FUNCSAMP_HEADER_LINES", 2)

REPORT_STRIDE = 4
ERROR_FORMAT = "%f"

LOG_LEVEL = os.environ.get("FUNCSAMP_LOG_LEVEL", "WARNING").upper()


__all__ = [
    "DEFAULT_SAMPLE_COUNT",
    "DEFAULT_SEQUENCE_COUNT",
    "DEFAULT_HEADER_LINES",
    "REPORT_STRIDE",
    "ERROR_FORMAT",
    "LOG_LEVEL",
]
