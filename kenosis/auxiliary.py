#!/usr/bin/env python3
"""
Auxiliary utility functions for Kenosis

Byte and path formatting shared by the console output.
"""

import argparse
import pathlib
from typing import Optional

TRUNCATION_MARKER = "[...]"


def format_bytes(size_bytes: int) -> str:
    """Format byte size into human-readable string

    Args:
        size_bytes: Size in bytes to format

    Returns:
        Formatted string like "1.2 GiB", "345.0 MiB", "12.0 KiB", or "789 B"
    """
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GiB"
    if size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MiB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KiB"
    return f"{size_bytes} B"


def parse_size(value: str) -> int:
    """Parse a human-readable size string like '10M' into bytes"""
    value = value.strip().upper()
    multipliers = {"B": 1, "K": 1024, "M": 1024**2, "G": 1024**3}
    for suffix, mult in multipliers.items():
        if value.endswith(suffix):
            return int(float(value[: -len(suffix)]) * mult)
    return int(value)


def size_argument(value: str) -> int:
    """argparse type wrapper around parse_size"""
    try:
        size = parse_size(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r} (examples: 500K, 10M, 1.5G)") from None
    if size < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {value!r}")
    return size


def format_path_for_display(path, home_path: Optional[str] = None) -> str:
    """Replace the home directory prefix of *path* with ~"""
    if home_path is None:
        home_path = str(pathlib.Path.home())

    path = str(path)
    if home_path and (path == home_path or path.startswith(home_path.rstrip("/") + "/")):
        return "~" + path[len(home_path.rstrip("/")) :]
    return path


def truncate_path(path, max_length: int = 40) -> str:
    """Shorten long paths for display

    Keeps a head of ``max_length // 2 - 5`` characters and a tail of
    ``max_length // 2`` characters with [...] between them, so the result is
    never longer than max_length.
    """
    path = str(path)
    if len(path) <= max_length:
        return path

    head = max(max_length // 2 - len(TRUNCATION_MARKER), 0)
    tail = max(min(max_length // 2, max_length - len(TRUNCATION_MARKER) - head), 0)
    return f"{path[:head]}{TRUNCATION_MARKER}{path[len(path) - tail :]}"
