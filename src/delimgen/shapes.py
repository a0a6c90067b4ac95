"""Per-file shape classification."""

from __future__ import annotations

import random

from delimgen.models import FileShape


def shape_for_draw(value: int, empty_percent: int, header_only_percent: int) -> FileShape:
    """Map a draw in [1, 100] onto a file shape."""
    if value <= empty_percent:
        return FileShape.EMPTY
    if value <= empty_percent + header_only_percent:
        return FileShape.HEADER_ONLY
    return FileShape.WITH_DATA


def classify(empty_percent: int, header_only_percent: int, rng: random.Random) -> FileShape:
    """Draw a shape for one file.

    Each call is an independent draw, so over many files the realized shares
    only approximate the configured percentages.
    """
    return shape_for_draw(rng.randint(1, 100), empty_percent, header_only_percent)


def draw_row_count(max_row_count: int, rng: random.Random) -> int:
    return rng.randint(1, max_row_count)
