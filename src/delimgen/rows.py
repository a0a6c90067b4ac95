"""Header and data-row synthesis."""

from __future__ import annotations

import random
import string
from datetime import date, timedelta

HEADER_FIELDS = ("ID", "DateVal", "StringVal1", "StringVal2", "NumVal")
POOL_SYMBOLS = "#$%&"
MIN_STRING_LENGTH = 5
MAX_STRING_LENGTH = 19
MAX_DAY_OFFSET = 1000
MAX_NUMERIC_VALUE = 999_999


def build_char_pool() -> str:
    """Characters random string fields are drawn from."""
    return string.ascii_uppercase + string.ascii_lowercase + string.digits + POOL_SYMBOLS


def header_line(separator: str) -> str:
    return separator.join(HEADER_FIELDS)


def random_string(char_pool: str, rng: random.Random) -> str:
    length = rng.randint(MIN_STRING_LENGTH, MAX_STRING_LENGTH)
    return "".join(rng.choices(char_pool, k=length))


def random_date(current_date: date, rng: random.Random) -> date:
    return current_date - timedelta(days=rng.randint(0, MAX_DAY_OFFSET))


def synthesize_row(
    sequence_number: int,
    separator: str,
    current_date: date,
    char_pool: str,
    rng: random.Random,
) -> str:
    """Render one data row in header column order."""
    fields = [
        str(sequence_number),
        random_date(current_date, rng).strftime("%Y-%m-%d"),
        random_string(char_pool, rng),
        random_string(char_pool, rng),
        str(rng.randint(0, MAX_NUMERIC_VALUE)),
    ]
    return separator.join(fields)
