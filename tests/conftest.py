from __future__ import annotations

import os
import random
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

import pytest

from delimgen.config import ensure_directories
from delimgen.generator import RunContext, build_context
from delimgen.models import RunConfig

FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53)
FIXED_DATE = date(2026, 3, 14)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("DELIMGEN_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_context(tmp_path: Path, sleeps: list[float]) -> Callable[..., RunContext]:
    def _make(**config_values: object) -> RunContext:
        config_values.setdefault("target_dir", tmp_path / "out")
        config_values.setdefault("seed", 7)
        config = RunConfig(**config_values)
        ensure_directories(config)
        return build_context(
            config,
            current_date=FIXED_DATE,
            clock=lambda: FIXED_NOW,
            sleep=sleeps.append,
        )

    return _make
