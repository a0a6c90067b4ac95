from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from delimgen.generator import RunContext, file_name, generate_files
from delimgen.models import FileShape, RunConfig

HEADER = "ID,DateVal,StringVal1,StringVal2,NumVal"


def _lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def _data_files(context: RunContext) -> list[Path]:
    return sorted(path for path in context.config.target_dir.iterdir() if path.is_file())


def test_all_empty_files(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=5, empty_percent=100, header_only_percent=0)
    report = generate_files(context)

    files = _data_files(context)
    assert len(files) == 5
    assert all(path.stat().st_size == 0 for path in files)
    assert report.count(FileShape.EMPTY) == 5


def test_header_only_file(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=1, empty_percent=0, header_only_percent=100)
    generate_files(context)

    (path,) = _data_files(context)
    assert _lines(path) == [HEADER]


def test_single_row_file(make_context: Callable[..., RunContext]) -> None:
    context = make_context(
        file_count=1, empty_percent=0, header_only_percent=0, max_row_count=1
    )
    report = generate_files(context)

    (path,) = _data_files(context)
    lines = _lines(path)
    assert len(lines) == 2
    assert lines[0] == HEADER
    assert lines[1].startswith("1,")
    assert report.files[0].row_count == 1


def test_mixed_run_matches_reported_shapes(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=40, max_row_count=25, separator="|")
    report = generate_files(context)

    assert len(report.files) == 40
    assert len(_data_files(context)) == 40
    for generated in report.files:
        path = Path(generated.path)
        if generated.shape == FileShape.EMPTY:
            assert path.stat().st_size == 0
            continue
        lines = _lines(path)
        assert lines[0] == HEADER.replace(",", "|")
        if generated.shape == FileShape.HEADER_ONLY:
            assert len(lines) == 1
            continue
        assert len(lines) == generated.row_count + 1
        for position, line in enumerate(lines[1:], start=1):
            fields = line.split("|")
            assert len(fields) == 5
            assert int(fields[0]) == position
            row_date = datetime.strptime(fields[1], "%Y-%m-%d").date()
            assert context.current_date - timedelta(days=1000) <= row_date
            assert row_date <= context.current_date


def test_same_seed_reproduces_contents(tmp_path: Path, make_context) -> None:
    first = make_context(target_dir=tmp_path / "a", file_count=6, max_row_count=10, seed=3)
    second = make_context(target_dir=tmp_path / "b", file_count=6, max_row_count=10, seed=3)
    generate_files(first)
    generate_files(second)

    first_texts = [path.read_text(encoding="utf-8") for path in _data_files(first)]
    second_texts = [path.read_text(encoding="utf-8") for path in _data_files(second)]
    assert first_texts == second_texts


def test_file_name_is_padded_and_timestamped() -> None:
    config = RunConfig(file_count=250)
    name = file_name(config, 7, datetime(2026, 3, 14, 9, 26, 53))
    assert name == "TestFile_007_20260314-092653.csv"


def test_existing_file_is_truncated(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=1, empty_percent=100, header_only_percent=0)
    stale = context.config.target_dir / file_name(context.config, 1, context.clock())
    stale.write_text("stale\n", encoding="utf-8")

    generate_files(context)

    assert stale.stat().st_size == 0


def test_run_log_records_each_file_and_summary(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=3, logging_enabled=True, max_row_count=4)
    report = generate_files(context)

    assert report.log_path is not None
    log_path = Path(report.log_path)
    assert log_path.parent == context.config.target_dir / "Log"
    lines = _lines(log_path)
    assert len(lines) == 3 + 3
    assert lines[0].startswith("[2026-03-14 09:26:53] Run started")
    assert sum("Created TestFile_" in line for line in lines) == 3
    assert "Run completed: 3 files" in lines[-1]


def test_log_dir_is_not_counted_as_data_file(make_context: Callable[..., RunContext]) -> None:
    context = make_context(file_count=2, logging_enabled=True)
    generate_files(context)
    assert len(_data_files(context)) == 2


def test_failed_header_write_does_not_stop_rows(
    make_context: Callable[..., RunContext], monkeypatch: pytest.MonkeyPatch
) -> None:
    written: list[str] = []

    def _failing_append(_path: Path, text: str, **_kwargs: object) -> bool:
        written.append(text)
        return False

    monkeypatch.setattr("delimgen.generator.append_line", _failing_append)
    context = make_context(
        file_count=1, empty_percent=0, header_only_percent=0, max_row_count=1
    )
    report = generate_files(context)

    assert written[0] == HEADER
    assert written[1].startswith("1,")
    assert report.files[0].failed_writes == 2
    assert report.failed_writes == 2
    assert Path(report.files[0].path).exists()


def test_retry_settings_flow_from_config(
    make_context: Callable[..., RunContext], sleeps: list[float]
) -> None:
    context = make_context(file_count=1, max_write_attempts=3, retry_backoff_s=0.25)
    missing = context.config.target_dir / "nope" / "x.csv"
    assert context.write_line(missing, "row") is False
    assert sleeps == [0.25, 0.25]


def test_progress_callback_sees_every_file(make_context: Callable[..., RunContext]) -> None:
    seen: list[str] = []
    context = make_context(file_count=4, max_row_count=2)
    generate_files(context, progress_callback=lambda generated: seen.append(generated.name))
    assert len(seen) == 4
    assert seen == sorted(seen)
