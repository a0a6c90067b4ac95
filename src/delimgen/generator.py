"""File generation loop and run summary."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from delimgen.line_writer import append_line
from delimgen.models import FileShape, GeneratedFile, RunConfig, RunReport
from delimgen.rows import build_char_pool, header_line, synthesize_row
from delimgen.run_log import RunLog
from delimgen.shapes import classify, draw_row_count


@dataclass
class RunContext:
    """Everything one run needs, built once and passed explicitly."""

    config: RunConfig
    char_pool: str
    current_date: date
    rng: random.Random
    run_log: RunLog | None = None
    notify: Callable[[str], None] | None = None
    clock: Callable[[], datetime] = datetime.now
    sleep: Callable[[float], None] = time.sleep

    def write_line(self, path: Path, text: str) -> bool:
        return append_line(
            path,
            text,
            max_attempts=self.config.max_write_attempts,
            backoff_s=self.config.retry_backoff_s,
            log=self.notify,
            sleep=self.sleep,
        )

    def log(self, message: str) -> None:
        if self.run_log is not None:
            self.run_log.log(message)


def build_context(
    config: RunConfig,
    notify: Callable[[str], None] | None = None,
    current_date: date | None = None,
    clock: Callable[[], datetime] = datetime.now,
    sleep: Callable[[float], None] = time.sleep,
) -> RunContext:
    """Build the run context; opens the run log when logging is enabled.

    Directories must already exist (see ``config.ensure_directories``).
    """
    context = RunContext(
        config=config,
        char_pool=build_char_pool(),
        current_date=current_date or clock().date(),
        rng=random.Random(config.seed),
        notify=notify,
        clock=clock,
        sleep=sleep,
    )
    if config.logging_enabled:
        context.run_log = RunLog.open(
            config.resolved_log_dir,
            writer=context.write_line,
            clock=clock,
        )
    return context


def file_name(config: RunConfig, index: int, created_at: datetime) -> str:
    """Unique-per-run name from the sequence index and creation time."""
    width = len(str(config.file_count))
    stamp = created_at.strftime("%Y%m%d-%H%M%S")
    return f"{config.file_prefix}_{index:0{width}d}_{stamp}{config.file_extension}"


def generate_file(context: RunContext, index: int) -> GeneratedFile:
    """Create and fully write one file."""
    config = context.config
    started_at = time.perf_counter()
    name = file_name(config, index, context.clock())
    path = config.target_dir / name

    shape = classify(config.empty_percent, config.header_only_percent, context.rng)
    row_count = 0
    if shape == FileShape.WITH_DATA:
        row_count = draw_row_count(config.max_row_count, context.rng)

    path.write_bytes(b"")
    failed_writes = 0
    if shape != FileShape.EMPTY:
        # A dropped header does not stop the rows.
        if not context.write_line(path, header_line(config.separator)):
            failed_writes += 1
    for sequence_number in range(1, row_count + 1):
        row = synthesize_row(
            sequence_number,
            config.separator,
            context.current_date,
            context.char_pool,
            context.rng,
        )
        if not context.write_line(path, row):
            failed_writes += 1

    elapsed = time.perf_counter() - started_at
    generated = GeneratedFile(
        name=name,
        path=str(path),
        shape=shape,
        row_count=row_count,
        elapsed_s=round(elapsed, 4),
        failed_writes=failed_writes,
    )
    context.log(_describe(generated))
    return generated


def generate_files(
    context: RunContext,
    progress_callback: Callable[[GeneratedFile], None] | None = None,
) -> RunReport:
    """Generate ``file_count`` files sequentially and summarize the run."""
    config = context.config
    started_at = time.perf_counter()
    context.log(
        f"Run started: {config.file_count} files into {config.target_dir} "
        f"(empty={config.empty_percent}%, header_only={config.header_only_percent}%, "
        f"max_rows={config.max_row_count}, separator={config.separator!r})."
    )
    context.log(f"Target directory validated: {config.target_dir}")

    files: list[GeneratedFile] = []
    for index in range(1, config.file_count + 1):
        generated = generate_file(context, index)
        files.append(generated)
        if progress_callback is not None:
            progress_callback(generated)

    report = RunReport(
        files=files,
        elapsed_s=round(time.perf_counter() - started_at, 4),
        log_path=str(context.run_log.path) if context.run_log is not None else None,
    )
    context.log(summary_line(report))
    return report


def summary_line(report: RunReport) -> str:
    return (
        f"Run completed: {len(report.files)} files "
        f"(empty={report.count(FileShape.EMPTY)}, "
        f"header_only={report.count(FileShape.HEADER_ONLY)}, "
        f"with_data={report.count(FileShape.WITH_DATA)}, rows={report.total_rows}, "
        f"failed_writes={report.failed_writes}) in {report.elapsed_s:.2f}s."
    )


def _describe(generated: GeneratedFile) -> str:
    message = f"Created {generated.name}: shape={generated.shape.value}"
    if generated.shape == FileShape.WITH_DATA:
        message += f", rows={generated.row_count}"
    message += f", elapsed={generated.elapsed_s:.3f}s"
    if generated.failed_writes:
        message += f", failed_writes={generated.failed_writes}"
    return message + "."
