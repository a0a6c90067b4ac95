"""Best-effort line appends with bounded retry."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_BACKOFF_S = 1.0

_stderr = Console(stderr=True)


@dataclass(frozen=True)
class RetryResult:
    """Outcome of a retried action."""

    ok: bool
    attempts: int
    error: Exception | None = None


def retry(
    action: Callable[[], Any],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_s: float = DEFAULT_BACKOFF_S,
    sleep: Callable[[float], None] = time.sleep,
    log: Callable[[str], None] | None = None,
) -> RetryResult:
    """Run ``action`` until it succeeds or attempts run out.

    Only ``OSError`` is treated as transient; anything else propagates. The
    sleep happens between attempts, never after the last one.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")
    last_error: OSError | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            action()
            return RetryResult(ok=True, attempts=attempt)
        except OSError as exc:
            last_error = exc
            if log is not None:
                log(f"attempt {attempt}/{max_attempts} failed ({type(exc).__name__}: {exc})")
            if attempt < max_attempts:
                sleep(backoff_s)
    return RetryResult(ok=False, attempts=max_attempts, error=last_error)


def append_line(
    path: Path,
    text: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_s: float = DEFAULT_BACKOFF_S,
    log: Callable[[str], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Append ``text`` as one line to ``path``; report and return False on failure."""

    def _write() -> None:
        with path.open("a", encoding="utf-8", newline="") as file_obj:
            file_obj.write(text + "\n")

    result = retry(_write, max_attempts=max_attempts, backoff_s=backoff_s, sleep=sleep)
    if result.ok:
        return True
    notice = (
        f"Failed to write line to {path} after {result.attempts} attempts: {result.error}"
    )
    if log is not None:
        log(notice)
    else:
        _stderr.print(f"[red]{escape(notice)}[/red]")
    return False
