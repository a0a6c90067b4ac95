"""Timestamped run log backed by the retrying line writer."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from delimgen.models import LogEntry

LineWriter = Callable[[Path, str], bool]


class RunLog:
    """Append-only log of run status messages."""

    def __init__(
        self,
        path: Path,
        writer: LineWriter,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.path = path
        self._writer = writer
        self._clock = clock
        self._entries: list[LogEntry] = []
        self._live_sink: Callable[[LogEntry], None] | None = None

    @classmethod
    def open(
        cls,
        log_dir: Path,
        writer: LineWriter,
        clock: Callable[[], datetime] = datetime.now,
    ) -> RunLog:
        """Create a run log named after the current time inside ``log_dir``.

        Runs starting in the same second get a numeric suffix; the file is
        created here so a concurrent run cannot claim the same name.
        """
        stamp = clock().strftime("%Y%m%d-%H%M%S")
        path = log_dir / f"delimgen-{stamp}.log"
        suffix = 0
        while True:
            try:
                path.touch(exist_ok=False)
                break
            except FileExistsError:
                suffix += 1
                path = log_dir / f"delimgen-{stamp}-{suffix}.log"
        return cls(path, writer=writer, clock=clock)

    def set_live_sink(self, sink: Callable[[LogEntry], None] | None) -> None:
        """Set optional callback to echo entries as they are written."""
        self._live_sink = sink

    def log(self, message: str) -> bool:
        """Append a timestamped line; returns False when the write was dropped."""
        entry = LogEntry(
            timestamp=self._clock().strftime("%Y-%m-%d %H:%M:%S"),
            message=message,
        )
        self._entries.append(entry)
        written = self._writer(self.path, f"[{entry.timestamp}] {entry.message}")
        if self._live_sink is not None:
            try:
                self._live_sink(entry)
            except Exception:
                # Echoing must never interfere with the run.
                pass
        return written

    def entries(self) -> list[LogEntry]:
        """Return a shallow copy of logged entries."""
        return list(self._entries)
