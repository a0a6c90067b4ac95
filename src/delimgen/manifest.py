"""Manifest export for generated files."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from delimgen.exceptions import ConfigurationError
from delimgen.models import RunReport

_CSV_COLUMNS = ["name", "path", "shape", "row_count", "elapsed_s", "failed_writes"]


def write_manifest_json(report: RunReport, path: Path) -> None:
    """Write the run report as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(report.model_dump(mode="json"), indent=2)
    path.write_text(payload + "\n", encoding="utf-8")


def write_manifest_csv(report: RunReport, path: Path) -> None:
    """Write one CSV row per generated file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.DictWriter(file_obj, fieldnames=_CSV_COLUMNS)
        writer.writeheader()
        for item in report.files:
            row = item.model_dump(mode="json")
            writer.writerow({key: row[key] for key in _CSV_COLUMNS})


def manifest_format(path: Path) -> str:
    """Return the manifest format implied by the file suffix."""
    suffix = path.suffix.lower()
    if suffix in {".json", ".csv"}:
        return suffix[1:]
    raise ConfigurationError(
        f"Unsupported manifest extension '{path.suffix}'. Use .json or .csv."
    )


def write_manifest(report: RunReport, path: Path) -> None:
    """Dispatch on the manifest suffix."""
    if manifest_format(path) == "json":
        write_manifest_json(report, path)
    else:
        write_manifest_csv(report, path)
