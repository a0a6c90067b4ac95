"""Core typed models."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

_INVALID_PATH_CHARS = frozenset('<>"|?*')


class FileShape(StrEnum):
    """Shape assigned to a generated file."""

    EMPTY = "empty"
    HEADER_ONLY = "header_only"
    WITH_DATA = "with_data"


def path_syntax_error(value: str) -> str | None:
    """Return a reason when a path string is syntactically unusable."""
    if not value.strip():
        return "path is empty"
    for char in value:
        if char in _INVALID_PATH_CHARS:
            return f"path contains invalid character {char!r}"
        if ord(char) < 32:
            return "path contains a control character"
    return None


class RunConfig(BaseModel):
    """Validated run parameters."""

    target_dir: Path = Path("test-files")
    file_count: int = Field(default=1000, ge=1)
    empty_percent: int = Field(default=10, ge=0, le=100)
    header_only_percent: int = Field(default=20, ge=0, le=100)
    max_row_count: int = Field(default=1000, ge=1)
    separator: str = ","
    logging_enabled: bool = False
    log_dir: Path | None = None
    file_prefix: str = "TestFile"
    file_extension: str = ".csv"
    seed: int | None = None
    max_write_attempts: int = Field(default=10, ge=1)
    retry_backoff_s: float = Field(default=1.0, ge=0)

    @field_validator("target_dir", "log_dir", mode="before")
    @classmethod
    def check_path_syntax(cls, value: object) -> object:
        """Reject path strings that cannot name a directory."""
        if value is None:
            return value
        reason = path_syntax_error(str(value))
        if reason is not None:
            raise ValueError(f"invalid directory path {str(value)!r}: {reason}")
        return value

    @field_validator("separator")
    @classmethod
    def check_separator(cls, value: str) -> str:
        """Field values are never escaped, so line breaks would corrupt records."""
        if "\n" in value or "\r" in value:
            raise ValueError("separator must not contain line breaks")
        return value

    @field_validator("file_prefix")
    @classmethod
    def check_file_prefix(cls, value: str) -> str:
        reason = path_syntax_error(value)
        if reason is not None or "/" in value or "\\" in value:
            raise ValueError(f"invalid file prefix {value!r}")
        return value

    @field_validator("file_extension")
    @classmethod
    def check_file_extension(cls, value: str) -> str:
        """An empty extension is allowed; anything else must stay a plain suffix."""
        if not value:
            return value
        reason = path_syntax_error(value)
        if reason is not None or "/" in value or "\\" in value:
            raise ValueError(f"invalid file extension {value!r}")
        return value

    @model_validator(mode="after")
    def check_percentages(self) -> RunConfig:
        """Empty and header-only shares must leave room for each other."""
        total = self.empty_percent + self.header_only_percent
        if total > 100:
            raise ValueError(
                f"empty_percent + header_only_percent must not exceed 100 (got {total})."
            )
        return self

    @property
    def resolved_log_dir(self) -> Path:
        """Log directory, defaulting to a Log folder under the target directory."""
        if self.log_dir is not None:
            return self.log_dir
        return self.target_dir / "Log"

    @property
    def data_percent(self) -> int:
        return 100 - self.empty_percent - self.header_only_percent


class LogEntry(BaseModel):
    """One line of the run log."""

    timestamp: str
    message: str


class GeneratedFile(BaseModel):
    """Outcome of generating a single file."""

    name: str
    path: str
    shape: FileShape
    row_count: int = Field(default=0, ge=0)
    elapsed_s: float = 0.0
    failed_writes: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def rows_only_with_data(self) -> GeneratedFile:
        """Only data-bearing files carry rows."""
        if self.shape != FileShape.WITH_DATA and self.row_count:
            raise ValueError(f"File '{self.name}' of shape {self.shape} cannot have rows.")
        return self


class RunReport(BaseModel):
    """Result of a whole generation run."""

    files: list[GeneratedFile] = Field(default_factory=list)
    elapsed_s: float = 0.0
    log_path: str | None = None

    def count(self, shape: FileShape) -> int:
        return sum(1 for item in self.files if item.shape == shape)

    @property
    def total_rows(self) -> int:
        return sum(item.row_count for item in self.files)

    @property
    def failed_writes(self) -> int:
        return sum(item.failed_writes for item in self.files)
