"""CLI entrypoint for delimgen."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from delimgen.config import dump_config, ensure_directories, load_config
from delimgen.exceptions import ConfigurationError
from delimgen.generator import build_context, generate_files, summary_line
from delimgen.manifest import manifest_format, write_manifest
from delimgen.models import GeneratedFile, LogEntry, RunConfig

app = typer.Typer(help="Generate synthetic delimited files for ingestion pipeline testing.")
console = Console()


def _vprint(enabled: bool, message: str) -> None:
    """Print verbose progress messages."""
    if enabled:
        console.print(f"[cyan]verbose:[/cyan] {escape(message)}")


def _warn(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")


def _resolve(config: Path | None, overrides: dict[str, Any]) -> RunConfig:
    try:
        return load_config(config_path=config, overrides=overrides)
    except ConfigurationError as exc:
        _warn(str(exc))
        raise typer.Exit(code=2) from exc


def _overrides(
    target_dir: Path | None,
    file_count: int | None,
    empty_percent: int | None,
    header_only_percent: int | None,
    max_row_count: int | None,
    separator: str | None,
    detailed_logging: bool | None,
    log_dir: Path | None,
    seed: int | None = None,
    file_prefix: str | None = None,
    file_extension: str | None = None,
) -> dict[str, Any]:
    return {
        "target_dir": target_dir,
        "file_count": file_count,
        "empty_percent": empty_percent,
        "header_only_percent": header_only_percent,
        "max_row_count": max_row_count,
        "separator": separator,
        "logging_enabled": detailed_logging,
        "log_dir": log_dir,
        "seed": seed,
        "file_prefix": file_prefix,
        "file_extension": file_extension,
    }


TargetDirOption = Annotated[
    Path | None, typer.Option(help="Directory to write files into. Default: test-files.")
]
FileCountOption = Annotated[
    int | None, typer.Option(help="Number of files to create. Default: 1000.")
]
EmptyPercentOption = Annotated[
    int | None, typer.Option(help="Chance (0-100) that a file is empty. Default: 10.")
]
HeaderOnlyPercentOption = Annotated[
    int | None,
    typer.Option(help="Chance (0-100) that a file holds only the header. Default: 20."),
]
MaxRowCountOption = Annotated[
    int | None, typer.Option(help="Upper bound on data rows per file. Default: 1000.")
]
SeparatorOption = Annotated[
    str | None,
    typer.Option(help="Field separator (any text without line breaks). Default: ','."),
]
DetailedLoggingOption = Annotated[
    bool | None,
    typer.Option(
        "--detailed-logging/--no-detailed-logging",
        help="Write a timestamped run log file. Default: off, or the YAML/env setting.",
    ),
]
LogDirOption = Annotated[
    Path | None, typer.Option(help="Run log directory. Default: <target-dir>/Log.")
]
SeedOption = Annotated[int | None, typer.Option(help="Random seed for reproducible output.")]
FilePrefixOption = Annotated[str | None, typer.Option(help="File name prefix.")]
FileExtensionOption = Annotated[
    str | None, typer.Option(help="File name extension, including the dot.")
]
ConfigOption = Annotated[Path | None, typer.Option(help="Optional YAML config path.")]


@app.command("generate")
def generate_cmd(
    target_dir: TargetDirOption = None,
    file_count: FileCountOption = None,
    empty_percent: EmptyPercentOption = None,
    header_only_percent: HeaderOnlyPercentOption = None,
    max_row_count: MaxRowCountOption = None,
    separator: SeparatorOption = None,
    detailed_logging: DetailedLoggingOption = None,
    log_dir: LogDirOption = None,
    seed: SeedOption = None,
    file_prefix: FilePrefixOption = None,
    file_extension: FileExtensionOption = None,
    manifest: Annotated[
        Path | None,
        typer.Option(help="Write a manifest of generated files (.json or .csv)."),
    ] = None,
    config: ConfigOption = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Print per-file progress."),
    ] = False,
) -> None:
    """Generate a batch of empty, header-only and data files."""
    _vprint(verbose, "Loading run configuration (YAML + env + CLI overrides).")
    runtime_config = _resolve(
        config,
        _overrides(
            target_dir,
            file_count,
            empty_percent,
            header_only_percent,
            max_row_count,
            separator,
            detailed_logging,
            log_dir,
            seed=seed,
            file_prefix=file_prefix,
            file_extension=file_extension,
        ),
    )
    if manifest is not None:
        try:
            manifest_format(manifest)
        except ConfigurationError as exc:
            _warn(str(exc))
            raise typer.Exit(code=2) from exc
    try:
        ensure_directories(runtime_config)
    except ConfigurationError as exc:
        _warn(str(exc))
        raise typer.Exit(code=2) from exc
    _vprint(verbose, f"Target directory ready: {runtime_config.target_dir}")

    context = build_context(runtime_config, notify=_warn)
    if context.run_log is not None:
        _vprint(verbose, f"Run log: {context.run_log.path}")

        def _sink(entry: LogEntry) -> None:
            _vprint(verbose, f"log: {entry.message}")

        context.run_log.set_live_sink(_sink)

    def _progress(generated: GeneratedFile) -> None:
        if context.run_log is None:
            _vprint(
                verbose,
                f"{generated.name}: {generated.shape.value} ({generated.row_count} rows)",
            )

    report = generate_files(context, progress_callback=_progress)

    if manifest is not None:
        write_manifest(report, manifest)
        _vprint(verbose, f"Manifest written: {manifest}")

    console.print(f"[green]{escape(summary_line(report))}[/green]")
    if report.log_path:
        console.print(f"Run log: {report.log_path}")


@app.command("show-config")
def show_config_cmd(
    target_dir: TargetDirOption = None,
    file_count: FileCountOption = None,
    empty_percent: EmptyPercentOption = None,
    header_only_percent: HeaderOnlyPercentOption = None,
    max_row_count: MaxRowCountOption = None,
    separator: SeparatorOption = None,
    detailed_logging: DetailedLoggingOption = None,
    log_dir: LogDirOption = None,
    seed: SeedOption = None,
    file_prefix: FilePrefixOption = None,
    file_extension: FileExtensionOption = None,
    config: ConfigOption = None,
) -> None:
    """Print the effective configuration without creating anything."""
    runtime_config = _resolve(
        config,
        _overrides(
            target_dir,
            file_count,
            empty_percent,
            header_only_percent,
            max_row_count,
            separator,
            detailed_logging,
            log_dir,
            seed=seed,
            file_prefix=file_prefix,
            file_extension=file_extension,
        ),
    )
    typer.echo(dump_config(runtime_config), nl=False)


def main() -> None:
    """Script entrypoint."""
    app()


if __name__ == "__main__":
    main()
