import dataclasses
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.table import Table

from tagmend.config import RepairConfig, load_config, validate_threshold
from tagmend.container.id3 import read_frames, write_corrections
from tagmend.errors import ConfigurationError, ContainerError, TransformError
from tagmend.eval.harness import evaluate_synthetic
from tagmend.eval.report import append_csv, append_jsonl, report_to_row, summary_to_row
from tagmend.eval.summarize import summarize_log
from tagmend.goodness import score as goodness_score
from tagmend.log import configure_logging
from tagmend.policy import Accepted, Ambiguous, Unconvertible
from tagmend.repair import RepairResult, repair_fields
from tagmend.transforms import as_text, dump, execute, show

app = typer.Typer(help="Repair Cyrillic ID3 tags mangled by legacy code-page conversions.")
eval_app = typer.Typer(help="Evaluation harness over synthetic mis-encoded tags.")
console = Console()
err_console = Console(stderr=True)

app.add_typer(eval_app, name="eval")


def _build_config(
    config_path: Path | None, threshold: float | None, verbose: int, write: bool
) -> RepairConfig:
    config = load_config(config_path) if config_path else RepairConfig()
    overrides: dict[str, object] = {"verbosity": max(config.verbosity, verbose)}
    if threshold is not None:
        overrides["threshold"] = validate_threshold(threshold)
    if write:
        overrides["write"] = True
    config = dataclasses.replace(config, **overrides)
    if not config.write and config.verbosity <= 0:
        # In a dry run we'd like to see at least some output.
        config = dataclasses.replace(config, verbosity=1)
    return config


def _result_payload(path: Path, result: RepairResult, written: bool) -> dict[str, object]:
    fields = []
    for report in result.reports:
        outcome = report.outcome
        entry: dict[str, object] = {
            "frame": report.name,
            "original": show(report.original),
            "outcome": outcome.kind,
        }
        if isinstance(outcome, Accepted):
            entry["result"] = outcome.result_text
            entry["pipeline"] = outcome.pipeline_name
        elif isinstance(outcome, Ambiguous):
            entry["candidates"] = dict(zip(outcome.pipeline_names, outcome.candidate_texts))
        elif isinstance(outcome, Unconvertible):
            entry["best_score"] = round(outcome.best_score, 4)
        fields.append(entry)
    return {"path": str(path), "written": written, "fields": fields}


def process_file(path: Path, config: RepairConfig) -> tuple[RepairResult, bool]:
    """Read one file, compute corrections and write them back when enabled."""
    if config.verbosity > 0:
        console.print(f"processing file {str(path)!r}...", markup=False)
    frames = read_frames(path, config.tags)
    if config.verbosity > 0:
        console.print(f" frames found: {len(frames)}")

    result = repair_fields(frames, config)
    if not result.corrections:
        if config.verbosity > 0:
            console.print(" no broken frames found, nothing to write back")
        return result, False

    if config.verbosity > 0:
        for name, field in result.corrections.items():
            console.print(f" frame to write: {name} = {field.text!r}", markup=False)
    if config.write:
        write_corrections(path, result.corrections, config.tags)
        return result, True
    return result, False


@app.command()
def fix(
    paths: list[Path] | None = typer.Argument(None, help="MP3 files to inspect and repair."),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase verbosity (-vv traces pipelines)."
    ),
    write: bool = typer.Option(False, "--write", "-w", help="Write converted frames back."),
    threshold: float | None = typer.Option(
        None, "--threshold", "-t", help="Minimum goodness to accept a conversion (0.1-1.0)."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Optional YAML/JSON config file."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON payload per file."),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append one CSV row per examined frame."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append one JSONL row per examined frame."
    ),
) -> None:
    """Detect and repair mis-encoded Cyrillic text frames."""
    try:
        config = _build_config(config_path, threshold, verbose, write)
        if not paths:
            raise ConfigurationError("please specify at least one mp3")
    except ConfigurationError as exc:
        err_console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    configure_logging(config.verbosity, err_console)
    for path in paths:
        try:
            result, written = process_file(path, config)
        except ContainerError as exc:
            err_console.print(f"[red]{path}: failed:[/] {exc}")
            continue
        for report in result.reports:
            row = report_to_row(report, source=str(path))
            if log_csv:
                append_csv(log_csv, row)
            if log_jsonl:
                append_jsonl(log_jsonl, row)
        if as_json:
            typer.echo(orjson.dumps(_result_payload(path, result, written)).decode())


@app.command()
def score(
    text: str = typer.Argument(..., help="Tag value to diagnose."),
    hex_input: bool = typer.Option(False, "--hex", help="Treat TEXT as hex-encoded raw bytes."),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Optional YAML/JSON config file."
    ),
) -> None:
    """Show the goodness of a value and what every pipeline makes of it."""
    try:
        config = load_config(config_path) if config_path else RepairConfig()
        value: str | bytes = bytes.fromhex(text) if hex_input else text
    except (ConfigurationError, ValueError) as exc:
        err_console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"input: {dump(value)}", markup=False)
    console.print(f"goodness: {goodness_score(value):.4f}")
    table = Table(title="Pipelines")
    table.add_column("Pipeline", no_wrap=True)
    table.add_column("Steps")
    table.add_column("Goodness", justify="right")
    table.add_column("Result")
    for pipeline in config.pipelines:
        try:
            result = execute(value.strip(), pipeline)
        except TransformError as exc:
            table.add_row(pipeline.name, pipeline.describe(), "-", f"failed: {exc.step}")
            continue
        accepted = goodness_score(result) >= config.threshold
        mark = " *" if accepted else ""
        table.add_row(
            pipeline.name,
            pipeline.describe(),
            f"{goodness_score(result):.4f}{mark}",
            repr(as_text(result)),
        )
    console.print(table)


@eval_app.command("synthetic")
def eval_synthetic(
    count: int = typer.Option(32, "--count", "-n", help="Synthetic fields to generate."),
    seed: int = typer.Option(1234, "--seed", help="Seed for synthetic generation."),
    threshold: float = typer.Option(1.0, "--threshold", "-t", help="Acceptance threshold."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write evaluation JSON."
    ),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append summary as a CSV row for trend tracking."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append full payload as JSONL for trend tracking."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Optional tag to mark this run."),
) -> None:
    """Measure recovery on synthetic mis-encoded tags."""
    try:
        threshold = validate_threshold(threshold)
    except ConfigurationError as exc:
        err_console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    payload = evaluate_synthetic(count=count, seed=seed, threshold=threshold)
    payload["tag"] = tag
    summary = payload["evaluation"]

    if log_csv:
        append_csv(log_csv, summary_to_row(summary, source="synthetic", tag=tag))
        console.print(f"[bold green]Appended CSV log[/] to {log_csv}")
    if log_jsonl:
        append_jsonl(log_jsonl, payload)
        console.print(f"[bold green]Appended JSONL log[/] to {log_jsonl}")

    if output:
        output.write_bytes(orjson.dumps(payload))
        console.print(f"[bold green]Wrote evaluation report[/] to {output}")
    else:
        typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@eval_app.command("summarize")
def eval_summarize(
    log: Path = typer.Argument(..., help="CSV or JSONL log file produced by eval or fix."),
) -> None:
    """Summarize log(s) produced by eval or fix logging."""
    if not log.is_file():
        raise typer.BadParameter(f"Log file not found: {log}")
    summary = summarize_log(log)
    typer.echo(orjson.dumps(summary, option=orjson.OPT_INDENT_2).decode())


if __name__ == "__main__":
    app()
