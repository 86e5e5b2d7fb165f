"""Typer CLI entrypoint for assessment validation and analytics reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Optional

import pendulum
import typer
import yaml
from pendulum.parsing.exceptions import ParserError

from .adapters import JsonlAssessmentStore, JsonProfileDirectory, StoreReadError
from .container import create_container
from .logging import configure_logging
from .pipeline import REPORT_KINDS, OutputWriter, build_envelope
from .schemas.config import load_config

app = typer.Typer(help="Trainer assessment scoring and analytics CLI.")


def _load_settings(config: Path | None) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle)
    try:
        return load_config(loaded).to_settings()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _parse_day(value: str | None, name: str) -> date | None:
    if not value:
        return None
    try:
        parsed = pendulum.parse(value, exact=True)
    except (ValueError, ParserError) as exc:
        raise typer.BadParameter(f"Not a date: {value!r}", param_hint=name) from exc
    if isinstance(parsed, pendulum.DateTime):
        return parsed.date()
    if isinstance(parsed, date):
        return parsed
    raise typer.BadParameter(f"Not a date: {value!r}", param_hint=name)


@app.command()
def validate(
    input: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidate assessment JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Validate a candidate assessment; exits with status 1 when invalid."""
    settings = _load_settings(config)
    configure_logging(log_level)

    with input.open("r", encoding="utf-8") as handle:
        try:
            candidate = json.load(handle)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"Invalid JSON: {exc}", param_hint="--input") from exc
    if not isinstance(candidate, dict):
        raise typer.BadParameter("Candidate must be a JSON object", param_hint="--input")

    result = create_container(settings=settings).validator().validate(candidate)
    typer.echo(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def report(
    kind: str = typer.Option(..., help=f"Report kind: {', '.join(REPORT_KINDS)}."),
    assessments: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Assessments JSONL path."),
    profiles: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Profiles JSON path."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    window: str = typer.Option("all-time", help="Window: month, quarter, ytd, all-time, last-N-months."),
    months: Optional[int] = typer.Option(None, min=0, help="Trailing months for the monthly trend."),
    as_of: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM-DD); defaults to today (UTC)."),
    date_from: Optional[str] = typer.Option(None, help="Itemized report start date (inclusive)."),
    date_to: Optional[str] = typer.Option(None, help="Itemized report end date (inclusive)."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Compute an analytics report from an assessments file."""
    if kind not in REPORT_KINDS:
        raise typer.BadParameter(f"Unsupported report kind: {kind!r}", param_hint="--kind")
    reference = _parse_day(as_of, "--as-of")
    start = _parse_day(date_from, "--date-from")
    end = _parse_day(date_to, "--date-to")

    settings = _load_settings(config)
    configure_logging(log_level)

    container = create_container(settings=settings)
    service = container.analytics_service(
        store=JsonlAssessmentStore(assessments),
        directory=JsonProfileDirectory(profiles) if profiles else None,
    )

    try:
        payload = service.report(
            kind,
            now=reference,
            window=window,
            months=months,
            date_from=start,
            date_to=end,
        )
    except StoreReadError as exc:
        typer.echo(f"Failed to load assessments: {'; '.join(exc.errors)}", err=True)
        raise typer.Exit(code=2) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    envelope = build_envelope(kind, payload, as_of=reference)
    if output:
        OutputWriter().write(output, envelope)
        typer.echo(f"Wrote {kind} report to {output}.")
    else:
        typer.echo(json.dumps(envelope, ensure_ascii=False, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
