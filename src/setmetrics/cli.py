"""CLI for the setmetrics training-set analytics toolkit."""

from __future__ import annotations

import json
import logging
from datetime import date

import click

from setmetrics.analytics.summary import (
    SessionSummary,
    SessionsOverview,
    format_duration,
    format_percentage,
    format_ratio,
)


def _print_summary(summary: SessionSummary) -> None:
    click.echo(f"\n{'=' * 60}")
    click.echo(f"  Session: {summary.date}")
    click.echo(f"{'=' * 60}")
    if summary.error is not None:
        click.echo(f"  Cannot analyze this session: {summary.error}")
        click.echo(f"{'=' * 60}")
        return

    click.echo(f"  Sets:          {summary.total_sets}")
    click.echo(f"  Active time:   {summary.formatted_active_time} "
               f"({format_duration(summary.total_active_time)})")
    click.echo(f"  Work/rest:     {format_ratio(summary.work_rest_ratio)}")
    click.echo(f"  Consistency:   {format_percentage(summary.consistency_score)} "
               f"({summary.consistency_level})")
    click.echo(f"  Density:       {format_percentage(summary.training_density_score)} "
               f"({summary.density_level})")
    click.echo(f"  Avg intensity: {summary.average_intensity:.2f} / 5")
    click.echo(f"  Work volume:   {summary.total_work_volume:.0f} "
               f"(intensity-weighted s)")
    if summary.sets_by_type:
        counts = ", ".join(f"{k} {v}" for k, v in summary.sets_by_type.items() if v)
        click.echo(f"  By type:       {counts or '-'}")
    click.echo(f"{'=' * 60}")


def _print_overview(overview: SessionsOverview) -> None:
    click.echo(f"\n{'-' * 60}")
    click.echo("  Overview")
    click.echo(f"{'-' * 60}")
    click.echo(f"  Sessions:      {overview.total_sessions}")
    click.echo(f"  Total time:    {overview.formatted_total_time}")
    click.echo(f"  Avg session:   {overview.formatted_average_duration}")
    click.echo(f"  Total sets:    {overview.total_sets}")
    click.echo(f"{'-' * 60}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """setmetrics: performance metrics for timed training sets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command("analyze")
@click.argument("file", type=click.Path(exists=True))
@click.option("--output", "-o", default=None, help="Write summary JSON to file.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text.")
def analyze_cmd(file: str, output: str | None, as_json: bool) -> None:
    """Analyze every session in a .json or .jsonl file."""
    from setmetrics.loader import SessionFormatError, load_sessions
    from setmetrics.analytics.pipeline import run_pipeline
    from setmetrics.analytics.summary import build_overview

    try:
        sessions = load_sessions(file)
    except SessionFormatError as e:
        raise click.ClickException(str(e))

    if not sessions:
        click.echo("No sessions found.")
        return

    summaries = [run_pipeline(session) for session in sessions]
    overview = build_overview(sessions)
    payload = {
        "sessions": [s.to_dict() for s in summaries],
        "overview": overview.to_dict(),
    }

    if as_json:
        click.echo(json.dumps(payload, indent=2))
    else:
        for summary in summaries:
            _print_summary(summary)
        _print_overview(overview)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        click.echo(f"\nSummary written to {output}")


@main.command("sets")
@click.option("--duration", "-d", "durations", multiple=True, type=float,
              help="Set duration in seconds (repeat per set).")
@click.option("--intensity", "-i", "intensities", multiple=True, type=int,
              help="Set intensity 1-5 (repeat per set).")
@click.option("--rest", "-r", "rests", multiple=True, type=float,
              help="Rest duration in seconds (repeat; per set or between sets).")
@click.option("--convention", type=click.Choice(["per_set", "between_sets"]), default=None,
              help="How the rest durations line up with the sets.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text.")
def sets_cmd(
    durations: tuple[float, ...],
    intensities: tuple[int, ...],
    rests: tuple[float, ...],
    convention: str | None,
    as_json: bool,
) -> None:
    """Analyze raw per-set durations and intensities."""
    from setmetrics.analytics.engine import InvalidArgument, RestConvention, analyze
    from setmetrics.analytics.summary import build_session_summary

    try:
        result = analyze(
            list(durations),
            list(intensities),
            list(rests),
            rest_convention=RestConvention(convention) if convention else None,
        )
    except InvalidArgument as e:
        hint = {
            "durations": "'--duration'",
            "intensities": "'--intensity'",
            "rest_durations": "'--rest'",
        }.get(e.field)
        raise click.BadParameter(str(e), param_hint=hint)

    summary = build_session_summary(date.today(), result=result)
    if as_json:
        click.echo(summary.to_json())
    else:
        _print_summary(summary)


if __name__ == "__main__":
    main()
