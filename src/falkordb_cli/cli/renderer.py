"""Formatting of query outcomes as table, JSON or CSV text on stdout."""

import csv
import io
import json
from typing import Any, Dict, Sequence

import typer

from ..domain.models import (
    CellValue,
    GraphEntity,
    OutputFormat,
    QueryOutcome,
    SessionState,
)

COLUMN_WIDTH = 15

ROWS_UNAVAILABLE = "Row data is not available for this result"


def _field(value: str) -> str:
    return f"{value[:COLUMN_WIDTH]:<{COLUMN_WIDTH}}"


def _cell_text(value: CellValue) -> str:
    if value is None:
        return "null"
    return str(value)


def _json_value(value: CellValue) -> Any:
    if isinstance(value, GraphEntity):
        return value.to_dict()
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    return value


def statistics_dict(outcome: QueryOutcome) -> Dict[str, Any]:
    """Statistics with absent counters defaulted to 0 and the time to 0.0."""
    stats = outcome.statistics
    return {
        "nodes_created": stats.nodes_created or 0,
        "nodes_deleted": stats.nodes_deleted or 0,
        "relationships_created": stats.relationships_created or 0,
        "relationships_deleted": stats.relationships_deleted or 0,
        "properties_set": stats.properties_set or 0,
        "query_time": float(stats.execution_time_ms or 0.0),
    }


class ResultRenderer:
    """Render a QueryOutcome according to the session's output options."""

    def __init__(self, session: SessionState) -> None:
        self.session = session

    def render(self, outcome: QueryOutcome) -> None:
        if self.session.raw:
            typer.echo(
                f"Raw result: headers={outcome.headers!r}, stats={outcome.statistics!r}"
            )
            return

        output_format = self.session.output_format
        if output_format is OutputFormat.JSON:
            self.render_json(outcome)
        elif output_format is OutputFormat.CSV:
            self.render_csv(outcome)
        else:
            self.render_table(outcome)

    def render_table(self, outcome: QueryOutcome) -> None:
        stats = statistics_dict(outcome)
        typer.secho("Statistics:", fg="cyan", bold=True)
        typer.echo(f"  Nodes created: {stats['nodes_created']}")
        typer.echo(f"  Nodes deleted: {stats['nodes_deleted']}")
        typer.echo(f"  Relationships created: {stats['relationships_created']}")
        typer.echo(f"  Relationships deleted: {stats['relationships_deleted']}")
        typer.echo(f"  Properties set: {stats['properties_set']}")
        elapsed = outcome.statistics.execution_time_ms
        if elapsed is not None:
            typer.echo(f"  Query internal execution time: {elapsed:.3f} milliseconds")
        typer.echo("")

        headers = outcome.headers
        if not headers:
            return

        typer.echo(
            "| "
            + " | ".join(
                typer.style(_field(h), fg="cyan", bold=True) for h in headers
            )
            + " |"
        )
        typer.echo("|" + ("-" * (COLUMN_WIDTH + 2) + "+") * len(headers))

        if outcome.rows is None:
            typer.echo(f"| {ROWS_UNAVAILABLE} |")
            return
        for row in outcome.rows:
            typer.echo(
                "| "
                + " | ".join(_field(_cell_text(row.get(h))) for h in headers)
                + " |"
            )

    def render_json(self, outcome: QueryOutcome) -> None:
        data: Any = ROWS_UNAVAILABLE
        if outcome.rows is not None:
            data = [
                {key: _json_value(value) for key, value in row.items()}
                for row in outcome.rows
            ]
        document = {
            "statistics": statistics_dict(outcome),
            "headers": list(outcome.headers),
            "data": data,
        }
        typer.echo(json.dumps(document, indent=2, default=str))

    def render_csv(self, outcome: QueryOutcome) -> None:
        headers = outcome.headers
        if not headers:
            return
        typer.echo(_csv_line(headers))
        if outcome.rows is None:
            typer.echo(ROWS_UNAVAILABLE)
            return
        for row in outcome.rows:
            typer.echo(_csv_line([_csv_cell(row.get(h)) for h in headers]))


def _csv_cell(value: CellValue) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        return json.dumps(_json_value(value), default=str)
    return str(value)


def _csv_line(values: Sequence[str]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()
