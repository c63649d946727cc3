import json

import pytest

from falkordb_cli.cli.renderer import (
    COLUMN_WIDTH,
    ROWS_UNAVAILABLE,
    ResultRenderer,
    statistics_dict,
)
from falkordb_cli.domain.models import (
    GraphEntity,
    OutputFormat,
    QueryOutcome,
    QueryStatistics,
    SessionState,
)


def render(outcome, capsys, **session_options):
    ResultRenderer(SessionState(**session_options)).render(outcome)
    return capsys.readouterr().out


def table_body(out):
    """Lines after the statistics block."""
    lines = out.splitlines()
    return lines[lines.index("") + 1:]


def test_missing_statistics_default_to_zero_without_time_line(capsys):
    out = render(QueryOutcome(), capsys)
    assert out.splitlines() == [
        "Statistics:",
        "  Nodes created: 0",
        "  Nodes deleted: 0",
        "  Relationships created: 0",
        "  Relationships deleted: 0",
        "  Properties set: 0",
        "",
    ]


def test_execution_time_has_three_decimals(capsys):
    outcome = QueryOutcome(statistics=QueryStatistics(execution_time_ms=1.23456))
    out = render(outcome, capsys)
    assert "  Query internal execution time: 1.235 milliseconds" in out


def test_table_fields_are_fixed_width(capsys):
    outcome = QueryOutcome(
        headers=["name", "a_very_long_column_name"],
        rows=[{"name": "Alice", "a_very_long_column_name": 42}],
    )
    lines = table_body(render(outcome, capsys))
    assert lines[0] == "| name            | a_very_long_col |"
    assert lines[1] == "|" + ("-" * (COLUMN_WIDTH + 2) + "+") * 2
    assert lines[2] == "| Alice           | 42              |"


def test_table_null_and_entities(capsys):
    node = GraphEntity(kind="node", id=1, labels=["P"], properties={"n": 1})
    outcome = QueryOutcome(headers=["x", "y"], rows=[{"x": None, "y": node}])
    lines = table_body(render(outcome, capsys))
    assert lines[2] == "| null            | (:P {n: 1})     |"


def test_table_placeholder_when_rows_are_unavailable(capsys):
    outcome = QueryOutcome(headers=["n"], rows=None)
    lines = table_body(render(outcome, capsys))
    assert lines[-1] == f"| {ROWS_UNAVAILABLE} |"


def test_table_without_headers_prints_only_statistics(capsys):
    out = render(QueryOutcome(headers=[], rows=[]), capsys)
    assert "|" not in out


def test_json_document_shape(capsys):
    outcome = QueryOutcome(
        statistics=QueryStatistics(nodes_created=2),
        headers=["n"],
        rows=[{"n": GraphEntity(kind="node", id=7, labels=["Test"])}],
    )
    document = json.loads(render(outcome, capsys, output_format=OutputFormat.JSON))
    assert document["statistics"] == {
        "nodes_created": 2,
        "nodes_deleted": 0,
        "relationships_created": 0,
        "relationships_deleted": 0,
        "properties_set": 0,
        "query_time": 0.0,
    }
    assert document["headers"] == ["n"]
    assert document["data"] == [
        {"n": {"kind": "node", "id": 7, "labels": ["Test"], "properties": {}}}
    ]


def test_json_data_is_never_null(capsys):
    document = json.loads(
        render(QueryOutcome(headers=["n"]), capsys, output_format=OutputFormat.JSON)
    )
    assert document["data"] == ROWS_UNAVAILABLE
    assert isinstance(document["statistics"]["query_time"], float)


def test_csv_header_then_placeholder(capsys):
    outcome = QueryOutcome(headers=["a", "b"], rows=None)
    out = render(outcome, capsys, output_format=OutputFormat.CSV)
    assert out == f"a,b\n{ROWS_UNAVAILABLE}\n"


def test_csv_without_headers_prints_nothing(capsys):
    assert render(QueryOutcome(), capsys, output_format=OutputFormat.CSV) == ""


def test_csv_escapes_delimiters_and_quotes(capsys):
    outcome = QueryOutcome(
        headers=["text", "items"],
        rows=[{"text": 'say "hi", then go', "items": [1, 2]}],
    )
    lines = render(outcome, capsys, output_format=OutputFormat.CSV).splitlines()
    assert lines == ["text,items", '"say ""hi"", then go","[1, 2]"']


@pytest.mark.parametrize("output_format", list(OutputFormat))
def test_raw_takes_precedence_over_format(capsys, output_format):
    outcome = QueryOutcome(headers=["n"], rows=[])
    out = render(outcome, capsys, raw=True, output_format=output_format)
    assert out.startswith("Raw result: headers=['n']")
    assert out.count("\n") == 1


def test_statistics_dict_keeps_reported_values():
    outcome = QueryOutcome(statistics=QueryStatistics(properties_set=3, execution_time_ms=2))
    stats = statistics_dict(outcome)
    assert stats["properties_set"] == 3
    assert stats["query_time"] == 2.0
