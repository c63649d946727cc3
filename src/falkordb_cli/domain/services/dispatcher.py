"""
Command dispatcher shared by the interactive session and the one-shot CLI.

Every operation is implemented once here; the REPL only adds line
classification in front of ``CommandDispatcher.dispatch``.
"""

import json
from typing import Any, Callable, Dict, Optional, Protocol, Type

import typer
from loguru import logger

from ..interfaces import GraphClient, GraphClientError
from ..models import IndexKind, QueryOutcome, SessionState
from .commands import (
    Call,
    Command,
    CreateIndex,
    Delete,
    DropIndex,
    Exit,
    Explain,
    Help,
    Indices,
    Interactive,
    ListGraphs,
    Profile,
    Query,
    RoQuery,
    Schema,
    Slowlog,
    SlowlogReset,
    Usage,
    Use,
)
from .exceptions import (
    CommandError,
    DeleteFailed,
    ExplainFailed,
    IndexOperationFailed,
    ProfileFailed,
    QueryFailed,
    SlowlogFailed,
    UnimplementedFeature,
)

HELP_COMMANDS = [
    ("MATCH (n) RETURN n", "Execute Cypher query on current graph"),
    ("QUERY <cypher>", "Execute Cypher query (outer quotes are optional)"),
    ("RO-QUERY <cypher>", "Execute read-only Cypher query"),
    ("USE <graph_name>", "Switch to specified graph"),
    ("LIST", "List all graphs"),
    ("SCHEMA", "Show current graph schema"),
    ("SCHEMA <graph>", "Show schema for specific graph"),
    ("HELP", "Show this help"),
    ("EXIT/QUIT", "Exit interactive mode"),
]

HELP_EXAMPLES = [
    "CREATE (n:Person {name: 'John'})",
    "MATCH (n:Person) RETURN n.name",
    "MATCH (a)-[r]->(b) RETURN a, r, b LIMIT 10",
    "RO-QUERY \"MATCH (n) RETURN count(n)\"",
]

SCHEMA_QUERIES = [
    ("CALL db.labels()", "Node labels", "node labels"),
    ("CALL db.relationshipTypes()", "Relationship types", "relationship types"),
]


def help_text() -> str:
    width = max(len(usage) for usage, _ in HELP_COMMANDS) + 2
    lines = ["FalkorDB CLI Commands:"]
    lines.extend(f"  {usage:<{width}}- {text}" for usage, text in HELP_COMMANDS)
    lines.append("")
    lines.append("Query Examples:")
    lines.extend(f"  {example}" for example in HELP_EXAMPLES)
    return "\n".join(lines)


class Renderer(Protocol):
    def render(self, outcome: QueryOutcome) -> None: ...


class CommandDispatcher:
    """Route commands to the graph client and print their results."""

    def __init__(
        self,
        client: GraphClient,
        session: SessionState,
        renderer: Renderer,
        run_interactive: Optional[Callable[[], None]] = None,
    ) -> None:
        self.client = client
        self.session = session
        self.renderer = renderer
        self.run_interactive = run_interactive
        self._handlers: Dict[Type[Any], Callable[[Any], None]] = {
            Help: self._help,
            Use: self._use,
            Usage: self._usage,
            ListGraphs: self._list_graphs,
            Schema: self._schema,
            Exit: self._exit,
            Query: self._query,
            RoQuery: self._query,
            Profile: self._profile,
            Explain: self._explain,
            Delete: self._delete,
            Slowlog: self._slowlog,
            SlowlogReset: self._slowlog_reset,
            Indices: self._indices,
            CreateIndex: self._create_index,
            DropIndex: self._drop_index,
            Call: self._call,
            Interactive: self._interactive,
        }

    def dispatch(self, command: Command) -> None:
        """Execute one command; raises CommandError subclasses on failure."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise CommandError(f"Unsupported command: {type(command).__name__}")
        logger.debug("Dispatching {}", command)
        handler(command)

    # ------------------------------------------------------------------
    # Session commands
    # ------------------------------------------------------------------

    def _help(self, command: Help) -> None:
        typer.echo(help_text())

    def _use(self, command: Use) -> None:
        self.session.set_graph(command.graph)
        typer.echo("Switched to graph: " + typer.style(command.graph, fg="yellow"))

    def _usage(self, command: Usage) -> None:
        typer.echo(command.message)

    def _exit(self, command: Exit) -> None:
        pass

    def _interactive(self, command: Interactive) -> None:
        if self.run_interactive is None:
            raise CommandError("Interactive mode is not available")
        self.run_interactive()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _query(self, command: Any) -> None:
        graph = self.session.resolve_graph(command.graph)
        if command.params:
            _reject_json_argument("Query parameters", "--params", command.params)
        read_only = isinstance(command, RoQuery)
        try:
            if read_only:
                outcome = self.client.ro_query(graph, command.text)
            else:
                outcome = self.client.query(graph, command.text)
        except GraphClientError as e:
            raise QueryFailed(str(e), e) from e
        if not self.session.quiet:
            self.renderer.render(outcome)

    def _profile(self, command: Profile) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            plan = self.client.profile(graph, command.text)
        except GraphClientError as e:
            raise ProfileFailed(str(e), e) from e
        typer.secho("Execution Plan:", fg="cyan", bold=True)
        typer.echo(plan)

    def _explain(self, command: Explain) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            plan = self.client.explain(graph, command.text)
        except GraphClientError as e:
            raise ExplainFailed(str(e), e) from e
        typer.secho("Query Explanation:", fg="cyan", bold=True)
        typer.echo(plan)

    # ------------------------------------------------------------------
    # Graph administration
    # ------------------------------------------------------------------

    def _delete(self, command: Delete) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            self.client.delete(graph)
        except GraphClientError as e:
            raise DeleteFailed(str(e), e) from e
        typer.echo(f"Graph '{graph}' deleted successfully")

    def _list_graphs(self, command: ListGraphs) -> None:
        raise UnimplementedFeature(
            "Graph listing is not implemented yet. "
            "Use redis-cli instead: GRAPH.LIST"
        )

    def _schema(self, command: Schema) -> None:
        graph = self.session.resolve_graph(command.graph)
        typer.secho("Graph Schema:", fg="cyan", bold=True)
        for query, title, noun in SCHEMA_QUERIES:
            try:
                outcome = self.client.query(graph, query)
            except GraphClientError as e:
                logger.debug("Schema query {!r} failed: {}", query, e)
                typer.echo(f"    Unable to retrieve {noun}")
                continue
            typer.echo(f"  {title}:")
            if outcome.rows is None:
                typer.echo(f"    (Use query '{query}' to see {noun})")
                continue
            for row in outcome.rows:
                typer.echo("    " + ", ".join(str(value) for value in row.values()))

    def _slowlog(self, command: Slowlog) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            entries = self.client.slowlog(graph)
        except GraphClientError as e:
            raise SlowlogFailed(str(e), e) from e
        typer.secho("Slowlog Entries:", fg="cyan", bold=True)
        for i, entry in enumerate(entries, start=1):
            typer.echo(f"{i}. {entry}")

    def _slowlog_reset(self, command: SlowlogReset) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            self.client.slowlog_reset(graph)
        except GraphClientError as e:
            raise SlowlogFailed(str(e), e) from e
        typer.echo("Slowlog reset successfully")

    def _indices(self, command: Indices) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            indices = self.client.list_indices(graph)
        except GraphClientError as e:
            raise IndexOperationFailed(str(e), e) from e
        typer.secho("Indices:", fg="cyan", bold=True)
        for index in indices:
            typer.echo(f"  {index}")

    def _create_index(self, command: CreateIndex) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            self.client.create_index(
                graph,
                IndexKind.RANGE,
                command.entity_type,
                command.label,
                [command.property],
            )
        except GraphClientError as e:
            raise IndexOperationFailed(str(e), e) from e
        typer.echo(
            f"Index created successfully on {command.entity_type.name}:"
            f"{command.label} for {command.property}"
        )

    def _drop_index(self, command: DropIndex) -> None:
        graph = self.session.resolve_graph(command.graph)
        try:
            self.client.drop_index(
                graph,
                IndexKind.RANGE,
                command.entity_type,
                command.label,
                [command.property],
            )
        except GraphClientError as e:
            raise IndexOperationFailed(str(e), e) from e
        typer.echo(
            f"Index dropped successfully on {command.entity_type.name}:"
            f"{command.label} for {command.property}"
        )

    def _call(self, command: Call) -> None:
        graph = self.session.resolve_graph(command.graph)
        if command.args:
            _reject_json_argument("Procedure arguments", "--args", command.args)
        raise UnimplementedFeature(
            f"Procedure calls are not implemented yet (procedure: "
            f"{command.procedure}, graph: {graph}). "
            f"Run it as a query instead: CALL {command.procedure}()"
        )


def _reject_json_argument(what: str, option: str, raw: str) -> None:
    try:
        json.loads(raw)
    except json.JSONDecodeError as e:
        raise CommandError(f"Invalid JSON for {option}: {e}") from e
    raise UnimplementedFeature(f"{what} ({option}) are not supported yet")
