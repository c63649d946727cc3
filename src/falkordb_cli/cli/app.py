"""
Command line surface of falkordb-cli.

Global options configure the connection and output; each subcommand builds a
``Command`` and hands it to the same ``CommandDispatcher`` the REPL uses.
Without a subcommand and without ``--eval`` the interactive session starts.
"""

from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from loguru import logger

from .. import __version__
from ..config import CliSettings, ConnectionSettings, apply_overrides, load_settings
from ..domain.interfaces import GraphClient
from ..domain.models import EntityType, OutputFormat, SessionState
from ..domain.services import CliError, UnimplementedFeature
from ..domain.services.commands import (
    Call,
    Command,
    CreateIndex,
    Delete,
    DropIndex,
    Explain,
    Indices,
    Interactive,
    ListGraphs,
    Profile,
    Query,
    RoQuery,
    Schema,
    Slowlog,
    SlowlogReset,
)
from ..domain.services.dispatcher import CommandDispatcher
from ..infrastructure import FalkorGraphClient
from ..logging_setup import configure_logging
from .completion import keyword_completer
from .renderer import ResultRenderer
from .repl import Repl

app = typer.Typer(
    add_completion=False,
    help="A redis-cli like interface for FalkorDB graph database operations.",
)


def create_graph_client(settings: ConnectionSettings) -> GraphClient:
    return FalkorGraphClient.connect(settings)


def subcommand_names() -> List[str]:
    return list(typer.main.get_command(app).commands)


def build_dispatcher(
    client: GraphClient, session: SessionState, history_path: Optional[Path] = None
) -> CommandDispatcher:
    """Wire the dispatcher, renderer and REPL around one session."""
    dispatcher = CommandDispatcher(client, session, ResultRenderer(session))

    def run_interactive() -> None:
        Repl(
            dispatcher,
            history_path=history_path,
            completer=keyword_completer(subcommand_names()),
        ).run()

    dispatcher.run_interactive = run_interactive
    return dispatcher


def fail(error: Exception) -> NoReturn:
    typer.echo(typer.style("Error", fg="red") + f": {error}", err=True)
    raise typer.Exit(code=1)


def run_command(dispatcher: CommandDispatcher, command: Command) -> None:
    try:
        dispatcher.dispatch(command)
    except CliError as e:
        fail(e)


class CliState:
    """
    Per-invocation state stored in ``ctx.obj``.

    The graph client is connected on first use, after typer has parsed the
    subcommand's arguments, so ``--help`` and usage errors never touch the
    network. A connection failure still ends the process before any command
    runs.
    """

    def __init__(self, settings: CliSettings, session: SessionState) -> None:
        self.settings = settings
        self.session = session
        self._dispatcher: Optional[CommandDispatcher] = None

    def dispatcher(self) -> CommandDispatcher:
        if self._dispatcher is None:
            try:
                client = create_graph_client(self.settings.connection)
            except CliError as e:
                fail(e)
            self._dispatcher = build_dispatcher(
                client, self.session, self.settings.history_file
            )
        return self._dispatcher

    def close(self) -> None:
        if self._dispatcher is not None:
            _close_client(self._dispatcher.client)


def _dispatcher(ctx: typer.Context) -> CommandDispatcher:
    return ctx.obj.dispatcher()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"falkordb-cli {__version__}")
        raise typer.Exit()


def _close_client(client: GraphClient) -> None:
    close = getattr(client, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as e:
        logger.warning("Error closing FalkorDB connection: {}", e)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    hostname: Optional[str] = typer.Option(
        None, "--hostname", help="FalkorDB server hostname [default: localhost]"
    ),
    port: Optional[int] = typer.Option(
        None, "-p", "--port", help="FalkorDB server port [default: 6379]"
    ),
    database: Optional[int] = typer.Option(
        None, "-n", "--database", help="Database number [default: 0]"
    ),
    username: Optional[str] = typer.Option(
        None, "-u", "--username", help="Username for authentication"
    ),
    auth: Optional[str] = typer.Option(
        None, "-a", "--auth", help="Connection password"
    ),
    graph: Optional[str] = typer.Option(
        None, "-g", "--graph", help="Graph name to operate on"
    ),
    eval_: Optional[str] = typer.Option(
        None, "--eval", help="Execute a query on the selected graph and exit"
    ),
    file: Optional[Path] = typer.Option(
        None, "-f", "--file", help="Read commands from file (not implemented yet)"
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--format",
        case_sensitive=False,
        help="Output format [default: table]",
    ),
    quiet: bool = typer.Option(
        False, "-q", "--quiet", help="Suppress non-essential output"
    ),
    raw: bool = typer.Option(False, "-r", "--raw", help="Raw output mode"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML settings file"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Diagnostic log level [default: WARNING]"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """FalkorDB Command Line Interface."""
    try:
        settings = apply_overrides(
            load_settings(config),
            hostname=hostname,
            port=port,
            database=database,
            username=username,
            password=auth,
            format=output_format,
            quiet=quiet,
            raw=raw,
            log_level=log_level,
        )
    except CliError as e:
        fail(e)
    configure_logging(settings.logging)

    session = SessionState(
        output_format=settings.output.format,
        quiet=settings.output.quiet,
        raw=settings.output.raw,
    )
    if graph:
        session.set_graph(graph)

    state = CliState(settings, session)
    ctx.obj = state
    ctx.call_on_close(state.close)

    if eval_ is not None:
        run_command(state.dispatcher(), Query(text=eval_))
        raise typer.Exit()

    if file is not None:
        fail(UnimplementedFeature("File mode not yet implemented"))

    if ctx.invoked_subcommand is None:
        run_command(state.dispatcher(), Interactive())


@app.command("query")
def query(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    cypher: str = typer.Argument(..., metavar="QUERY", help="Cypher query"),
    params: Optional[str] = typer.Option(
        None, "-p", "--params", help="Query parameters in JSON format"
    ),
) -> None:
    """Execute a Cypher query on a graph."""
    run_command(_dispatcher(ctx), Query(text=cypher, graph=graph, params=params))


@app.command("ro-query")
def ro_query(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    cypher: str = typer.Argument(..., metavar="QUERY", help="Cypher query"),
    params: Optional[str] = typer.Option(
        None, "-p", "--params", help="Query parameters in JSON format"
    ),
) -> None:
    """Execute a read-only Cypher query."""
    run_command(_dispatcher(ctx), RoQuery(text=cypher, graph=graph, params=params))


@app.command("profile")
def profile(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    cypher: str = typer.Argument(..., metavar="QUERY", help="Cypher query"),
) -> None:
    """Profile a query execution."""
    run_command(_dispatcher(ctx), Profile(text=cypher, graph=graph))


@app.command("explain")
def explain(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    cypher: str = typer.Argument(..., metavar="QUERY", help="Cypher query"),
) -> None:
    """Explain query execution plan."""
    run_command(_dispatcher(ctx), Explain(text=cypher, graph=graph))


@app.command("delete")
def delete(
    ctx: typer.Context, graph: str = typer.Argument(..., help="Graph name")
) -> None:
    """Delete a graph."""
    run_command(_dispatcher(ctx), Delete(graph=graph))


@app.command("list")
def list_graphs(ctx: typer.Context) -> None:
    """List all graphs."""
    run_command(_dispatcher(ctx), ListGraphs())


@app.command("schema")
def schema(
    ctx: typer.Context, graph: str = typer.Argument(..., help="Graph name")
) -> None:
    """Show graph schema."""
    run_command(_dispatcher(ctx), Schema(graph=graph))


@app.command("slowlog")
def slowlog(
    ctx: typer.Context, graph: str = typer.Argument(..., help="Graph name")
) -> None:
    """Show slowlog."""
    run_command(_dispatcher(ctx), Slowlog(graph=graph))


@app.command("slowlog-reset")
def slowlog_reset(
    ctx: typer.Context, graph: str = typer.Argument(..., help="Graph name")
) -> None:
    """Reset slowlog."""
    run_command(_dispatcher(ctx), SlowlogReset(graph=graph))


@app.command("indices")
def indices(
    ctx: typer.Context, graph: str = typer.Argument(..., help="Graph name")
) -> None:
    """Show indices."""
    run_command(_dispatcher(ctx), Indices(graph=graph))


@app.command("create-index")
def create_index(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    entity_type: str = typer.Argument(..., help="Entity type (NODE or EDGE)"),
    label: str = typer.Argument(..., help="Label"),
    prop: str = typer.Argument(..., metavar="PROPERTY", help="Property"),
) -> None:
    """Create index."""
    try:
        entity = EntityType.parse(entity_type)
    except CliError as e:
        fail(e)
    run_command(
        _dispatcher(ctx),
        CreateIndex(entity_type=entity, label=label, property=prop, graph=graph),
    )


@app.command("drop-index")
def drop_index(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    entity_type: str = typer.Argument(..., help="Entity type (NODE or EDGE)"),
    label: str = typer.Argument(..., help="Label"),
    prop: str = typer.Argument(..., metavar="PROPERTY", help="Property"),
) -> None:
    """Drop index."""
    try:
        entity = EntityType.parse(entity_type)
    except CliError as e:
        fail(e)
    run_command(
        _dispatcher(ctx),
        DropIndex(entity_type=entity, label=label, property=prop, graph=graph),
    )


@app.command("call")
def call(
    ctx: typer.Context,
    graph: str = typer.Argument(..., help="Graph name"),
    procedure: str = typer.Argument(..., help="Procedure name"),
    args: Optional[str] = typer.Option(
        None, "-a", "--args", help="Arguments in JSON format"
    ),
) -> None:
    """Call a procedure."""
    run_command(_dispatcher(ctx), Call(procedure=procedure, graph=graph, args=args))


@app.command("interactive")
def interactive(ctx: typer.Context) -> None:
    """Interactive mode."""
    run_command(_dispatcher(ctx), Interactive())
