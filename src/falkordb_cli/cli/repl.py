"""
Interactive read-eval-print loop.

Lines are read through a ``LineReader`` (prompt_toolkit by default), classified
into commands and handed to the shared ``CommandDispatcher``. Command errors are
reported and the loop continues; only ``exit``/``quit``, an interrupt or the
end of input stop it.
"""

import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol

import typer
from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer
from prompt_toolkit.history import FileHistory

from ..domain.services import CliError
from ..domain.services.dispatcher import CommandDispatcher
from ..domain.services.line_classifier import classify_line, to_command

HISTORY_FILENAME = ".falkordb-cli_history"
DEFAULT_PROMPT = "falkordb> "
EXIT_WORDS = ("exit", "quit")


def default_history_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """~/.falkordb-cli_history, falling back to USERPROFILE, then the working directory."""
    env = os.environ if environ is None else environ
    for variable in ("HOME", "USERPROFILE"):
        base = env.get(variable)
        if base:
            return Path(base) / HISTORY_FILENAME
    return Path(HISTORY_FILENAME)


class SafeFileHistory(FileHistory):
    """FileHistory whose read and write failures are logged instead of raised."""

    def load_history_strings(self) -> Iterable[str]:
        try:
            yield from super().load_history_strings()
        except (OSError, UnicodeError) as e:
            logger.warning("Failed to load history '{}': {}", self.filename, e)

    def store_string(self, string: str) -> None:
        try:
            super().store_string(string)
        except OSError as e:
            logger.warning("Failed to save history '{}': {}", self.filename, e)


class LineReader(Protocol):
    def read(self, prompt: str) -> str:
        """Return the next line; raise KeyboardInterrupt or EOFError to stop."""
        ...


class PromptToolkitReader:
    """LineReader backed by a prompt_toolkit session with persistent history."""

    def __init__(self, history_path: Path, completer: Optional[Completer] = None) -> None:
        self.history_path = history_path
        self._session: PromptSession = PromptSession(
            history=SafeFileHistory(str(history_path)),
            completer=completer,
        )

    def read(self, prompt: str) -> str:
        return self._session.prompt(prompt)


class Repl:
    """Drive the interactive session until the user exits."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        reader: Optional[LineReader] = None,
        history_path: Optional[Path] = None,
        completer: Optional[Completer] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.session = dispatcher.session
        self.history_path = history_path or default_history_path()
        self.completer = completer
        self._reader = reader

    @property
    def reader(self) -> LineReader:
        if self._reader is None:
            self._reader = PromptToolkitReader(self.history_path, self.completer)
        return self._reader

    def prompt(self) -> str:
        if self.session.current_graph:
            return f"{self.session.current_graph}> "
        return DEFAULT_PROMPT

    def handle_line(self, line: str) -> None:
        """Classify one input line and dispatch it; blank lines are ignored."""
        parsed = classify_line(line)
        if parsed is None:
            return
        self.dispatcher.dispatch(to_command(parsed))

    def run(self) -> None:
        typer.secho("FalkorDB CLI - Interactive Mode", fg="green", bold=True)
        typer.echo("Type 'help' for commands, 'exit' to quit")
        if self.session.current_graph:
            typer.echo(
                "Current graph: " + typer.style(self.session.current_graph, fg="yellow")
            )

        while True:
            try:
                line = self.reader.read(self.prompt())
            except KeyboardInterrupt:
                typer.echo("CTRL-C")
                break
            except EOFError:
                typer.echo("CTRL-D")
                break
            except Exception as e:
                logger.error("Failed to read input: {}", e)
                break

            try:
                self.handle_line(line)
            except CliError as e:
                typer.echo(typer.style("Error", fg="red") + f": {e}", err=True)

            if line.strip() in EXIT_WORDS:
                break

        logger.debug("Interactive session finished; history at {}", self.history_path)
