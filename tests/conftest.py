"""Pytest configuration and shared fakes for the test suite."""

import os
import sys
from typing import Any, List, Optional, Sequence

import pytest
from loguru import logger

from falkordb_cli.cli.renderer import ResultRenderer
from falkordb_cli.domain.interfaces import GraphClientError
from falkordb_cli.domain.models import (
    EntityType,
    IndexKind,
    QueryOutcome,
    QueryStatistics,
    SessionState,
)
from falkordb_cli.domain.services.dispatcher import CommandDispatcher


class FakeGraphClient:
    """In-memory GraphClient that records every call it receives."""

    def __init__(
        self,
        outcome: Optional[QueryOutcome] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.outcome = outcome or QueryOutcome(
            statistics=QueryStatistics(nodes_created=1, execution_time_ms=0.25),
            headers=["n"],
            rows=[],
        )
        self.error = error
        self.failing_queries: set[str] = set()
        self.slowlog_entries: List[Any] = []
        self.index_entries: List[Any] = []
        self.plan = "Results\n    Project\n        All Node Scan | (n)"
        self.calls: List[tuple] = []
        self.closed = False

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        if self.error is not None:
            raise self.error

    def query(self, graph: str, query: str) -> QueryOutcome:
        self._record("query", graph, query)
        if query in self.failing_queries:
            raise GraphClientError(f"cannot run {query}")
        return self.outcome

    def ro_query(self, graph: str, query: str) -> QueryOutcome:
        self._record("ro_query", graph, query)
        return self.outcome

    def profile(self, graph: str, query: str) -> str:
        self._record("profile", graph, query)
        return self.plan

    def explain(self, graph: str, query: str) -> str:
        self._record("explain", graph, query)
        return self.plan

    def delete(self, graph: str) -> None:
        self._record("delete", graph)

    def slowlog(self, graph: str) -> list:
        self._record("slowlog", graph)
        return self.slowlog_entries

    def slowlog_reset(self, graph: str) -> None:
        self._record("slowlog_reset", graph)

    def list_indices(self, graph: str) -> list:
        self._record("list_indices", graph)
        return self.index_entries

    def create_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        self._record("create_index", graph, kind, entity_type, label, list(properties))

    def drop_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        self._record("drop_index", graph, kind, entity_type, label, list(properties))

    def call_procedure(self, graph: str, procedure: str, args=None) -> QueryOutcome:
        self._record("call_procedure", graph, procedure, args)
        return self.outcome

    def close(self) -> None:
        self.closed = True


class ScriptedReader:
    """LineReader returning prepared lines, then raising EOFError."""

    def __init__(self, lines: Sequence[Any]) -> None:
        self.lines = list(lines)
        self.prompts: List[str] = []

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        line = self.lines.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep user config files, .env and FALKORDB_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("FALKORDB_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield
    logger.remove()
    logger.add(sys.__stderr__, level="WARNING")


@pytest.fixture
def fake_client():
    return FakeGraphClient()


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def dispatcher(fake_client, session):
    return CommandDispatcher(fake_client, session, ResultRenderer(session))


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
