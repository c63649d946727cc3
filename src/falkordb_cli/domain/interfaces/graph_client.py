"""Abstract graph database client used by the command dispatcher."""
from typing import Any, Optional, Protocol, Sequence

from ..models import EntityType, IndexKind, QueryOutcome


class GraphClientError(Exception):
    """Raised by a GraphClient when a call fails; carries a human-readable message."""

    pass


class GraphClient(Protocol):
    """Interface for per-graph database operations."""

    def query(self, graph: str, query: str) -> QueryOutcome:
        """Execute a (possibly mutating) Cypher query."""
        raise NotImplementedError

    def ro_query(self, graph: str, query: str) -> QueryOutcome:
        """Execute a read-only Cypher query."""
        raise NotImplementedError

    def profile(self, graph: str, query: str) -> str:
        raise NotImplementedError

    def explain(self, graph: str, query: str) -> str:
        raise NotImplementedError

    def delete(self, graph: str) -> None:
        raise NotImplementedError

    def slowlog(self, graph: str) -> list[Any]:
        raise NotImplementedError

    def slowlog_reset(self, graph: str) -> None:
        raise NotImplementedError

    def list_indices(self, graph: str) -> list[Any]:
        raise NotImplementedError

    def create_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        raise NotImplementedError

    def drop_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        raise NotImplementedError

    def call_procedure(
        self, graph: str, procedure: str, args: Optional[Sequence[Any]] = None
    ) -> QueryOutcome:
        raise NotImplementedError
