"""GraphClient backed by the FalkorDB Python client."""
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from falkordb import FalkorDB
from loguru import logger
from redis.exceptions import RedisError

from ..config import ConnectionSettings
from ..domain.interfaces import GraphClient, GraphClientError
from ..domain.models import (
    CellValue,
    EntityType,
    GraphEntity,
    IndexKind,
    QueryOutcome,
    QueryStatistics,
)
from ..domain.services import ConnectionSetupFailed

T = TypeVar("T")

# QueryStatistics field -> (QueryResult property, server statistic label)
STATISTICS = {
    "nodes_created": ("nodes_created", "nodes created"),
    "nodes_deleted": ("nodes_deleted", "nodes deleted"),
    "relationships_created": ("relationships_created", "relationships created"),
    "relationships_deleted": ("relationships_deleted", "relationships deleted"),
    "properties_set": ("properties_set", "properties set"),
    "execution_time_ms": ("run_time_ms", "internal execution time"),
}


def reported_labels(result: Any) -> Optional[List[str]]:
    """
    Lowercased labels of the "<Label>: <value>" lines the server sent.

    QueryResult reports 0 for statistics the server left out; the raw lines
    are the only way to tell the two apart. None when they are not available.
    """
    raw = getattr(result, "_raw_stats", None)
    if not isinstance(raw, (list, tuple)):
        return None
    labels = []
    for line in raw:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        labels.append(str(line).split(":", 1)[0].strip().lower())
    return labels


def statistics_from_result(result: Any) -> QueryStatistics:
    """Read server statistics, leaving unreported ones as None."""
    labels = reported_labels(result)
    values: Dict[str, Any] = {}
    for field_name, (prop, label) in STATISTICS.items():
        if labels is not None and not any(label in reported for reported in labels):
            continue
        value = getattr(result, prop, None)
        if value is None:
            continue
        if field_name == "execution_time_ms":
            values[field_name] = float(value)
        else:
            values[field_name] = int(value)
    return QueryStatistics(**values)


def header_names(header: Optional[Sequence[Any]]) -> List[str]:
    """Column names from a result header; entries may be [type, name] pairs."""
    names = []
    for column in header or []:
        if isinstance(column, (list, tuple)):
            names.append(str(column[-1]))
        else:
            names.append(str(column))
    return names


def to_cell_value(value: Any) -> CellValue:
    """Convert client values (nodes, edges, paths, collections) into plain cell values."""
    if callable(getattr(value, "nodes", None)) and callable(getattr(value, "edges", None)):
        nodes = [to_cell_value(n) for n in value.nodes()]
        edges = [to_cell_value(e) for e in value.edges()]
        members: List[Any] = []
        for i, node in enumerate(nodes):
            members.append(node)
            if i < len(edges):
                members.append(edges[i])
        return GraphEntity(kind="path", members=members)
    if hasattr(value, "relation") and hasattr(value, "properties"):
        return GraphEntity(
            kind="edge",
            id=getattr(value, "id", None),
            labels=[str(value.relation)] if value.relation else [],
            properties=dict(value.properties or {}),
        )
    if hasattr(value, "labels") and hasattr(value, "properties"):
        return GraphEntity(
            kind="node",
            id=getattr(value, "id", None),
            labels=[str(label) for label in (value.labels or [])],
            properties=dict(value.properties or {}),
        )
    if isinstance(value, (list, tuple)):
        return [to_cell_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_cell_value(v) for k, v in value.items()}
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def outcome_from_result(result: Any) -> QueryOutcome:
    """Materialize a client query result into a QueryOutcome."""
    headers = header_names(getattr(result, "header", None))
    result_set = getattr(result, "result_set", None)
    rows = None
    if result_set is not None:
        rows = [
            {name: to_cell_value(value) for name, value in zip(headers, record)}
            for record in result_set
        ]
    return QueryOutcome(
        statistics=statistics_from_result(result),
        headers=headers,
        rows=rows,
    )


class FalkorGraphClient(GraphClient):
    """GraphClient implementation talking to a FalkorDB server."""

    def __init__(self, db: Any) -> None:
        self._db = db

    @classmethod
    def connect(cls, settings: ConnectionSettings) -> "FalkorGraphClient":
        logger.info("Connecting to FalkorDB at {}", settings.masked_url())
        try:
            db = FalkorDB.from_url(settings.url())
        except (RedisError, ValueError) as exc:
            raise ConnectionSetupFailed(
                f"Failed to create FalkorDB client: {exc}"
            ) from exc
        return cls(db)

    def close(self) -> None:
        connection = getattr(self._db, "connection", None)
        if connection is not None:
            connection.close()

    def _call(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return operation(*args, **kwargs)
        except RedisError as exc:
            logger.debug("FalkorDB call {} failed: {}", getattr(operation, "__name__", operation), exc)
            raise GraphClientError(str(exc)) from exc

    def _graph(self, name: str) -> Any:
        return self._db.select_graph(name)

    def query(self, graph: str, query: str) -> QueryOutcome:
        result = self._call(self._graph(graph).query, query)
        return outcome_from_result(result)

    def ro_query(self, graph: str, query: str) -> QueryOutcome:
        result = self._call(self._graph(graph).ro_query, query)
        return outcome_from_result(result)

    def profile(self, graph: str, query: str) -> str:
        return str(self._call(self._graph(graph).profile, query))

    def explain(self, graph: str, query: str) -> str:
        return str(self._call(self._graph(graph).explain, query))

    def delete(self, graph: str) -> None:
        self._call(self._graph(graph).delete)

    def slowlog(self, graph: str) -> list[Any]:
        return list(self._call(self._graph(graph).slowlog) or [])

    def slowlog_reset(self, graph: str) -> None:
        self._call(self._graph(graph).slowlog_reset)

    def list_indices(self, graph: str) -> list[Any]:
        result = self._call(self._graph(graph).list_indices)
        return list(getattr(result, "result_set", None) or [])

    def create_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        if kind is not IndexKind.RANGE:
            raise GraphClientError(f"Unsupported index kind: {kind.value}")
        g = self._graph(graph)
        if entity_type is EntityType.NODE:
            self._call(g.create_node_range_index, label, *properties)
        else:
            self._call(g.create_edge_range_index, label, *properties)

    def drop_index(
        self,
        graph: str,
        kind: IndexKind,
        entity_type: EntityType,
        label: str,
        properties: Sequence[str],
    ) -> None:
        if kind is not IndexKind.RANGE:
            raise GraphClientError(f"Unsupported index kind: {kind.value}")
        g = self._graph(graph)
        drop = (
            g.drop_node_range_index
            if entity_type is EntityType.NODE
            else g.drop_edge_range_index
        )
        for prop in properties:
            self._call(drop, label, prop)

    def call_procedure(
        self, graph: str, procedure: str, args: Optional[Sequence[Any]] = None
    ) -> QueryOutcome:
        result = self._call(
            self._graph(graph).call_procedure, procedure, args=list(args or [])
        )
        return outcome_from_result(result)
