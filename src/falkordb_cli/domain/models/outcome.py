"""Query outcome produced by the graph client and consumed by the renderer."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class QueryStatistics:
    """Server-reported statistics; a field is None when the server did not report it."""

    nodes_created: Optional[int] = None
    nodes_deleted: Optional[int] = None
    relationships_created: Optional[int] = None
    relationships_deleted: Optional[int] = None
    properties_set: Optional[int] = None
    execution_time_ms: Optional[float] = None


@dataclass
class GraphEntity:
    """A node, edge or path returned inside a result row."""

    kind: str  # "node", "edge" or "path"
    id: Optional[int] = None
    labels: List[str] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    members: List["GraphEntity"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == "path":
            return {"kind": "path", "members": [m.to_dict() for m in self.members]}
        return {
            "kind": self.kind,
            "id": self.id,
            "labels": list(self.labels),
            "properties": dict(self.properties),
        }

    def __str__(self) -> str:
        if self.kind == "path":
            return "<" + ", ".join(str(m) for m in self.members) + ">"
        labels = "".join(f":{label}" for label in self.labels)
        props = ""
        if self.properties:
            props = " {" + ", ".join(
                f"{key}: {value!r}" for key, value in self.properties.items()
            ) + "}"
        if self.kind == "edge":
            return f"[{labels}{props}]"
        return f"({labels}{props})"


CellValue = Union[None, bool, int, float, str, list, dict, GraphEntity]
Row = Dict[str, CellValue]


@dataclass
class QueryOutcome:
    """
    Statistics, column headers and rows of one query execution.

    ``rows`` is None when the client could not materialize row data.
    """

    statistics: QueryStatistics = field(default_factory=QueryStatistics)
    headers: List[str] = field(default_factory=list)
    rows: Optional[List[Row]] = None
