from .common_types import EntityType, IndexKind, MetaKind, OutputFormat
from .outcome import CellValue, GraphEntity, QueryOutcome, QueryStatistics, Row
from .session import SessionState

__all__ = [
    "CellValue",
    "EntityType",
    "GraphEntity",
    "IndexKind",
    "MetaKind",
    "OutputFormat",
    "QueryOutcome",
    "QueryStatistics",
    "Row",
    "SessionState",
]
