"""
Common type definitions to avoid circular imports.
Closed enumerations that free-form CLI strings are parsed into exactly once.
"""

from enum import Enum

from ..services.exceptions import InvalidEntityType


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


class EntityType(str, Enum):
    NODE = "node"
    EDGE = "edge"

    @classmethod
    def parse(cls, value: str) -> "EntityType":
        """Map a user-supplied entity literal (NODE, EDGE or RELATIONSHIP) to an EntityType."""
        normalized = value.strip().upper()
        if normalized == "NODE":
            return cls.NODE
        if normalized in ("EDGE", "RELATIONSHIP"):
            return cls.EDGE
        raise InvalidEntityType(value)


class IndexKind(str, Enum):
    # only range indices are exposed on the command line
    RANGE = "range"


class MetaKind(str, Enum):
    HELP = "HELP"
    USE = "USE"
    LIST = "LIST"
    SCHEMA = "SCHEMA"
    EXIT = "EXIT"
    QUIT = "QUIT"
    QUERY = "QUERY"
    RO_QUERY = "RO-QUERY"
