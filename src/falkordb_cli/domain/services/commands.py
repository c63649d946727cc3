"""
Commands understood by the dispatcher.

Both the REPL and the one-shot command line build these objects, so every
operation has exactly one implementation in ``CommandDispatcher``.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..models import EntityType


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Use:
    graph: str


@dataclass(frozen=True)
class Usage:
    """Print a usage hint; produced for meta-commands missing their argument."""

    message: str


@dataclass(frozen=True)
class ListGraphs:
    pass


@dataclass(frozen=True)
class Schema:
    graph: Optional[str] = None


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class Query:
    text: str
    graph: Optional[str] = None
    params: Optional[str] = None


@dataclass(frozen=True)
class RoQuery:
    text: str
    graph: Optional[str] = None
    params: Optional[str] = None


@dataclass(frozen=True)
class Profile:
    text: str
    graph: Optional[str] = None


@dataclass(frozen=True)
class Explain:
    text: str
    graph: Optional[str] = None


@dataclass(frozen=True)
class Delete:
    graph: Optional[str] = None


@dataclass(frozen=True)
class Slowlog:
    graph: Optional[str] = None


@dataclass(frozen=True)
class SlowlogReset:
    graph: Optional[str] = None


@dataclass(frozen=True)
class Indices:
    graph: Optional[str] = None


@dataclass(frozen=True)
class CreateIndex:
    entity_type: EntityType
    label: str
    property: str
    graph: Optional[str] = None


@dataclass(frozen=True)
class DropIndex:
    entity_type: EntityType
    label: str
    property: str
    graph: Optional[str] = None


@dataclass(frozen=True)
class Call:
    procedure: str
    graph: Optional[str] = None
    args: Optional[str] = None


@dataclass(frozen=True)
class Interactive:
    pass


Command = Union[
    Help,
    Use,
    Usage,
    ListGraphs,
    Schema,
    Exit,
    Query,
    RoQuery,
    Profile,
    Explain,
    Delete,
    Slowlog,
    SlowlogReset,
    Indices,
    CreateIndex,
    DropIndex,
    Call,
    Interactive,
]
