"""
Classification of interactive input lines.

A line is either a meta-command, recognised by its first whitespace-delimited
token, or a literal Cypher query to run against the current graph.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..models import MetaKind
from .commands import (
    Command,
    Exit,
    Help,
    ListGraphs,
    Query,
    RoQuery,
    Schema,
    Usage,
    Use,
)

KEYWORDS = {kind.value: kind for kind in MetaKind}

QUOTES = ('"', "'")


@dataclass(frozen=True)
class MetaCommand:
    kind: MetaKind
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LiteralQuery:
    text: str


ParsedLine = Union[MetaCommand, LiteralQuery]


def strip_outer_quotes(text: str) -> str:
    """
    Remove one matching pair of surrounding single or double quotes.

    The pair must enclose the whole text: ``'a' RETURN 'b'`` is left alone.
    """
    if len(text) < 2 or text[0] not in QUOTES or text[-1] != text[0]:
        return text
    inner = text[1:-1]
    if text[0] in inner:
        return text
    return inner


def classify_line(line: str) -> Optional[ParsedLine]:
    """Classify a raw input line; returns None for a blank line."""
    line = line.strip()
    if not line:
        return None

    parts = line.split(None, 1)
    kind = KEYWORDS.get(parts[0].upper())
    if kind is None:
        return LiteralQuery(line)

    rest = parts[1].strip() if len(parts) > 1 else ""
    if kind in (MetaKind.QUERY, MetaKind.RO_QUERY):
        text = strip_outer_quotes(rest).strip()
        return MetaCommand(kind, (text,) if text else ())
    return MetaCommand(kind, tuple(rest.split()))


def to_command(parsed: ParsedLine) -> Command:
    """Translate a parsed line into the dispatcher command it stands for."""
    if isinstance(parsed, LiteralQuery):
        return Query(text=parsed.text)

    kind, args = parsed.kind, parsed.args
    if kind is MetaKind.HELP:
        return Help()
    if kind is MetaKind.USE:
        if not args:
            return Usage("Usage: USE <graph_name>")
        return Use(args[0])
    if kind is MetaKind.LIST:
        return ListGraphs()
    if kind is MetaKind.SCHEMA:
        return Schema(args[0] if args else None)
    if kind in (MetaKind.EXIT, MetaKind.QUIT):
        return Exit()
    if kind is MetaKind.QUERY:
        if not args:
            return Usage("Usage: QUERY <cypher query>")
        return Query(text=args[0])
    if not args:
        return Usage("Usage: RO-QUERY <cypher query>")
    return RoQuery(text=args[0])
