"""Tab completion of REPL keywords."""

from typing import Iterable, List

from prompt_toolkit.completion import WordCompleter

from ..domain.models import MetaKind

# REPL-only tokens that are not command line subcommands
EXTRA_KEYWORDS = [kind.value for kind in MetaKind] + ["MATCH", "INTERACTIVE"]


def completion_keywords(subcommands: Iterable[str]) -> List[str]:
    """Uppercased subcommand names plus REPL keywords, sorted and de-duplicated."""
    keywords = {name.upper() for name in subcommands}
    keywords.update(EXTRA_KEYWORDS)
    return sorted(keywords)


def keyword_completer(subcommands: Iterable[str]) -> WordCompleter:
    return WordCompleter(
        completion_keywords(subcommands), ignore_case=True, WORD=True
    )
