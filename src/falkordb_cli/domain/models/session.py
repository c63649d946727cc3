from dataclasses import dataclass
from typing import Optional

from ..services.exceptions import NoGraphSelected
from .common_types import OutputFormat


@dataclass
class SessionState:
    """Mutable context of one CLI process: selected graph and output options."""

    current_graph: Optional[str] = None
    output_format: OutputFormat = OutputFormat.TABLE
    quiet: bool = False
    raw: bool = False

    def set_graph(self, name: str) -> None:
        self.current_graph = name

    def resolve_graph(self, explicit: Optional[str] = None) -> str:
        """Return the explicit graph name, falling back to the session graph."""
        if explicit:
            return explicit
        if self.current_graph:
            return self.current_graph
        raise NoGraphSelected()
