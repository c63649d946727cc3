"""Domain interfaces."""

from .graph_client import GraphClient, GraphClientError

__all__ = ["GraphClient", "GraphClientError"]
