"""Infrastructure implementations of domain interfaces."""

from .falkordb_client import FalkorGraphClient

__all__ = ["FalkorGraphClient"]
