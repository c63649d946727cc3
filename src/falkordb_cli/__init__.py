"""falkordb-cli: an interactive command line client for FalkorDB."""

__version__ = "0.1.0"
