"""Exceptions raised by the falkordb-cli session engine."""

from typing import Optional


class CliError(Exception):
    """Base exception for every error reported to the user."""

    pass


class ConnectionSetupFailed(CliError):
    """Connection parameters are malformed or the client could not be built."""

    pass


class CommandError(CliError):
    """A single command failed; the interactive session keeps running."""

    pass


class NoGraphSelected(CommandError):
    def __init__(self) -> None:
        super().__init__(
            "No graph specified. Use -g option or 'USE <graph_name>' command"
        )


class InvalidEntityType(CommandError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid entity type '{value}'. Use NODE or EDGE")


class UnimplementedFeature(CommandError):
    """A declared feature that is not available yet."""

    pass


class GraphOperationFailed(CommandError):
    """A call to the graph client failed; the client's message is kept verbatim."""

    operation = "Operation"

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(f"{self.operation} failed: {message}")


class QueryFailed(GraphOperationFailed):
    operation = "Query"


class ProfileFailed(GraphOperationFailed):
    operation = "Profile"


class ExplainFailed(GraphOperationFailed):
    operation = "Explain"


class DeleteFailed(GraphOperationFailed):
    operation = "Delete"


class IndexOperationFailed(GraphOperationFailed):
    operation = "Index operation"


class SlowlogFailed(GraphOperationFailed):
    operation = "Slowlog"
