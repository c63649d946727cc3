from .exceptions import (
    CliError,
    CommandError,
    ConnectionSetupFailed,
    DeleteFailed,
    ExplainFailed,
    GraphOperationFailed,
    IndexOperationFailed,
    InvalidEntityType,
    NoGraphSelected,
    ProfileFailed,
    QueryFailed,
    SlowlogFailed,
    UnimplementedFeature,
)

__all__ = [
    "CliError",
    "CommandError",
    "ConnectionSetupFailed",
    "DeleteFailed",
    "ExplainFailed",
    "GraphOperationFailed",
    "IndexOperationFailed",
    "InvalidEntityType",
    "NoGraphSelected",
    "ProfileFailed",
    "QueryFailed",
    "SlowlogFailed",
    "UnimplementedFeature",
]
