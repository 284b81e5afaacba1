"""Custom exception types for the squad analytics command-line front end.

The analytics builders themselves never raise for well-formed records; these
errors cover reading and validating the input snapshot.
"""


class SquadAnalyticsError(Exception):
    """Base exception for all recoverable squad analytics errors."""


class ConfigurationError(SquadAnalyticsError):
    """Raised when runtime configuration values are missing or invalid."""


class SnapshotError(SquadAnalyticsError):
    """Raised when the snapshot file cannot be read or is not a JSON object."""


class DataValidationError(SquadAnalyticsError):
    """Raised when a snapshot record is missing required fields or has bad timestamps."""
