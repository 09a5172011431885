class EczemaError(Exception):
    """Base error for all user-facing Eczemadex exceptions."""


class ConfigurationError(EczemaError):
    """Raised when configuration is invalid or incomplete."""


class NotFoundError(EczemaError):
    """Raised when an id does not refer to a live resource."""

    def __init__(self, resource_id: int) -> None:
        super().__init__(f"Resource not found: {resource_id}")
        self.resource_id = resource_id


class AlreadyExistsError(EczemaError):
    """Reserved for uniqueness constraints. Nothing raises it today."""


class InvalidInputError(EczemaError):
    """Raised when creation or update arguments fail validation."""


class UnauthorizedError(EczemaError):
    """Raised by calling layers that enforce access control."""


class SnapshotError(EczemaError):
    """Raised when snapshot persistence fails."""


class SnapshotRestoreError(SnapshotError):
    """Raised when a snapshot cannot be restored. Always fatal."""


class SnapshotWriteRefusedError(SnapshotError):
    """Raised when writing a snapshot would clobber state that failed to restore."""


class StoreLockedError(EczemaError):
    """Raised when another process already holds the data directory lock."""
