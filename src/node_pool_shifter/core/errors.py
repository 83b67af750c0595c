"""
errors.py
- Exception hierarchy for node pool shifting.
- Every error raised by the shifter derives from ShifterError so callers can
  catch the whole family in one place.

Usage:
    from node_pool_shifter.core.errors import InventoryQueryError

    try:
        snapshot = inventory.list_nodes("default-pool")
    except InventoryQueryError as e:
        logger.error(f"[shift] {e}")
"""

__all__ = [
    "ShifterError",
    "ConfigurationError",
    "ClusterDiscoveryError",
    "InventoryQueryError",
    "ResizeSubmissionError",
    "OperationTimeoutError",
    "TransientPollError",
]


class ShifterError(Exception):
    """Base class for all node pool shifter errors."""


class ConfigurationError(ShifterError):
    """Configuration is missing or invalid. Fatal at startup."""


class ClusterDiscoveryError(ShifterError):
    """Project, location or cluster name could not be resolved. Fatal at startup."""


class InventoryQueryError(ShifterError):
    """Listing the nodes of a pool failed. The cycle is skipped."""

    def __init__(self, pool, cause=None):
        self.pool = pool
        self.cause = cause
        target = pool or "<all>"
        super().__init__(f"Error while getting the list of nodes for pool {target}: {cause}")


class ResizeSubmissionError(ShifterError):
    """The resize request itself was rejected by the provider."""

    def __init__(self, pool, size, cause=None):
        self.pool = pool
        self.size = size
        self.cause = cause
        super().__init__(f"Error resizing node pool {pool} to {size} node(s): {cause}")


class OperationTimeoutError(ShifterError, TimeoutError):
    """A provider operation did not reach DONE before the wait timed out."""

    def __init__(self, operation, timeout):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"Timeout while waiting for operation {operation.name} on {operation.target_link} "
            f"to complete after {timeout}s"
        )


class TransientPollError(ShifterError):
    """A single operation status check failed. Absorbed by the waiter."""

    def __init__(self, operation, cause=None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Error while getting operation {operation.name} on {operation.target_link}: {cause}")
