class ConditionWaiterError(Exception):
    """Base exception for all condition waiter errors."""

    ...


class InvalidCallbackError(ConditionWaiterError, TypeError):
    """Raised when a callback argument is missing or not callable."""


class InvalidPollingDelayError(ConditionWaiterError, ValueError):
    """Raised when a polling delay is not a non-negative integer number of milliseconds."""


class InvalidPollingScheduleError(ConditionWaiterError):
    """Raised when a polling schedule combines a policy with a delay it cannot use."""
