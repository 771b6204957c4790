"""Error taxonomy for the scheduling core.

Local errors (format, empty interval, invariant, illegal transition) are
raised before any state changes, so the caller's previous value is still
valid. ExternalServiceError wraps failures of the availability, capacity
and booking services and is left to the caller to retry.
"""

from typing import Optional


class ScheduleError(Exception):
    """Base class for every error raised by partner_schedule."""


class InvalidFormatError(ScheduleError, ValueError):
    """A time string does not parse as HH:MM."""


class EmptyIntervalError(ScheduleError, ValueError):
    """A proposed time block has start >= end."""


class InvariantViolationError(ScheduleError):
    """A document fails its structural invariants."""

    def __init__(self, message: str, violations: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.violations = violations or [message]


class IllegalTransitionError(ScheduleError):
    """A booking action is not permitted from the booking's current state."""

    def __init__(self, message: str, status: Optional[str] = None, action: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.action = action


class SlotUnavailableError(IllegalTransitionError):
    """A reschedule target falls outside the partner's published availability."""


class ExternalServiceError(ScheduleError):
    """An availability, capacity or booking service call failed."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation
