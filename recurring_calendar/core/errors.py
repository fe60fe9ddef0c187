"""Exception hierarchy shared by every calendar module."""

from __future__ import annotations


class CalendarError(Exception):
    """Base class for all recurring-calendar errors."""


class EventValidationError(CalendarError, ValueError):
    """Raised when an expression or event is constructed with invalid input."""


class EventNotFoundError(CalendarError, LookupError):
    """Raised when a recurring event id does not exist in the store."""


class InvalidOperationError(CalendarError):
    """Raised when an instance operation targets a date the event does not occur on."""


class EventStoreError(CalendarError):
    """Raised when a store backend cannot read or write its records."""


class RuleSchemaError(EventValidationError):
    """Raised when a serialized recurrence rule cannot be read or written."""
