from __future__ import annotations


class SchedulerError(ValueError):
    """
    Base class for every rejected scheduling request.
    """


class InvalidInput(SchedulerError):
    """Empty or malformed process set."""


class InvalidParameter(SchedulerError):
    """Bad algorithm parameter, e.g. a non-positive quantum or unknown policy."""


class EmptySchedule(SchedulerError):
    """Metrics were requested for a schedule with no intervals."""
