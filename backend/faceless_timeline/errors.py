"""Exceptions raised by the timeline engine."""


class TimelineError(Exception):
    """Base class for timeline engine failures."""


class ConfigurationError(TimelineError, ValueError):
    """A caller broke a precondition (e.g. a segment without a resolved duration)."""
