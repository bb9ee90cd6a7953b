"""Exceptions raised by the slot engine.

Only configuration and ingestion problems raise.  An unfillable slot is a
normal outcome and is reported as ``missing`` on the payload instead.
"""


class EngineError(Exception):
    """Base class for slot engine failures."""


class TemplateConfigError(EngineError, ValueError):
    """A template or requirement definition is malformed.

    Raised at template-load time, before any resolution runs.
    """


class SnapshotError(EngineError, ValueError):
    """A catalog snapshot row cannot be turned into a typed asset."""
