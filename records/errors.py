"""Exceptions raised by the record store and input validation."""


class RecordsError(Exception):
    """Base class for record keeping errors."""


class NotFoundError(RecordsError, LookupError):
    """A record with the requested id does not exist."""


class ValidationError(RecordsError, ValueError):
    """Input for a record failed validation."""
