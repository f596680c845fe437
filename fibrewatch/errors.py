"""
Error taxonomy for fibrewatch.

Every stage raises a subclass of FibreWatchError. Nothing below the CLI
catches them: a failed stage aborts the run and the process exits non-zero,
leaving the snapshot untouched for the next scheduled run.
"""


class FibreWatchError(Exception):
    """Base class for all run-aborting failures."""
    pass


class ConfigError(FibreWatchError):
    """A required environment value is missing or cannot be parsed."""
    pass


class FetchError(FibreWatchError):
    """The feature service could not be reached or answered with an error."""
    pass


class DecodeError(FibreWatchError):
    """The payload is not a valid FeatureCollection buffer."""
    pass


class ExtractionError(FibreWatchError):
    """The decoded collection does not hold the requested address."""
    pass


class NoQueryResult(ExtractionError):
    pass


class AddressColumnMissing(ExtractionError):
    pass


class FeatureNotFound(ExtractionError):
    pass


class MalformedValue(FibreWatchError):
    """A Value cell has no populated variant."""
    pass


class PersistenceError(FibreWatchError):
    """The snapshot file could not be written."""
    pass


class NotifyError(FibreWatchError):
    """The diff mail could not be composed or sent."""
    pass
