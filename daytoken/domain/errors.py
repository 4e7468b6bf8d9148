class DayTokenError(Exception):
    """Base class for recoverable day token errors."""


class InvalidTickError(DayTokenError):
    """Raised when a tick carries a negative or malformed elapsed time."""


class GenerationUnavailableError(DayTokenError):
    """Raised when the token generator cannot produce a value."""


class MalformedTokenError(GenerationUnavailableError):
    """Raised when a generator returns a value of the wrong width or alphabet."""


class EngineNotStartedError(DayTokenError):
    """Raised when the engine is used before start()."""


class AlreadyDecidedError(DayTokenError):
    """Raised when a decision arrives after the operation was already decided."""


class CredentialAlreadyEnrolledError(DayTokenError):
    """Raised when enrolling a value that is already in the registry."""


class CredentialNotFoundError(DayTokenError):
    """Raised when selecting or removing a value that is not enrolled."""
