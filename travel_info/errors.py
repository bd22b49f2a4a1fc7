"""Error taxonomy for travel info sources."""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a source or the orchestrator can report."""

    RESOLUTION_FAILURE = "RESOLUTION_FAILURE"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    NOT_FOUND = "NOT_FOUND"
    AI_UNAVAILABLE = "AI_UNAVAILABLE"
    NO_SOURCE = "NO_SOURCE"
    UNKNOWN = "UNKNOWN"


class TravelInfoServiceError(Exception):
    """Base exception for source errors.

    Raised inside adapters only; adapter boundaries turn it into a
    ``SourceFailure`` or a default payload.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        source_name: str | None = None,
        *,
        attempts: int = 0,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.source_name = source_name
        self.attempts = attempts
        self.cause = cause

    def __str__(self) -> str:
        prefix = f"[{self.source_name}] " if self.source_name else ""
        return f"{prefix}{self.kind.value}: {self.message}"


class NetworkError(TravelInfoServiceError):
    """Raised when an upstream call keeps failing past the retry budget."""

    def __init__(
        self,
        message: str,
        source_name: str | None = None,
        *,
        attempts: int = 0,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            ErrorKind.NETWORK_ERROR,
            message,
            source_name,
            attempts=attempts,
            cause=cause,
        )


class InvalidResponseError(TravelInfoServiceError):
    """Raised when a payload does not have the expected shape."""

    def __init__(self, message: str, source_name: str | None = None) -> None:
        super().__init__(ErrorKind.INVALID_RESPONSE, message, source_name)
