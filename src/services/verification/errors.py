"""Verification error taxonomy."""


class VerificationError(Exception):
    """Base class for verification engine errors."""


class SourceUnavailableError(VerificationError):
    """The registry or record-search collaborator could not be reached."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} unavailable: {reason}")


class PipelineFailureError(VerificationError):
    """A pipeline stage raised while processing a query."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} stage failed: {cause}")


class TimeoutExceededError(VerificationError):
    """A cross verification did not settle within its global timeout."""

    def __init__(self, request_id: str, timeout_ms: int, unresolved: int):
        self.request_id = request_id
        self.timeout_ms = timeout_ms
        self.unresolved = unresolved
        super().__init__(
            f"Verification timeout after {timeout_ms} ms "
            f"({unresolved} queries unresolved)"
        )


class CacheCorruptionError(VerificationError):
    """A cache entry failed validation on read."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupted cache entry {key[:12]}: {reason}")
