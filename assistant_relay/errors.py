"""Error types raised while relaying a chat turn."""

from typing import Optional


class AssistantRelayError(Exception):
    """Base class for all relay failures."""


class AuthorizationError(AssistantRelayError):
    """The caller's identity could not be established."""


class MessageValidationError(AssistantRelayError):
    """The inbound request is missing data or malformed."""


class ConfigurationError(AssistantRelayError):
    """A required configuration value is not set."""


class PersistenceError(AssistantRelayError):
    """A store read or write failed, or violated an ownership check."""


class RemoteDependencyError(AssistantRelayError):
    """The remote assistant service returned a non-success response."""

    def __init__(self, operation: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail

        message = f"Remote call '{operation}' failed"
        if status_code is not None:
            message += f" with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RunFailedError(AssistantRelayError):
    """The remote run reached a terminal state other than completed."""

    def __init__(self, status: str, run_id: Optional[str] = None):
        self.status = status
        self.run_id = run_id
        super().__init__(f"Assistant run {status}")


class RunTimeoutError(AssistantRelayError):
    """The remote run did not reach a terminal state within the attempt ceiling."""

    def __init__(self, attempts: int, run_id: Optional[str] = None):
        self.attempts = attempts
        self.run_id = run_id
        super().__init__(f"Assistant run timed out after {attempts} status checks")


class AssistantReplyError(AssistantRelayError):
    """A completed run left no usable assistant reply on the thread."""
