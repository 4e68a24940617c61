"""Error taxonomy shared by the adapters and the API layer."""

from __future__ import annotations


class AgentFlowError(Exception):
    """Base class. ``status_code`` is the HTTP status the API layer responds with."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(AgentFlowError):
    """Caller input failed its request contract."""

    status_code = 400

    def __init__(self, message: str, field_errors: dict[str, list[str]]) -> None:
        super().__init__(message)
        self.field_errors = field_errors


class ConfigurationError(AgentFlowError):
    """A required upstream address is missing or malformed."""

    status_code = 500


class UpstreamError(AgentFlowError):
    """Base for failures talking to an upstream service."""

    status_code = 502


class UpstreamClientError(UpstreamError):
    """Upstream answered with a 4xx. Never retried.

    ``detail`` may hold raw body text; ``reported`` is only the message the
    upstream put in a JSON field, if any.
    """

    def __init__(self, upstream_status: int, detail: str, reported: str | None = None) -> None:
        super().__init__(f"Client error: {upstream_status}. {detail}".rstrip())
        self.upstream_status = upstream_status
        self.detail = detail
        self.reported = reported


class UpstreamServerError(UpstreamError):
    """Upstream answered with a 5xx."""

    def __init__(self, upstream_status: int, detail: str, reported: str | None = None) -> None:
        super().__init__(f"Server error: {upstream_status}. {detail}".rstrip())
        self.upstream_status = upstream_status
        self.detail = detail
        self.reported = reported


class NetworkError(UpstreamError):
    """The request never got an HTTP response."""


class UpstreamTimeout(UpstreamError):
    status_code = 504


class SchemaMismatch(UpstreamError):
    """An upstream payload does not match its declared contract."""

    status_code = 500

    def __init__(self, message: str, field_errors: dict[str, list[str]]) -> None:
        super().__init__(message)
        self.field_errors = field_errors


class ExhaustedRetries(UpstreamError):
    """Every attempt failed with a retryable error; ``last_error`` is the final one."""

    def __init__(self, attempts: int, last_error: UpstreamError) -> None:
        super().__init__(f"All {attempts} attempts failed: {last_error.message}")
        self.attempts = attempts
        self.last_error = last_error
        self.status_code = last_error.status_code
