from typing import Optional


class ClinicClientError(Exception):
    """Base for every failure surfaced by the client layer."""

    default_message = "Unexpected error"

    def __init__(
        self,
        message: str = "",
        code: str = "error",
        status_code: Optional[int] = None,
        details: dict = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message or self.default_message)


class ValidationFailure(ClinicClientError):
    default_message = "Invalid or missing data"

    def __init__(self, message: str = "", details: dict = None):
        super().__init__(message, code="validation", details=details)


class AuthFailure(ClinicClientError):
    """Bad credentials, malformed or expired token, or a role that could not be resolved."""

    default_message = "Authentication failed"

    def __init__(self, message: str = "", code: str = "invalid-credentials", status_code: Optional[int] = None):
        super().__init__(message, code=code, status_code=status_code)


class ConflictFailure(ClinicClientError):
    default_message = "Entity is still referenced"

    def __init__(self, message: str = "", entity_id: str = ""):
        self.entity_id = entity_id
        super().__init__(message, code="conflict", details={"entity_id": entity_id})


class TransportFailure(ClinicClientError):
    """Network or server-side error. `message` is the server's own text when it sent one."""

    default_message = "Request failed"

    def __init__(self, message: str = "", status_code: Optional[int] = None, details: dict = None):
        super().__init__(message, code="network/server-error", status_code=status_code, details=details)

    def __str__(self) -> str:
        if self.message:
            return self.message
        if self.status_code:
            return f"Request failed with status {self.status_code}"
        return self.default_message
