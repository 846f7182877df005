from clinic_client.client import ClinicClient, create_client
from clinic_client.exceptions import (
    AuthFailure,
    ClinicClientError,
    ConflictFailure,
    TransportFailure,
    ValidationFailure,
)
from clinic_client.schemas.auth import Role, Session
from clinic_client.utils.logger import configure_logging

__all__ = [
    "ClinicClient",
    "create_client",
    "configure_logging",
    "ClinicClientError",
    "ValidationFailure",
    "AuthFailure",
    "ConflictFailure",
    "TransportFailure",
    "Role",
    "Session",
]
