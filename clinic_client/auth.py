"""
Session manager: login, logout and restoration of the authenticated user.

Tokens are decoded without signature verification. The backend verifies them,
the client only needs the identity and role claims. When
the token carries no usable role, one GET /auth/me is issued with the new
token and its role is used instead. A session is never exposed without a
resolved role.
"""

import time
from enum import Enum
from typing import Callable, Iterable, Optional
from jose import jwt, JWTError
from pydantic import ValidationError
from clinic_client.config import get_settings
from clinic_client.exceptions import AuthFailure, ClinicClientError, TransportFailure, ValidationFailure
from clinic_client.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    Role,
    Session,
    TokenResponse,
    UserInfo,
)
from clinic_client.schemas.base import as_dict
from clinic_client.services.api_client import ApiClient
from clinic_client.services.storage import SessionRepository
from clinic_client.utils.logger import get_logger

logger = get_logger("auth")

ROLE_PREFIX = "ROLE_"
LOGIN_FAILED = "Login failed. Please check your email and password."

Navigate = Callable[[str], None]
LogoutListener = Callable[[], None]


class SessionState(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"


def normalize_role(value) -> Optional[Role]:
    """'ROLE_doctor' -> Role.DOCTOR. Anything outside the known roles -> None."""
    if not isinstance(value, str):
        return None
    name = value.strip().upper()
    if name.startswith(ROLE_PREFIX):
        name = name[len(ROLE_PREFIX):]
    try:
        return Role(name)
    except ValueError:
        return None


def _first_role(values: Iterable) -> Optional[Role]:
    for value in values:
        # Spring-style authorities come as {"authority": "ROLE_X"}
        if isinstance(value, dict):
            value = value.get("authority")
        role = normalize_role(value)
        if role:
            return role
    return None


def role_from_claims(claims: dict) -> Optional[Role]:
    role = normalize_role(claims.get("role"))
    if role:
        return role
    for key in ("roles", "authorities"):
        values = claims.get(key)
        if isinstance(values, str):
            values = [values]
        if isinstance(values, list):
            role = _first_role(values)
            if role:
                return role
    return None


def decode_token(token: str) -> dict:
    """Return the token's claims. Raises AuthFailure when it is not a readable, unexpired JWT."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as e:
        raise AuthFailure(f"Malformed token: {e}", code="malformed-token") from e
    if not isinstance(claims, dict):
        raise AuthFailure("Malformed token: payload is not an object", code="malformed-token")

    identity = claims.get("sub") or claims.get("email")
    if not isinstance(identity, str) or not identity:
        raise AuthFailure("Malformed token: no subject claim", code="malformed-token")

    exp = claims.get("exp")
    if exp is not None:
        if not isinstance(exp, (int, float)):
            raise AuthFailure("Malformed token: invalid expiry claim", code="malformed-token")
        if exp <= time.time():
            raise AuthFailure("Session expired. Please log in again.", code="token-expired")
    return claims


def _text_claim(claims: dict, key: str) -> Optional[str]:
    value = claims.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _display_name(claims: dict) -> Optional[str]:
    """Best-effort name for the UI. Claims that are not strings are ignored."""
    for key in ("name", "display_name", "displayName"):
        value = _text_claim(claims, key)
        if value:
            return value
    parts = [_text_claim(claims, k) for k in ("firstName", "lastName")]
    return " ".join(p for p in parts if p) or None


class SessionManager:
    """
    Owns the authenticated-user state.

    Observable fields for the UI: `state`, `user`, `loading`, `error`.
    Navigation is signalled through the `navigate` callback with either the
    login route or the landing route.
    """

    def __init__(
        self,
        api: ApiClient,
        sessions: SessionRepository,
        navigate: Optional[Navigate] = None,
        login_route: Optional[str] = None,
        landing_route: Optional[str] = None,
    ):
        settings = get_settings()
        self.api = api
        self.sessions = sessions
        self.navigate = navigate
        self.login_route = login_route or settings.login_route
        self.landing_route = landing_route or settings.landing_route

        self.state = SessionState.ANONYMOUS
        self.user: Optional[Session] = None
        self.loading = False
        self.error = ""
        self._logout_listeners: list[LogoutListener] = []

        api.on_unauthorized(self._reset)

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.user is not None

    def has_role(self, *roles: Role) -> bool:
        return self.user is not None and self.user.role in roles

    def on_logout(self, listener: LogoutListener) -> None:
        """Called after every explicit logout, before the login route is signalled."""
        self._logout_listeners.append(listener)

    def _go(self, route: str) -> None:
        if self.navigate:
            self.navigate(route)

    def _become_anonymous(self) -> None:
        self.user = None
        self.state = SessionState.ANONYMOUS

    def _reset(self) -> None:
        """Gateway saw a 401: the token is already gone, drop the session too."""
        self.sessions.clear()
        self._become_anonymous()
        self._go(self.login_route)

    async def _resolve_session(self, token: str) -> Session:
        claims = decode_token(token)
        identity = claims.get("sub") or claims.get("email")
        display_name = _display_name(claims)
        role = role_from_claims(claims)

        if role is None:
            logger.info("Token for %s carries no role; querying /auth/me", identity)
            try:
                body = await self.api.get("/auth/me", token=token)
                info = UserInfo.model_validate(body or {})
            except (TransportFailure, ValidationError) as e:
                raise AuthFailure(
                    "Could not determine your role. Please try again.", code="role-unresolved"
                ) from e
            role = normalize_role(info.role)
            display_name = display_name or info.full_name

        if role is None:
            raise AuthFailure("Your account has no recognised role.", code="role-unresolved")
        try:
            return Session(identity=identity, display_name=display_name, role=role)
        except ValidationError as e:
            raise AuthFailure("Malformed token: unreadable identity claims", code="malformed-token") from e

    def _adopt(self, token: str, session: Session) -> None:
        self.api.set_token(token)
        self.sessions.save(session)
        self.user = session
        self.state = SessionState.AUTHENTICATED
        self.error = ""

    async def login(self, identity: str, secret: str) -> Session:
        self.loading = True
        self.error = ""
        # A previous user's role must never show through a new attempt
        self.sessions.clear()
        self.user = None
        self.state = SessionState.AUTHENTICATING
        try:
            body = await self.api.post(
                "/auth/login", json=LoginRequest(email=identity, password=secret).to_wire()
            )
            try:
                tokens = TokenResponse.model_validate(body or {})
            except ValidationError as e:
                raise ValidationFailure("Unexpected login response") from e
            if not tokens.access_token:
                raise ValidationFailure("Login response did not include an access token")

            session = await self._resolve_session(tokens.access_token)
            self._adopt(tokens.access_token, session)
        except ClinicClientError as e:
            logger.warning("Login failed for %s: %s (%s)", identity, e, e.code)
            self.api.clear_token()
            self.sessions.clear()
            self._become_anonymous()
            self.error = e.message or LOGIN_FAILED
            raise
        finally:
            self.loading = False

        logger.info("Logged in %s as %s", session.identity, session.role.value)
        self._go(self.landing_route)
        return session

    def logout(self) -> None:
        self.api.clear_token()
        self.sessions.clear()
        self._become_anonymous()
        self.error = ""
        for listener in list(self._logout_listeners):
            listener()
        logger.info("Logged out")
        self._go(self.login_route)

    async def restore_session(self) -> Optional[Session]:
        """
        Re-establish the session on startup.

        Cached token + cached session are trusted as-is, with no backend call.
        A token alone is decoded again (which may hit /auth/me for the role).
        """
        token = self.api.get_token()
        cached = self.sessions.load()

        if not token:
            if cached:
                self.sessions.clear()
            self._become_anonymous()
            return None

        if cached:
            self.user = cached
            self.state = SessionState.AUTHENTICATED
            logger.info("Restored cached session for %s", cached.identity)
            return cached

        self.loading = True
        self.state = SessionState.AUTHENTICATING
        try:
            session = await self._resolve_session(token)
            self._adopt(token, session)
        except ClinicClientError as e:
            logger.warning("Could not restore session from cached token: %s", e)
            self.api.clear_token()
            self.sessions.clear()
            self._become_anonymous()
            self.error = e.message or "Your session could not be restored. Please log in again."
            raise
        finally:
            self.loading = False

        logger.info("Restored session for %s from cached token", session.identity)
        return session

    async def register(self, draft) -> RegisterResponse:
        """Create an account. Does not log the new account in."""
        self.loading = True
        self.error = ""
        try:
            try:
                request = draft if isinstance(draft, RegisterRequest) else RegisterRequest.model_validate(as_dict(draft))
            except ValidationError as e:
                raise ValidationFailure("Invalid registration details", details={"errors": e.errors()}) from e
            except (TypeError, ValueError) as e:
                raise ValidationFailure("Invalid registration details") from e
            body = await self.api.post("/auth/register", json=request.to_wire())
            try:
                return RegisterResponse.model_validate(body or {})
            except ValidationError as e:
                raise ValidationFailure("Unexpected registration response") from e
        except ClinicClientError as e:
            self.error = e.message or "Registration failed."
            raise
        finally:
            self.loading = False
