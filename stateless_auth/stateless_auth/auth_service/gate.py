"""
Signup, login and protected-access flows.

``AuthGate`` ties together the user store, the password hasher and the token
issuer/verifier. Signup and login raise the domain errors from
``exceptions``; ``authorize`` returns an ``AccessResult`` instead, so the
routing layer decides how to continue.
"""
from dataclasses import dataclass
from typing import Optional

from .auth import PasswordHasher
from .exceptions import (
    AccessDenied,
    AuthServiceError,
    DuplicateEmail,
    InvalidCredentials,
    MissingToken,
    NotFound,
    ValidationError,
)
from .models import User
from .store import UserStore
from .tokens import Claims, TokenIssuer, TokenVerifier
from .utils.event_logger import log_auth_event

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class AccessResult:
    claims: Optional[Claims] = None
    error: Optional[AccessDenied] = None

    @property
    def allowed(self) -> bool:
        return self.error is None

    @classmethod
    def granted(cls, claims: Claims) -> "AccessResult":
        return cls(claims=claims)

    @classmethod
    def denied(cls, error: AccessDenied) -> "AccessResult":
        return cls(error=error)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` value, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
        raise ValidationError(message, detail=message)


class AuthGate:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.verifier = verifier
        # Verified against when the email is unknown, so both login failures cost one hash check
        self._dummy_hash = hasher.hash("stateless-auth-timing-dummy")

    def signup(self, username: str, email: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: A field is missing or blank
            DuplicateEmail: The email is already registered
            HashingError: The password could not be hashed
        """
        _require(username=username, email=email, password=password)

        try:
            if self.store.find_by_email(email) is not None:
                raise DuplicateEmail(f"Email already registered: {email}")

            password_hash = self.hasher.hash(password)
            # The store re-checks atomically; a concurrent signup may have won the race
            user = self.store.create(username, email, password_hash)
        except AuthServiceError as exc:
            log_auth_event("signup_failure", email=email, reason=type(exc).__name__)
            raise

        log_auth_event("signup_success", user_id=user.id, email=user.email)
        return user

    def login(self, email: str, password: str) -> str:
        """
        Check credentials and issue a token.

        Raises:
            ValidationError: A field is missing or blank
            NotFound: No user has this email
            InvalidCredentials: The password does not match
            SigningError: The token could not be signed
        """
        _require(email=email, password=password)

        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.verify(password, self._dummy_hash)
            log_auth_event("login_failure", email=email, reason="not_found")
            raise NotFound(f"No user with email {email}")

        if not self.hasher.verify(password, user.password_hash):
            log_auth_event("login_failure", user_id=user.id, email=email, reason="invalid_password")
            raise InvalidCredentials(f"Wrong password for user {user.id}")

        token = self.issuer.issue(user.id, user.email)
        log_auth_event("login_success", user_id=user.id, email=user.email)
        return token

    def authorize(self, authorization: Optional[str]) -> AccessResult:
        """
        Validate the bearer token from an Authorization header value.

        Never raises for a bad or absent token; the failure is returned in the
        result. The precise reason is logged, the caller only sees AccessDenied.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            error = MissingToken("No bearer token in Authorization header")
            log_auth_event("access_denied", reason=error.reason)
            return AccessResult.denied(error)

        try:
            claims = self.verifier.verify(token)
        except AccessDenied as error:
            log_auth_event("access_denied", reason=error.reason)
            return AccessResult.denied(error)

        log_auth_event("access_granted", user_id=claims.subject_id)
        return AccessResult.granted(claims)
