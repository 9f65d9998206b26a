"""
Issuing and verifying signed access tokens.

Tokens are compact JWTs signed with a server-held HMAC secret. Nothing about
an issued token is stored server side: validity is re-derived from the
token's own signed claims and the current time.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from .exceptions import Expired, InvalidToken, SigningError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    subject_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        lifetime: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        algorithm: str = ALGORITHM,
        clock: Clock = utcnow,
    ):
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, subject_id: int, email: str, lifetime: Optional[timedelta] = None) -> str:
        """
        Build and sign a token for the given identity.

        Args:
            subject_id: User id, stored as the ``sub`` claim
            email: User email, stored as the ``email`` claim
            lifetime: Overrides the issuer's default lifetime

        Returns:
            Compact signed token string

        Raises:
            SigningError: If no secret is configured or signing fails
        """
        if not self._secret:
            raise SigningError("Token signing secret is not configured")

        issued_at = self._clock()
        payload = {
            "sub": str(subject_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + (lifetime or self.lifetime),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError(f"Token signing failed: {exc}") from exc


class TokenVerifier:
    def __init__(self, secret: str, algorithm: str = ALGORITHM, clock: Clock = utcnow):
        self._secret = secret
        self.algorithm = algorithm
        self._clock = clock

    def verify(self, token: str) -> Claims:
        """
        Check a token's signature, then its expiry, and return its claims.

        Raises:
            InvalidToken: Malformed token, wrong algorithm, missing claims or
                signature mismatch
            Expired: Signature is valid but the token is past ``exp``
        """
        if not self._secret:
            raise InvalidToken("Token verification secret is not configured")

        # Expiry is checked below against our own clock, after the signature
        # has been accepted, so an expired token is never reported as invalid.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc

        try:
            claims = Claims(
                subject_id=int(payload["sub"]),
                email=str(payload["email"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidToken(f"Malformed claims: {exc}") from exc

        if self._clock() > claims.expires_at:
            raise Expired(f"Token expired at {claims.expires_at.isoformat()}")
        return claims
