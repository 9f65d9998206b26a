from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from .exceptions import HashingError, ValidationError

DEFAULT_ROUNDS = 29000


class PasswordHasher:
    """Salted one-way hashing of user passwords."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        # Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            ValidationError: If the password is longer than the hasher accepts
            HashingError: If the underlying hash could not be computed. There is
                no fallback to a weaker scheme.
        """
        try:
            return self._context.hash(password)
        except PasswordSizeError as exc:
            raise ValidationError(f"Password rejected: {exc}", detail="Password is too long") from exc
        except (ValueError, TypeError, OSError) as exc:
            raise HashingError(f"Password hashing failed: {exc}") from exc

    def verify(self, password: str, hashed_password: str) -> bool:
        """Constant-time check of a password against a stored hash. Malformed hashes never match."""
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False
