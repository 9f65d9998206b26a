"""
User storage.

``UserStore`` is the contract the rest of the service relies on; the token
and hashing code never touches storage directly. Two backends are provided:
an in-process list (the default) and a SQLAlchemy table for a real database.
"""
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .config import Settings
from .db import build_engine, build_session_factory, init_db
from .exceptions import DuplicateEmail
from .models import User

logger = logging.getLogger(__name__)


class UserStore(ABC):
    @abstractmethod
    def create(self, username: str, email: str, password_hash: str) -> User:
        """
        Persist a new user and assign its id.

        Raises:
            DuplicateEmail: If a user with this email already exists
        """

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with this exact email, or None."""


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: List[User] = []
        self._ids = itertools.count(1)
        # Serializes the duplicate check together with the insert
        self._lock = threading.Lock()

    def create(self, username: str, email: str, password_hash: str) -> User:
        with self._lock:
            if self._find(email) is not None:
                raise DuplicateEmail(f"Email already registered: {email}")
            user = User(
                id=next(self._ids),
                username=username,
                email=email,
                password_hash=password_hash,
            )
            self._users.append(user)
            return user

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._find(email)

    def _find(self, email: str) -> Optional[User]:
        for user in self._users:
            if user.email == email:
                return user
        return None

    def __len__(self) -> int:
        return len(self._users)


class SqlAlchemyUserStore(UserStore):
    """Users in a SQL table. The unique index on ``email`` arbitrates concurrent signups."""

    def __init__(self, database_url: str):
        self.engine = build_engine(database_url)
        self.SessionLocal = build_session_factory(self.engine)
        init_db(self.engine)

    def create(self, username: str, email: str, password_hash: str) -> User:
        db = self.SessionLocal()
        try:
            user = User(username=username, email=email, password_hash=password_hash)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateEmail(f"Email already registered: {email}") from exc
        finally:
            db.close()

    def find_by_email(self, email: str) -> Optional[User]:
        db = self.SessionLocal()
        try:
            return db.query(User).filter(User.email == email).first()
        finally:
            db.close()

    def __len__(self) -> int:
        db = self.SessionLocal()
        try:
            return db.query(User).count()
        finally:
            db.close()


def build_user_store(settings: Settings) -> UserStore:
    if settings.USER_STORE == "sql":
        logger.info("Using SQL user store")
        return SqlAlchemyUserStore(settings.DATABASE_URL)
    logger.info("Using in-memory user store")
    return InMemoryUserStore()
