"""
Shared fixtures for the auth service tests.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from stateless_auth.stateless_auth.auth_service.auth import PasswordHasher
from stateless_auth.stateless_auth.auth_service.config import Settings
from stateless_auth.stateless_auth.auth_service.gate import AuthGate
from stateless_auth.stateless_auth.auth_service.main import create_app
from stateless_auth.stateless_auth.auth_service.store import InMemoryUserStore
from stateless_auth.stateless_auth.auth_service.tokens import TokenIssuer, TokenVerifier

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

# Lowest allowed cost keeps the suite fast
TEST_HASH_ROUNDS = 1000


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=TEST_HASH_ROUNDS)


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def issuer(secret, clock):
    return TokenIssuer(secret, clock=clock)


@pytest.fixture
def verifier(secret, clock):
    return TokenVerifier(secret, clock=clock)


@pytest.fixture
def gate(store, hasher, issuer, verifier):
    return AuthGate(store=store, hasher=hasher, issuer=issuer, verifier=verifier)


@pytest.fixture
def settings(secret):
    return Settings(_env_file=None, JWT_SECRET=secret, PASSWORD_HASH_ROUNDS=TEST_HASH_ROUNDS)


@pytest.fixture
def client(settings, gate):
    with TestClient(create_app(settings, gate=gate)) as c:
        yield c
