"""
Tests for the in-memory and SQL user stores.
"""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from stateless_auth.stateless_auth.auth_service.config import Settings
from stateless_auth.stateless_auth.auth_service.exceptions import DuplicateEmail
from stateless_auth.stateless_auth.auth_service.store import (
    InMemoryUserStore,
    SqlAlchemyUserStore,
    build_user_store,
)


@pytest.fixture
def sql_url(tmp_path):
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture(params=["memory", "sql"])
def any_store(request, sql_url):
    if request.param == "sql":
        return SqlAlchemyUserStore(sql_url)
    return InMemoryUserStore()


def test_create_assigns_increasing_ids(any_store):
    first = any_store.create("alice", "alice@example.com", "hash-a")
    second = any_store.create("bob", "bob@example.com", "hash-b")

    assert first.id == 1
    assert second.id == 2


def test_find_by_email(any_store):
    any_store.create("alice", "alice@example.com", "hash-a")

    user = any_store.find_by_email("alice@example.com")

    assert user is not None
    assert user.username == "alice"
    assert user.password_hash == "hash-a"


def test_find_unknown_email_returns_none(any_store):
    assert any_store.find_by_email("nobody@example.com") is None


def test_duplicate_email_rejected(any_store):
    any_store.create("alice", "a@x.com", "hash-a")

    with pytest.raises(DuplicateEmail):
        any_store.create("alice2", "a@x.com", "hash-b")

    assert len(any_store) == 1
    assert any_store.find_by_email("a@x.com").username == "alice"


def test_email_match_is_case_sensitive(any_store):
    any_store.create("lower", "a@x.com", "hash-a")
    any_store.create("upper", "A@x.com", "hash-b")

    assert any_store.find_by_email("A@x.com").username == "upper"
    assert len(any_store) == 2


def test_user_dict_hides_password_hash(any_store):
    user = any_store.create("alice", "a@x.com", "hash-a")
    assert user.to_dict() == {"id": 1, "username": "alice", "email": "a@x.com"}


def test_in_memory_concurrent_creates_have_one_winner():
    store = InMemoryUserStore()
    barrier = threading.Barrier(8)

    def attempt(i):
        barrier.wait()
        try:
            store.create(f"user{i}", "race@x.com", f"hash-{i}")
            return True
        except DuplicateEmail:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(8)))

    assert results.count(True) == 1
    assert len(store) == 1


def test_sql_store_persists_across_instances(sql_url):
    SqlAlchemyUserStore(sql_url).create("alice", "a@x.com", "hash-a")

    reopened = SqlAlchemyUserStore(sql_url)

    assert reopened.find_by_email("a@x.com").id == 1
    with pytest.raises(DuplicateEmail):
        reopened.create("alice", "a@x.com", "hash-b")


def test_build_user_store_defaults_to_memory():
    store = build_user_store(Settings(_env_file=None))
    assert isinstance(store, InMemoryUserStore)


def test_build_user_store_sql(sql_url):
    store = build_user_store(Settings(_env_file=None, USER_STORE="sql", DATABASE_URL=sql_url))
    assert isinstance(store, SqlAlchemyUserStore)
