"""Tests for user registration, login and token lookup."""

import pytest

from rift_league.repositories.document_store import USERS, DocumentStore
from rift_league.services.user_service import UserService, hash_password, verify_password

# Keep hashing cheap in tests
ITERATIONS = 1_000


@pytest.fixture
def store():
    store = DocumentStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def service(store):
    return UserService(store, hash_iterations=ITERATIONS)


def test_first_user_is_admin(service):
    first = service.register_user("alice", "alice@example.com", "pw-alice")
    second = service.register_user("bob", "bob@example.com", "pw-bob")
    assert first.is_admin
    assert not second.is_admin


def test_tokens_are_unique(service):
    a = service.register_user("alice", "alice@example.com", "pw")
    b = service.register_user("bob", "bob@example.com", "pw")
    assert a.token and b.token and a.token != b.token


def test_duplicate_username_or_email_rejected(service):
    service.register_user("alice", "alice@example.com", "pw")
    with pytest.raises(ValueError):
        service.register_user("alice", "other@example.com", "pw")
    with pytest.raises(ValueError):
        service.register_user("other", "alice@example.com", "pw")


def test_empty_password_rejected(service):
    with pytest.raises(ValueError, match="Password"):
        service.register_user("alice", "alice@example.com", "")


def test_token_lookup(service):
    user = service.register_user("alice", "alice@example.com", "pw")
    assert service.get_user_by_token(user.token) == user
    assert service.get_user_by_token("wrong") is None
    assert service.get_user_by_token("") is None


class TestPasswords:
    def test_hash_is_salted_and_verifies(self):
        first = hash_password("hunter2", ITERATIONS)
        second = hash_password("hunter2", ITERATIONS)
        assert first != second
        assert first.startswith(f"pbkdf2_sha256${ITERATIONS}$")
        assert verify_password("hunter2", first)
        assert not verify_password("hunter3", first)

    @pytest.mark.parametrize("stored", ["", "plain-text", "md5$1$00$00", "pbkdf2_sha256$x$zz$00"])
    def test_malformed_hash_never_verifies(self, stored):
        assert not verify_password("anything", stored)

    def test_password_is_not_stored_in_clear(self, service, store):
        user = service.register_user("alice", "alice@example.com", "hunter2")
        doc = store.get(USERS, user.id)
        assert "hunter2" not in doc["password_hash"]
        assert verify_password("hunter2", doc["password_hash"])


class TestLogin:
    def test_login_issues_new_token(self, service):
        user = service.register_user("alice", "alice@example.com", "hunter2")
        old_token = user.token

        logged_in = service.login_user("alice", "hunter2")
        assert logged_in is user
        assert logged_in.token != old_token
        assert service.get_user_by_token(old_token) is None
        assert service.get_user_by_token(logged_in.token) is user

    def test_wrong_password_or_unknown_user(self, service):
        user = service.register_user("alice", "alice@example.com", "hunter2")
        token = user.token
        assert service.login_user("alice", "wrong") is None
        assert service.login_user("nobody", "hunter2") is None
        assert user.token == token

    def test_login_survives_reload(self, service, store):
        service.register_user("alice", "alice@example.com", "hunter2")
        reloaded = UserService(store, hash_iterations=ITERATIONS)
        reloaded.load()
        assert reloaded.login_user("alice", "hunter2") is not None


def test_links_are_persisted_once(service, store):
    user = service.register_user("alice", "alice@example.com", "pw")
    service.link_team(user.id, "team_1")
    service.link_team(user.id, "team_1")
    service.link_league(user.id, "league_1")

    doc = store.get(USERS, user.id)
    assert doc["team_ids"] == ["team_1"]
    assert doc["league_ids"] == ["league_1"]


def test_reload(service, store):
    user = service.register_user("alice", "alice@example.com", "pw")
    reloaded = UserService(store)
    assert reloaded.load() == 1
    assert reloaded.get_user_by_username("alice").id == user.id
    public = reloaded.get_user(user.id).to_public_dict()
    assert "token" not in public
    assert "password_hash" not in public
