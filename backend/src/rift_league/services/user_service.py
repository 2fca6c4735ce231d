"""User registration, password login and bearer-token identity."""

import hashlib
import logging
import secrets
import uuid
from typing import Optional

from rift_league.models.user import User
from rift_league.repositories.document_store import USERS, DocumentStore

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 600_000
_HASH_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Salted PBKDF2-SHA256 hash in ``scheme$iterations$salt$digest`` form."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), iterations)
    return f"{_HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iterations, salt, expected = password_hash.split("$")
        if scheme != _HASH_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), int(iterations))
    except ValueError:
        return False
    return secrets.compare_digest(digest.hex(), expected)


class UserService:
    """Registers users, checks passwords and resolves bearer tokens to users."""

    def __init__(self, store: DocumentStore, hash_iterations: int = PBKDF2_ITERATIONS):
        self._store = store
        self.hash_iterations = hash_iterations
        self._users: dict[str, User] = {}

    def load(self) -> int:
        self._users = {doc["id"]: User.from_dict(doc) for doc in self._store.find_all(USERS)}
        return len(self._users)

    def save_user(self, user: User) -> None:
        self._users[user.id] = user
        self._store.save(USERS, user.to_dict())

    def register_user(self, username: str, email: str, password: str) -> User:
        """Create a user and issue its bearer token. The first user is an admin.

        Raises:
            ValueError: If the username or email is taken, or the password is empty
        """
        if not password:
            raise ValueError("Password is required")
        if any(u.username == username or u.email == email for u in self._users.values()):
            raise ValueError("Username or email already exists")

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            token=secrets.token_urlsafe(32),
            password_hash=hash_password(password, self.hash_iterations),
            is_admin=not self._users,
        )
        self.save_user(user)
        logger.info(f"Registered user {user.id} ({username})")
        return user

    def login_user(self, username: str, password: str) -> Optional[User]:
        """Check credentials and issue a fresh token, invalidating the old one.

        Returns:
            The user, or None when the username is unknown or the password is wrong
        """
        user = self.get_user_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {username}")
            return None

        user.token = secrets.token_urlsafe(32)
        self.save_user(user)
        logger.info(f"User {user.id} logged in")
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def get_user_by_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        return next(
            (u for u in self._users.values() if secrets.compare_digest(u.token, token)),
            None,
        )

    def link_team(self, user_id: str, team_id: str) -> None:
        user = self._users.get(user_id)
        if user and team_id not in user.team_ids:
            user.team_ids.append(team_id)
            self.save_user(user)

    def link_league(self, user_id: str, league_id: str) -> None:
        user = self._users.get(user_id)
        if user and league_id not in user.league_ids:
            user.league_ids.append(league_id)
            self.save_user(user)
