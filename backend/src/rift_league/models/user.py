"""User account model."""

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping


@dataclass
class User:
    """A registered user.

    ``token`` is the current bearer credential; logging in replaces it.
    ``password_hash`` has the form ``pbkdf2_sha256$<iterations>$<salt>$<digest>``.
    """

    id: str
    username: str
    email: str
    token: str
    password_hash: str = ""
    is_admin: bool = False
    team_ids: list[str] = field(default_factory=list)
    league_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_public_dict(self) -> dict:
        """Serializable view without credentials."""
        data = asdict(self)
        data.pop("token")
        data.pop("password_hash")
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            token=data["token"],
            password_hash=data.get("password_hash") or "",
            is_admin=data.get("is_admin", False),
            team_ids=list(data.get("team_ids") or []),
            league_ids=list(data.get("league_ids") or []),
        )
