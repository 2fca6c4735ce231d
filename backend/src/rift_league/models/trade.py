"""Trade proposal model."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class TradeStatus(str, Enum):
    """Lifecycle of a trade proposal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


@dataclass
class TradePlayer:
    """A player offered or requested in a trade, with the slot they occupy."""

    id: str
    slot: str


@dataclass
class Trade:
    """A proposed swap of players between two teams in the same league."""

    id: str
    league_id: str
    proposing_team_id: str
    receiving_team_id: str
    proposed_players: list[TradePlayer]
    requested_players: list[TradePlayer]
    created_by: str
    status: TradeStatus = TradeStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == TradeStatus.PENDING

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = self.created_at.isoformat()
        data["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Trade":
        completed_at = data.get("completed_at")
        return cls(
            id=data["id"],
            league_id=data["league_id"],
            proposing_team_id=data["proposing_team_id"],
            receiving_team_id=data["receiving_team_id"],
            proposed_players=[TradePlayer(**p) for p in data.get("proposed_players") or []],
            requested_players=[TradePlayer(**p) for p in data.get("requested_players") or []],
            created_by=data["created_by"],
            status=TradeStatus(data.get("status", TradeStatus.PENDING.value)),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
        )
