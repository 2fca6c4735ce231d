"""Trade lifecycle: propose, accept, reject, cancel."""

import logging
import uuid
from datetime import datetime
from typing import Optional

from rift_league.models.team import BENCH_LIMIT, FantasyTeam, RosterSlot
from rift_league.models.trade import Trade, TradePlayer, TradeStatus
from rift_league.models.user import User
from rift_league.repositories.document_store import TRADES, DocumentStore
from rift_league.services.aggregate_locks import league_key, team_key
from rift_league.services.league_service import LeagueService
from rift_league.services.team_service import TeamService

logger = logging.getLogger(__name__)


class TradeService:
    """Validates and executes player trades between teams in one league."""

    def __init__(self, store: DocumentStore, team_service: TeamService, league_service: LeagueService):
        self._store = store
        self.team_service = team_service
        self.league_service = league_service
        self._trades: dict[str, Trade] = {}

    def load(self) -> int:
        self._trades = {doc["id"]: Trade.from_dict(doc) for doc in self._store.find_all(TRADES)}
        return len(self._trades)

    def _save(self, trade: Trade) -> None:
        self._trades[trade.id] = trade
        self._store.save(TRADES, trade.to_dict())

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        return self._trades.get(trade_id)

    def get_trades_for_team(self, team_id: str) -> list[Trade]:
        trades = [
            t for t in self._trades.values()
            if team_id in (t.proposing_team_id, t.receiving_team_id)
        ]
        return sorted(trades, key=lambda t: t.created_at, reverse=True)

    def get_trades_for_league(self, league_id: str) -> list[Trade]:
        trades = [t for t in self._trades.values() if t.league_id == league_id]
        return sorted(trades, key=lambda t: t.created_at, reverse=True)

    def _require_teams(self, proposing_team_id: str, receiving_team_id: str) -> tuple[FantasyTeam, FantasyTeam]:
        proposing = self.team_service.get_team(proposing_team_id)
        receiving = self.team_service.get_team(receiving_team_id)
        if proposing is None or receiving is None:
            raise LookupError("One or both teams not found")
        return proposing, receiving

    @staticmethod
    def _check_holdings(team: FantasyTeam, players: list[TradePlayer], label: str) -> None:
        for player in players:
            if not team.roster.holds(player.id, player.slot):
                raise ValueError(
                    f"Invalid {label}: player {player.id} is not in slot {player.slot} on team {team.id}"
                )

    def can_manage(self, team: FantasyTeam, user: User) -> bool:
        """Owner, league creator or admin may act for a team."""
        if user.is_admin or team.user_id == user.id:
            return True
        league = self.league_service.get_league(team.league_id) if team.league_id else None
        return league is not None and league.creator_id == user.id

    def propose_trade(
        self,
        user: User,
        proposing_team_id: str,
        receiving_team_id: str,
        proposed_players: list[TradePlayer],
        requested_players: list[TradePlayer],
    ) -> Trade:
        """Record a pending trade after validating both rosters.

        Raises:
            LookupError: If a team does not exist
            PermissionError: If ``user`` does not own the proposing team
            ValueError: If the teams are in different leagues or a player is
                not where the proposal says
        """
        if not proposed_players and not requested_players:
            raise ValueError("A trade must include at least one player")

        proposing, receiving = self._require_teams(proposing_team_id, receiving_team_id)
        if proposing.id == receiving.id:
            raise ValueError("A team cannot trade with itself")
        if proposing.user_id != user.id:
            raise PermissionError("You can only propose trades for your own team")
        if not proposing.league_id or proposing.league_id != receiving.league_id:
            raise ValueError("Teams must be in the same league to trade")

        self._check_holdings(proposing, proposed_players, "player trade")
        self._check_holdings(receiving, requested_players, "player request")

        trade = Trade(
            id=f"trade_{uuid.uuid4().hex[:12]}",
            league_id=proposing.league_id,
            proposing_team_id=proposing.id,
            receiving_team_id=receiving.id,
            proposed_players=list(proposed_players),
            requested_players=list(requested_players),
            created_by=user.id,
        )
        self._save(trade)
        logger.info(f"Trade {trade.id} proposed: {proposing.id} -> {receiving.id}")
        return trade

    def accept_trade(self, trade_id: str, user: User) -> Trade:
        """Swap the players and mark the trade accepted.

        Raises:
            LookupError: If the trade or a team does not exist
            PermissionError: If ``user`` cannot act for the receiving team
            ValueError: If the trade is not pending or rosters changed since
                it was proposed
        """
        trade = self._require_trade(trade_id)
        proposing, receiving = self._require_teams(trade.proposing_team_id, trade.receiving_team_id)
        if not self.can_manage(receiving, user):
            raise PermissionError("Unauthorized to accept this trade")

        with self.team_service.locks.hold(*self._lock_keys(trade)):
            self._require_pending(trade, "accepted")
            self._check_holdings(proposing, trade.proposed_players, "player trade")
            self._check_holdings(receiving, trade.requested_players, "player request")
            self._check_room(receiving, trade.proposed_players, trade.requested_players)
            self._check_room(proposing, trade.requested_players, trade.proposed_players)

            for player in trade.proposed_players:
                proposing.roster.remove_player(player.id)
            for player in trade.requested_players:
                receiving.roster.remove_player(player.id)
            for player in trade.proposed_players:
                receiving.roster.assign(player.slot, player.id)
            for player in trade.requested_players:
                proposing.roster.assign(player.slot, player.id)

            trade.status = TradeStatus.ACCEPTED
            trade.completed_at = datetime.now()
            self.team_service.save_team(proposing)
            self.team_service.save_team(receiving)
            self._save(trade)

        logger.info(f"Trade {trade.id} accepted by {user.id}")
        return trade

    @staticmethod
    def _check_room(team: FantasyTeam, incoming: list[TradePlayer], outgoing: list[TradePlayer]) -> None:
        """Incoming players must land in slots that are empty once ``outgoing`` leave."""
        bench_in = sum(1 for p in incoming if p.slot == RosterSlot.BENCH.value)
        bench_out = sum(1 for p in outgoing if p.slot == RosterSlot.BENCH.value)
        if len(team.roster.bench) - bench_out + bench_in > BENCH_LIMIT:
            raise ValueError(f"Trade would exceed the bench limit on team {team.id}")

        leaving = {p.id for p in outgoing}
        taken: set[str] = set()
        for player in incoming:
            if player.slot == RosterSlot.BENCH.value:
                continue
            if player.slot in taken:
                raise ValueError(f"Trade puts two players in slot {player.slot} on team {team.id}")
            taken.add(player.slot)
            occupant = next(
                (pid for slot, pid in team.roster.active_player_ids() if slot.value == player.slot),
                None,
            )
            if occupant and occupant not in leaving:
                raise ValueError(f"Slot {player.slot} is already filled on team {team.id}")

    def reject_trade(self, trade_id: str, user: User) -> Trade:
        trade = self._require_trade(trade_id)
        receiving = self.team_service.get_team(trade.receiving_team_id)
        if receiving is None:
            raise LookupError("Receiving team not found")
        if not self.can_manage(receiving, user):
            raise PermissionError("Unauthorized to reject this trade")
        return self._close(trade, TradeStatus.REJECTED)

    def cancel_trade(self, trade_id: str, user: User) -> Trade:
        trade = self._require_trade(trade_id)
        if trade.created_by != user.id and not user.is_admin:
            raise PermissionError("Only the proposer can cancel this trade")
        return self._close(trade, TradeStatus.CANCELLED)

    def _close(self, trade: Trade, status: TradeStatus) -> Trade:
        """Settle a pending trade under the same locks ``accept_trade`` takes."""
        with self.team_service.locks.hold(*self._lock_keys(trade)):
            self._require_pending(trade, status.value)
            trade.status = status
            trade.completed_at = datetime.now()
            self._save(trade)
        logger.info(f"Trade {trade.id} {status.value}")
        return trade

    @staticmethod
    def _lock_keys(trade: Trade) -> list[str]:
        """Both teams plus the trade's league, which drafts also lock."""
        keys = [team_key(trade.proposing_team_id), team_key(trade.receiving_team_id)]
        if trade.league_id:
            keys.append(league_key(trade.league_id))
        return keys

    def _require_trade(self, trade_id: str) -> Trade:
        trade = self._trades.get(trade_id)
        if trade is None:
            raise LookupError("Trade not found")
        return trade

    @staticmethod
    def _require_pending(trade: Trade, action: str) -> None:
        if not trade.is_pending:
            raise ValueError(f"Trade cannot be {action} because it is {trade.status.value}")
