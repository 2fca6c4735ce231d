"""Request-scoped access to the services held on ``app.state``."""

from typing import Optional

from fastapi import Header, HTTPException, Request

from rift_league.models.user import User
from rift_league.services.league_service import LeagueService
from rift_league.services.player_service import PlayerService
from rift_league.services.team_service import TeamService
from rift_league.services.trade_service import TradeService
from rift_league.services.user_service import UserService


def get_player_service(request: Request) -> PlayerService:
    return request.app.state.player_service


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service


def get_league_service(request: Request) -> LeagueService:
    return request.app.state.league_service


def get_trade_service(request: Request) -> TradeService:
    return request.app.state.trade_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> User:
    """Resolve the ``Authorization: Bearer <token>`` header to a user."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="No token, authorization denied")

    token = authorization.split(" ", 1)[1].strip()
    user = get_user_service(request).get_user_by_token(token)
    if user is None:
        raise HTTPException(status_code=401, detail="Token is not valid")
    return user
