"""REST endpoints for the professional player catalogue."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from rift_league.api.dependencies import get_current_user, get_player_service
from rift_league.models.user import User
from rift_league.utils.role_normalizer import sort_by_role

router = APIRouter(prefix="/api/players", tags=["players"])


class GameStatsRequest(BaseModel):
    """One game's stat line for a player."""

    kills: float = 0
    deaths: float = 0
    assists: float = 0
    cs: float = 0
    vision_score: float = 0
    baron_kills: float = 0
    dragon_kills: float = 0
    turret_kills: float = 0
    week: Optional[int] = None


@router.get("")
def list_players(request: Request):
    return sort_by_role([p.to_dict() for p in get_player_service(request).get_all_players()])


@router.get("/region/{region}")
def players_by_region(region: str, request: Request):
    return sort_by_role([p.to_dict() for p in get_player_service(request).get_players_by_region(region)])


@router.get("/position/{position}")
def players_by_position(position: str, request: Request):
    return [p.to_dict() for p in get_player_service(request).get_players_by_position(position)]


@router.get("/{player_id}")
def get_player(player_id: str, request: Request):
    player = get_player_service(request).get_player(player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return player.to_dict()


@router.post("/{player_id}/stats")
def update_player_stats(
    player_id: str,
    body: GameStatsRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    """Credit one game to a player (admin only)."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")

    service = get_player_service(request)
    points = service.update_player_stats(player_id, body.model_dump(exclude_none=True))
    if points is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return {"points": points, "player": service.get_player(player_id).to_dict()}
