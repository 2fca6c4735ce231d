"""REST endpoints for fantasy teams and rosters."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from rift_league.api.dependencies import (
    get_current_user,
    get_league_service,
    get_team_service,
    get_user_service,
)
from rift_league.models.team import FantasyTeam
from rift_league.models.user import User

router = APIRouter(prefix="/api/teams", tags=["teams"])


class CreateTeamRequest(BaseModel):
    name: str
    league_id: str | None = None


class AddPlayerRequest(BaseModel):
    player_id: str
    slot: str


def _require_team(request: Request, team_id: str) -> FantasyTeam:
    team = get_team_service(request).get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def _require_manager(request: Request, team: FantasyTeam, user: User) -> None:
    """Owner, league creator or admin may change a roster."""
    if user.is_admin or team.user_id == user.id:
        return
    league = get_league_service(request).get_league(team.league_id) if team.league_id else None
    if league is None or league.creator_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized to modify this team")


@router.post("", status_code=201)
def create_team(body: CreateTeamRequest, request: Request, user: User = Depends(get_current_user)):
    """Create a team, joining ``league_id`` when given."""
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Team name is required")

    if body.league_id:
        try:
            team = get_league_service(request).join_league(
                body.league_id, user.id, user.username, body.name.strip()
            )
        except LookupError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        get_user_service(request).link_league(user.id, body.league_id)
    else:
        team = get_team_service(request).create_team(body.name.strip(), user.username, user.id)

    get_user_service(request).link_team(user.id, team.id)
    return team.to_dict()


@router.get("/mine")
def my_teams(request: Request, user: User = Depends(get_current_user)):
    return [t.to_dict() for t in get_team_service(request).get_teams_by_user(user.id)]


@router.get("/{team_id}")
def get_team(team_id: str, request: Request):
    return _require_team(request, team_id).to_dict()


@router.post("/{team_id}/players")
def add_player(
    team_id: str,
    body: AddPlayerRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    """Add a player to a roster. Teams in a league go through the draft rules."""
    team = _require_team(request, team_id)
    _require_manager(request, team, user)

    if team.league_id:
        try:
            get_league_service(request).draft_player(
                team.league_id, team_id, body.player_id, body.slot
            )
        except LookupError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    elif not get_team_service(request).add_player_to_team(team_id, body.player_id, body.slot):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot place player {body.player_id} in slot {body.slot}",
        )
    return team.to_dict()


@router.delete("/{team_id}/players/{player_id}")
def remove_player(
    team_id: str,
    player_id: str,
    request: Request,
    user: User = Depends(get_current_user),
):
    team = _require_team(request, team_id)
    _require_manager(request, team, user)

    if not get_team_service(request).remove_player_from_team(team_id, player_id):
        raise HTTPException(status_code=404, detail="Player not on this team")
    return team.to_dict()


@router.get("/{team_id}/export")
def export_team(team_id: str, request: Request):
    """Download the team's active roster as CSV."""
    csv = get_team_service(request).export_team_csv(team_id)
    if csv is None:
        raise HTTPException(status_code=404, detail="Team not found")
    return Response(
        content=csv,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{team_id}.csv"'},
    )
