"""REST endpoints for leagues: membership, draft, schedule, scores and standings."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from rift_league.api.dependencies import (
    get_current_user,
    get_league_service,
    get_player_service,
    get_team_service,
    get_user_service,
)
from rift_league.config import settings
from rift_league.models.league import League
from rift_league.models.user import User
from rift_league.services.stats_provider_client import StatsProviderError
from rift_league.utils.role_normalizer import sort_by_role

router = APIRouter(prefix="/api/leagues", tags=["leagues"])


class CreateLeagueRequest(BaseModel):
    name: str
    max_teams: int = Field(default=settings.default_max_teams, ge=2)
    description: str = ""
    is_public: bool = True
    regions: Optional[list[str]] = None


class JoinLeagueRequest(BaseModel):
    team_name: str


class ScheduleRequest(BaseModel):
    weeks: int = Field(default=settings.default_weeks_per_season, ge=1)


class DraftPickRequest(BaseModel):
    team_id: str
    player_id: str
    slot: str


def _require_league(request: Request, league_id: str) -> League:
    league = get_league_service(request).get_league(league_id)
    if league is None:
        raise HTTPException(status_code=404, detail="League not found")
    return league


def _require_commissioner(league: League, user: User) -> None:
    if not user.is_admin and league.creator_id != user.id:
        raise HTTPException(status_code=403, detail="Only the league creator can do this")


@router.post("", status_code=201)
def create_league(body: CreateLeagueRequest, request: Request, user: User = Depends(get_current_user)):
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="League name is required")

    service = get_league_service(request)
    if service.get_league_by_name(name):
        raise HTTPException(status_code=400, detail="League name already exists")

    league = service.create_league(
        name,
        max_teams=body.max_teams,
        creator_id=user.id,
        description=body.description,
        is_public=body.is_public,
        regions=body.regions,
    )
    get_user_service(request).link_league(user.id, league.id)
    return league.to_dict()


@router.get("")
def list_leagues(request: Request):
    return [lg.to_dict() for lg in get_league_service(request).get_all_leagues() if lg.is_public]


@router.get("/mine")
def my_leagues(request: Request, user: User = Depends(get_current_user)):
    return [lg.to_dict() for lg in get_league_service(request).get_leagues_by_user(user.id)]


@router.get("/{league_id}")
def get_league(league_id: str, request: Request):
    league = _require_league(request, league_id)
    teams = get_league_service(request).get_league_teams(league_id)
    return {**league.to_dict(), "team_details": [t.to_dict() for t in teams]}


@router.post("/{league_id}/join", status_code=201)
def join_league(
    league_id: str,
    body: JoinLeagueRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    if not body.team_name.strip():
        raise HTTPException(status_code=400, detail="Team name is required")

    try:
        team = get_league_service(request).join_league(
            league_id, user.id, user.username, body.team_name.strip()
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    user_service = get_user_service(request)
    user_service.link_league(user.id, league_id)
    user_service.link_team(user.id, team.id)
    return team.to_dict()


@router.delete("/{league_id}", status_code=204)
def delete_league(league_id: str, request: Request, user: User = Depends(get_current_user)):
    """Delete a league together with its teams."""
    league = _require_league(request, league_id)
    _require_commissioner(league, user)
    get_league_service(request).delete_league(league_id)


@router.post("/{league_id}/teams/{team_id}")
def add_team(league_id: str, team_id: str, request: Request, user: User = Depends(get_current_user)):
    """Bring one of the caller's unattached teams into a league."""
    league = _require_league(request, league_id)
    team = get_team_service(request).get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    if team.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Unauthorized to move this team")
    if team.league_id:
        raise HTTPException(status_code=400, detail="Team already belongs to a league")

    if not get_league_service(request).add_team_to_league(league_id, team_id):
        raise HTTPException(
            status_code=400,
            detail=f"League is full ({len(league.teams)}/{league.max_teams})",
        )
    if team.user_id:
        get_user_service(request).link_league(team.user_id, league_id)
    return team.to_dict()


@router.delete("/{league_id}/teams/{team_id}")
def remove_team(league_id: str, team_id: str, request: Request, user: User = Depends(get_current_user)):
    """Take a team out of a league; its owner or the commissioner may do this."""
    league = _require_league(request, league_id)
    team = get_team_service(request).get_team(team_id)
    if team is None or team_id not in league.teams:
        raise HTTPException(status_code=404, detail="Team not in this league")
    if team.user_id != user.id:
        _require_commissioner(league, user)

    service = get_league_service(request)
    service.remove_team_from_league(league_id, team_id)
    teams = service.get_league_teams(league_id)
    return {**league.to_dict(), "team_details": [t.to_dict() for t in teams]}


@router.post("/{league_id}/player-pool/refresh")
def refresh_player_pool(league_id: str, request: Request, user: User = Depends(get_current_user)):
    """Rebuild the pool from the league's regions after the catalogue changed."""
    league = _require_league(request, league_id)
    _require_commissioner(league, user)
    size = get_league_service(request).refresh_player_pool(league_id)
    return {"player_pool_size": size, "player_pool": league.player_pool}


@router.post("/{league_id}/draft")
def draft_player(
    league_id: str,
    body: DraftPickRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    """Draft a pool player onto a team; each player goes to one team per league."""
    league = _require_league(request, league_id)
    team = get_team_service(request).get_team(body.team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    if team.user_id != user.id:
        _require_commissioner(league, user)

    try:
        team = get_league_service(request).draft_player(
            league_id, body.team_id, body.player_id, body.slot
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return team.to_dict()


@router.get("/{league_id}/draft")
def draft_status(league_id: str, request: Request):
    """Players still available and how many scoring slots each team has filled."""
    league = _require_league(request, league_id)
    status = get_league_service(request).get_draft_status(league_id)
    player_service = get_player_service(request)
    available = [player_service.get_player(pid) for pid in status.available_player_ids]
    teams = get_league_service(request).get_league_teams(league_id)
    return {
        "league_id": league.id,
        "available_players": sort_by_role([p.to_dict() for p in available if p is not None]),
        "team_draft_counts": [
            {
                "id": t.id,
                "name": t.name,
                "owner": t.owner,
                "drafted_count": status.picks_by_team.get(t.id, 0),
            }
            for t in teams
        ],
        "draft_complete": status.is_complete,
    }


@router.post("/{league_id}/schedule")
def generate_schedule(
    league_id: str,
    body: ScheduleRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    league = _require_league(request, league_id)
    _require_commissioner(league, user)

    if not get_league_service(request).generate_schedule(league_id, body.weeks):
        raise HTTPException(
            status_code=400,
            detail=f"Need an even number of teams to schedule, have {len(league.teams)}",
        )
    return {"schedule": league.to_dict()["schedule"]}


@router.get("/{league_id}/schedule")
def get_schedule(league_id: str, request: Request):
    return {"schedule": _require_league(request, league_id).to_dict()["schedule"]}


@router.get("/{league_id}/matchups/{week}")
def week_matchups(league_id: str, week: int, request: Request):
    _require_league(request, league_id)
    matchups = get_league_service(request).get_week_matchups(league_id, week)
    return {"week": week, "matchups": [vars(m) for m in matchups]}


@router.post("/{league_id}/weeks/{week}/calculate")
def calculate_week(
    league_id: str,
    week: int,
    request: Request,
    user: User = Depends(get_current_user),
):
    league = _require_league(request, league_id)
    _require_commissioner(league, user)

    service = get_league_service(request)
    if not service.calculate_week_scores(league_id, week):
        raise HTTPException(status_code=400, detail=f"Invalid week: {week}")
    return {
        "week": week,
        "matchups": [vars(m) for m in service.get_week_matchups(league_id, week)],
        "standings": [vars(s) for s in league.standings],
    }


@router.get("/{league_id}/standings")
def standings(league_id: str, request: Request):
    _require_league(request, league_id)
    return {"standings": [vars(s) for s in get_league_service(request).update_standings(league_id)]}


@router.post("/{league_id}/advance-week")
def advance_week(league_id: str, request: Request, user: User = Depends(get_current_user)):
    league = _require_league(request, league_id)
    _require_commissioner(league, user)
    return {"current_week": get_league_service(request).advance_week(league_id)}


@router.post("/{league_id}/update-stats")
async def update_stats(league_id: str, request: Request, user: User = Depends(get_current_user)):
    """Pull fresh stats for the league's player pool and re-score completed weeks."""
    league = _require_league(request, league_id)
    _require_commissioner(league, user)

    updater = getattr(request.app.state, "stats_updater", None)
    if updater is None:
        raise HTTPException(status_code=503, detail="Stats provider is not configured")

    try:
        updated = await updater.update_league(league_id)
    except StatsProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"updated_players": updated, "standings": [vars(s) for s in league.standings]}
