"""REST endpoints for trades between teams."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from rift_league.api.dependencies import get_current_user, get_trade_service
from rift_league.models.trade import Trade, TradePlayer
from rift_league.models.user import User

router = APIRouter(prefix="/api/trades", tags=["trades"])


class TradePlayerModel(BaseModel):
    id: str
    slot: str


class ProposeTradeRequest(BaseModel):
    proposing_team_id: str
    receiving_team_id: str
    proposed_players: list[TradePlayerModel] = []
    requested_players: list[TradePlayerModel] = []


def _run(action, *args) -> Trade:
    """Call a trade service action, mapping its exceptions to HTTP errors."""
    try:
        return action(*args)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", status_code=201)
def propose_trade(body: ProposeTradeRequest, request: Request, user: User = Depends(get_current_user)):
    trade = _run(
        get_trade_service(request).propose_trade,
        user,
        body.proposing_team_id,
        body.receiving_team_id,
        [TradePlayer(id=p.id, slot=p.slot) for p in body.proposed_players],
        [TradePlayer(id=p.id, slot=p.slot) for p in body.requested_players],
    )
    return trade.to_dict()


@router.get("/team/{team_id}")
def trades_for_team(team_id: str, request: Request):
    return [t.to_dict() for t in get_trade_service(request).get_trades_for_team(team_id)]


@router.get("/league/{league_id}")
def trades_for_league(league_id: str, request: Request):
    return [t.to_dict() for t in get_trade_service(request).get_trades_for_league(league_id)]


@router.get("/{trade_id}")
def get_trade(trade_id: str, request: Request):
    trade = get_trade_service(request).get_trade(trade_id)
    if trade is None:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade.to_dict()


@router.post("/{trade_id}/accept")
def accept_trade(trade_id: str, request: Request, user: User = Depends(get_current_user)):
    return _run(get_trade_service(request).accept_trade, trade_id, user).to_dict()


@router.post("/{trade_id}/reject")
def reject_trade(trade_id: str, request: Request, user: User = Depends(get_current_user)):
    return _run(get_trade_service(request).reject_trade, trade_id, user).to_dict()


@router.post("/{trade_id}/cancel")
def cancel_trade(trade_id: str, request: Request, user: User = Depends(get_current_user)):
    return _run(get_trade_service(request).cancel_trade, trade_id, user).to_dict()
