"""API route definitions."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from courtside.api.dependencies import get_current_user, get_session_service
from courtside.api.schemas import (
    AddCourtRequest,
    AutoMatchRequest,
    CreateGroupRequest,
    EndMatchRequest,
    RegisterPlayerRequest,
    StartMatchRequest,
)
from courtside.services.session_service import SessionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


# =============================================================================
# GROUPS
# =============================================================================

@router.post("/groups")
def create_group(
    body: CreateGroupRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Create a group owned by the caller."""
    group = service.create_group(body.name, body.description, admin_id=user_id)
    return {"group": _dump(group)}


@router.get("/groups")
def list_groups(
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """List all groups."""
    return {"groups": [_dump(g) for g in service.list_groups()]}


@router.get("/groups/{group_id}")
def get_group(
    group_id: str,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Get a group with its players and courts."""
    return {"group": _dump(service.get_group(group_id))}


# =============================================================================
# PLAYERS
# =============================================================================

@router.post("/groups/{group_id}/players")
def register_player(
    group_id: str,
    body: RegisterPlayerRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Register a player in a group on behalf of the caller."""
    player = service.register_player(
        group_id,
        name=body.name,
        level=body.level,
        payment_method=body.payment_method,
        payment_amount=body.payment_amount,
        user_id=user_id,
    )
    return {"player": _dump(player)}


@router.get("/groups/{group_id}/players/{player_id}/reports")
def player_report(
    group_id: str,
    player_id: str,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Games, playtime (minutes), partners and opponents of a player."""
    return {"report": _dump(service.player_report(group_id, player_id))}


# =============================================================================
# COURTS
# =============================================================================

@router.post("/groups/{group_id}/courts")
def add_court(
    group_id: str,
    body: AddCourtRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Add a court. Group admin only."""
    court = service.add_court(group_id, body.name, user_id=user_id)
    return {"court": _dump(court)}


@router.delete("/groups/{group_id}/courts/{court_id}")
def remove_court(
    group_id: str,
    court_id: str,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Remove a free court. Group admin only."""
    service.remove_court(group_id, court_id, user_id=user_id)
    return {"success": True}


# =============================================================================
# MATCHES
# =============================================================================

@router.post("/groups/{group_id}/auto-match")
def auto_match(
    group_id: str,
    body: AutoMatchRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Propose matches from the group's free players. Nothing is reserved."""
    proposals = service.generate_matches(group_id, body.prefer_same_level)
    return {"matches": [_dump(p) for p in proposals]}


@router.post("/groups/{group_id}/matches")
def start_match(
    group_id: str,
    body: StartMatchRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Start a match on a court."""
    match = service.start_match(
        group_id, body.team1, body.team2, body.court_id, match_id=body.match_id
    )
    return {"match": _dump(match)}


@router.get("/groups/{group_id}/matches")
def list_active_matches(
    group_id: str,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Matches currently being played in a group."""
    return {"matches": [_dump(m) for m in service.list_active_matches(group_id)]}


@router.put("/matches/{match_id}/end")
def end_match(
    match_id: str,
    body: EndMatchRequest,
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """End a match, crediting its players and freeing the court."""
    match = service.end_match(match_id, body.group_id)
    return {"match": _dump(match)}
