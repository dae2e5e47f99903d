"""
Match start/end state transitions.

Operates on an already loaded group aggregate and mutates it in place;
loading, locking and persisting are the caller's job (see SessionService).

    match:  proposed -> active -> completed
    court:  available <-> occupied
    player: free <-> in active match

Every check runs before the first mutation, so a failed call leaves the
group untouched.
"""

from datetime import datetime
from typing import Optional, Sequence

from courtside.models.group import Group
from courtside.models.match import Match, MatchStatus
from courtside.services.exceptions import (
    CourtNotFound,
    CourtOccupied,
    InvalidTeams,
    MatchAlreadyCompleted,
    MatchNotFound,
    PlayerBusy,
    PlayerNotFound,
)
from courtside.utils.ids import new_id


def _check_teams(team1: Sequence[str], team2: Sequence[str]) -> None:
    if len(team1) != 2 or len(team2) != 2:
        raise InvalidTeams("Each team must have exactly two players")
    if len(set(team1) | set(team2)) != 4:
        raise InvalidTeams("A player cannot appear twice in a match")


def start_match(
    group: Group,
    team1: Sequence[str],
    team2: Sequence[str],
    court_id: str,
    now: datetime,
    match_id: Optional[str] = None,
) -> Match:
    """Put four players on a court.

    Args:
        group: Loaded group aggregate (mutated)
        team1: Two player ids
        team2: Two player ids
        court_id: Court to play on
        now: Start timestamp
        match_id: Id to use, e.g. the id of the accepted proposal

    Returns:
        The new active match

    Raises:
        InvalidTeams: If the teams are not two disjoint pairs
        CourtNotFound: If the court is not in the group
        PlayerNotFound: If a player is not in the group
        CourtOccupied: If the court already hosts a match
        PlayerBusy: If a player is already in an active match
    """
    _check_teams(team1, team2)

    court = group.find_court(court_id)
    if court is None:
        raise CourtNotFound(court_id)

    players = []
    for player_id in [*team1, *team2]:
        player = group.find_player(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        players.append(player)

    if court.is_occupied:
        raise CourtOccupied(f"Court {court.name} is already in use by {court.current_match}")
    busy = [p.name for p in players if p.in_active_match]
    if busy:
        raise PlayerBusy(f"Already playing: {', '.join(busy)}")

    match = Match(
        id=match_id or new_id("match"),
        group_id=group.id,
        team1=list(team1),
        team2=list(team2),
        court_id=court_id,
        start_time=now,
        status=MatchStatus.ACTIVE,
    )

    court.occupy(match.id)
    for player in players:
        player.in_active_match = True

    return match


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Milliseconds between two timestamps, clamped at zero for clock skew."""
    return max(0, int((end - start).total_seconds() * 1000))


def end_match(match: Match, group: Group, now: datetime) -> Match:
    """Finish a match and credit its players.

    Each player found in the group gets one more game, the match duration
    added to their playtime, and their partner/opponent sets extended.
    Players or a court that have since left the group are skipped.

    Args:
        match: Active match (mutated)
        group: Loaded group aggregate (mutated)
        now: End timestamp

    Returns:
        The completed match

    Raises:
        MatchNotFound: If the match belongs to another group
        MatchAlreadyCompleted: If the match is not active
    """
    if match.group_id is not None and match.group_id != group.id:
        raise MatchNotFound(match.id)
    if not match.is_active:
        raise MatchAlreadyCompleted(f"Match {match.id} is {match.status.value}, not active")

    duration = elapsed_ms(match.start_time, now)
    match.end_time = now
    match.status = MatchStatus.COMPLETED

    for player_id in match.player_ids:
        player = group.find_player(player_id)
        if player is None:
            continue
        player.games_played += 1
        player.total_playtime += duration
        player.in_active_match = False
        player.partners.update(match.teammates_of(player_id))
        player.opponents.update(match.opponents_of(player_id))

    court = group.find_court(match.court_id)
    if court is not None and court.current_match in (match.id, None):
        court.release()

    return match
