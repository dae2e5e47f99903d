"""
Doubles match generation.

Greedy, anchor-based search over the free players of a group. For every
anchor (in ascending games-played order) all triples of later, unused
players are scored and the best quad is taken, with teams fixed as the
first two against the last two in search order.

The search is O(n^4) in the number of free players. Sessions hold tens of
players, which keeps this well under a second; larger pools need a
different algorithm rather than a faster loop.
"""

from typing import Optional, Sequence

from courtside.models.match import MatchProposal
from courtside.models.player import Player
from courtside.services.exceptions import InsufficientPlayers
from courtside.services.match_scorer import score
from courtside.utils.ids import new_id

PLAYERS_PER_MATCH = 4

# Best score an anchor must beat. Quads scoring at or below it are never
# picked, so a pool of players averaging over 50 games without the level
# bonus yields no proposals.
SCORE_FLOOR = -1


def generate(players: Sequence[Player], prefer_same_level: bool = True) -> list[MatchProposal]:
    """Propose disjoint doubles matches from the free players.

    Nothing is reserved or written: two calls before any match starts can
    propose overlapping groupings.

    Args:
        players: All players of the group; those in an active match are skipped
        prefer_same_level: Reward groupings with a narrow skill spread

    Returns:
        Up to ``floor(free / 4)`` proposals, possibly fewer

    Raises:
        InsufficientPlayers: If fewer than four players are free
    """
    available = [p for p in players if not p.in_active_match]
    if len(available) < PLAYERS_PER_MATCH:
        raise InsufficientPlayers(len(available))

    # Stable, so equal counts keep registration order
    available.sort(key=lambda p: p.games_played)

    n = len(available)
    target = n // PLAYERS_PER_MATCH
    used: set[str] = set()
    proposals: list[MatchProposal] = []

    for i in range(n - 3):
        anchor = available[i]
        if anchor.id in used:
            continue

        best: Optional[list[Player]] = None
        best_score = SCORE_FLOOR

        for j in range(i + 1, n - 2):
            if available[j].id in used:
                continue
            for k in range(j + 1, n - 1):
                if available[k].id in used:
                    continue
                for l in range(k + 1, n):
                    if available[l].id in used:
                        continue

                    quad = [anchor, available[j], available[k], available[l]]
                    candidate = score(quad, prefer_same_level)
                    if candidate > best_score:
                        best_score = candidate
                        best = quad

        if best is None:
            continue

        proposals.append(MatchProposal(
            id=new_id("match"),
            team1=[best[0].id, best[1].id],
            team2=[best[2].id, best[3].id],
            score=best_score,
        ))
        used.update(proposals[-1].player_ids)

        if len(proposals) >= target:
            break

    return proposals
