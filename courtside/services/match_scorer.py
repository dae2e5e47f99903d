"""Scoring of candidate doubles groupings."""

from typing import Sequence

from courtside.models.player import Player, level_priority

# Games-played anchor: a quad averaging this many games gets no rest bonus
GAMES_BASELINE = 50
GAMES_WEIGHT = 2

# Widest possible priority spread is P(6) - unknown(0)
MAX_LEVEL_SPREAD = 6
LEVEL_WEIGHT = 10


def score(players: Sequence[Player], prefer_same_level: bool) -> float:
    """Score a candidate four-player grouping. Higher is better.

    Players who have played fewer games raise the score. When
    ``prefer_same_level`` is set, a narrow spread of skill levels adds up to
    60 more points. The rest term goes negative once the average passes 50
    games; relative ordering is unaffected.

    Args:
        players: The four candidate players
        prefer_same_level: Whether to reward tight skill clustering

    Returns:
        Score of the grouping
    """
    avg_games = sum(p.games_played for p in players) / len(players)
    total = (GAMES_BASELINE - avg_games) * GAMES_WEIGHT

    if prefer_same_level:
        priorities = [level_priority(p.level) for p in players]
        spread = max(priorities) - min(priorities)
        total += (MAX_LEVEL_SPREAD - spread) * LEVEL_WEIGHT

    return total
