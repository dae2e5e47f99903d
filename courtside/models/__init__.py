"""Data models for the badminton session manager."""

from courtside.models.player import Player, SkillLevel, Payment, PaymentMethod, level_priority
from courtside.models.court import Court
from courtside.models.group import Group
from courtside.models.match import Match, MatchStatus, MatchProposal
from courtside.models.report import PlayerReport

__all__ = [
    "Player", "SkillLevel", "Payment", "PaymentMethod", "level_priority",
    "Court", "Group", "Match", "MatchStatus", "MatchProposal", "PlayerReport",
]
