"""
Session Service - the single entry point for every session operation.

Each mutating operation is one read-modify-write of the group aggregate,
serialized per group with GroupLocks and checked against the stored
version on save. Matchmaking only reads and takes no lock, so its
proposals can be stale by the time one is started.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, List, Sequence

from courtside.models.court import Court
from courtside.models.group import Group
from courtside.models.match import Match, MatchProposal, MatchStatus
from courtside.models.player import Payment, PaymentMethod, Player, SkillLevel
from courtside.models.report import PlayerReport
from courtside.services import match_generator, match_lifecycle
from courtside.services.exceptions import (
    CourtNotFound,
    CourtOccupied,
    NotGroupAdmin,
    PlayerNotFound,
    StaleAggregate,
    StoreFailure,
)
from courtside.services.locks import GroupLocks
from courtside.services.repository import MATCH_PREFIX, SessionRepository
from courtside.storage import DatabaseInterface, get_database
from courtside.utils.ids import new_id
from courtside import config

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER = "Unknown"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """
    Service layer for groups, players, courts and matches.
    Uses the store interface for persistence; the backend comes from DB_TYPE.
    """

    def __init__(
        self,
        db: Optional[DatabaseInterface] = None,
        locks: Optional[GroupLocks] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.db: DatabaseInterface = db if db is not None else get_database()
        self.repository = SessionRepository(self.db)
        self.locks = locks or GroupLocks()
        self.clock = clock

    # =========================================================================
    # GROUPS
    # =========================================================================

    def create_group(self, name: str, description: str, admin_id: str) -> Group:
        """Create an empty group owned by admin_id."""
        group = Group(
            id=new_id("group"),
            name=name,
            description=description,
            admin_id=admin_id,
            created_at=self.clock(),
        )
        self.repository.save_group(group)
        logger.info(f"Created group {group.id} ({name}) for admin {admin_id}")
        return group

    def list_groups(self) -> List[Group]:
        return self.repository.list_groups()

    def get_group(self, group_id: str) -> Group:
        return self.repository.get_group(group_id)

    def _require_admin(self, group: Group, user_id: str) -> None:
        if group.admin_id != user_id:
            raise NotGroupAdmin(f"Only the group admin can manage courts of {group.id}")

    # =========================================================================
    # PLAYERS
    # =========================================================================

    def register_player(
        self,
        group_id: str,
        name: str,
        level: SkillLevel,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        payment_amount: float = 0,
        user_id: Optional[str] = None,
    ) -> Player:
        """Add a player to a group with zeroed statistics."""
        with self.locks.hold(group_id):
            group = self.repository.get_group(group_id)
            player = Player(
                id=new_id("player"),
                name=name,
                level=level,
                payment=Payment(method=payment_method, amount=payment_amount),
                user_id=user_id,
                registered_at=self.clock(),
            )
            group.players.append(player)
            self.repository.save_group(group)

        logger.info(f"Registered player {player.id} ({name}, {player.level.value}) in {group_id}")
        return player

    def player_report(self, group_id: str, player_id: str) -> PlayerReport:
        """
        Summarize a player's session.

        Partner and opponent ids are resolved to names; ids of players no
        longer in the group show as "Unknown".
        """
        group = self.repository.get_group(group_id)
        player = group.find_player(player_id)
        if player is None:
            raise PlayerNotFound(player_id)

        def names(ids: Sequence[str]) -> List[str]:
            resolved = []
            for other_id in ids:
                other = group.find_player(other_id)
                resolved.append(other.name if other else UNKNOWN_PLAYER)
            return sorted(resolved)

        return PlayerReport(
            player_name=player.name,
            games_played=player.games_played,
            total_playtime=round(player.total_playtime / (1000 * 60)),
            partners=names(player.partners),
            opponents=names(player.opponents),
            level=player.level,
        )

    # =========================================================================
    # COURTS
    # =========================================================================

    def add_court(self, group_id: str, name: str, user_id: str) -> Court:
        """Add a free court. Admin only."""
        with self.locks.hold(group_id):
            group = self.repository.get_group(group_id)
            self._require_admin(group, user_id)
            court = Court(id=new_id("court"), name=name)
            group.courts.append(court)
            self.repository.save_group(group)

        logger.info(f"Added court {court.id} ({name}) to {group_id}")
        return court

    def remove_court(self, group_id: str, court_id: str, user_id: str) -> None:
        """
        Remove a court. Admin only.

        Raises:
            CourtNotFound: If the court is not in the group
            CourtOccupied: If a match is being played on it
        """
        with self.locks.hold(group_id):
            group = self.repository.get_group(group_id)
            self._require_admin(group, user_id)
            court = group.find_court(court_id)
            if court is None:
                raise CourtNotFound(court_id)
            if court.is_occupied:
                raise CourtOccupied(f"Court {court.name} has a match in progress")
            group.courts = [c for c in group.courts if c.id != court_id]
            self.repository.save_group(group)

        logger.info(f"Removed court {court_id} from {group_id}")

    # =========================================================================
    # MATCHES
    # =========================================================================

    def generate_matches(
        self,
        group_id: str,
        prefer_same_level: Optional[bool] = None
    ) -> List[MatchProposal]:
        """
        Propose matches from the group's free players.

        Raises:
            GroupNotFound: If the group does not exist
            InsufficientPlayers: If fewer than four players are free
        """
        if prefer_same_level is None:
            prefer_same_level = config.DEFAULT_PREFER_SAME_LEVEL
        group = self.repository.get_group(group_id)
        proposals = match_generator.generate(group.players, prefer_same_level)
        logger.debug(f"Generated {len(proposals)} proposals for {group_id}")
        return proposals

    def start_match(
        self,
        group_id: str,
        team1: Sequence[str],
        team2: Sequence[str],
        court_id: str,
        match_id: Optional[str] = None,
    ) -> Match:
        """
        Start a match on a court.

        ``match_id`` (the id of an accepted proposal) is only kept if it is a
        match id with nothing stored under it yet; otherwise a fresh id is used.

        The match record is written before the group so an interrupted start
        never leaves players flagged against a match that was not saved. If
        the group write fails, the match record is marked cancelled.
        """
        with self.locks.hold(group_id):
            group = self.repository.get_group(group_id)
            match = match_lifecycle.start_match(
                group, team1, team2, court_id, now=self.clock(),
                match_id=self._usable_match_id(match_id),
            )
            self.repository.save_match(match)
            try:
                self.repository.save_group(group)
            except (StoreFailure, StaleAggregate):
                self._cancel(match)
                raise

        logger.info(f"Started {match.id} on {court_id} in {group_id}: {team1} vs {team2}")
        return match

    def _usable_match_id(self, match_id: Optional[str]) -> Optional[str]:
        if match_id is None:
            return None
        if not match_id.startswith(MATCH_PREFIX) or self.repository.has_record(match_id):
            logger.warning(f"Ignoring requested match id {match_id}")
            return None
        return match_id

    def _cancel(self, match: Match) -> None:
        match.status = MatchStatus.CANCELLED
        match.end_time = self.clock()
        try:
            self.repository.save_match(match)
        except StoreFailure:
            logger.error(f"Could not cancel {match.id}; it stays active without its group")
        else:
            logger.warning(f"Cancelled {match.id} after the group write failed")

    def end_match(self, match_id: str, group_id: str) -> Match:
        """
        End an active match, crediting its players and freeing its court.

        Writes the match first, then the group. A crash in between leaves
        the match completed with stale player/court state in the group.

        Raises:
            MatchNotFound: If the match does not exist or belongs to another group
            GroupNotFound: If the group does not exist
            MatchAlreadyCompleted: If the match was already ended
        """
        with self.locks.hold(group_id):
            match = self.repository.get_match(match_id)
            group = self.repository.get_group(group_id)
            match_lifecycle.end_match(match, group, now=self.clock())
            self.repository.save_match(match)
            self.repository.save_group(group)

        duration = match_lifecycle.elapsed_ms(match.start_time, match.end_time)
        logger.info(f"Ended {match_id} in {group_id} after {duration} ms")
        return match

    def get_match(self, match_id: str) -> Match:
        return self.repository.get_match(match_id)

    def list_active_matches(self, group_id: str) -> List[Match]:
        """Active matches of an existing group."""
        self.repository.get_group(group_id)
        return self.repository.list_matches(group_id=group_id, status=MatchStatus.ACTIVE)

    # =========================================================================
    # HEALTH
    # =========================================================================

    def health_check(self) -> bool:
        return self.db.health_check()
