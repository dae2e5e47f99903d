"""
Entity store adapter.

Maps groups and matches to records in the key-value store. Record ids carry
their kind prefix, so an id is used directly as the store key.
"""

import logging
from typing import Optional, List, Dict, Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from courtside.models.group import Group
from courtside.models.match import Match, MatchStatus
from courtside.services.exceptions import (
    GroupNotFound,
    MatchNotFound,
    StaleAggregate,
    StoreFailure,
)
from courtside.storage import DatabaseInterface, DatabaseError
from courtside.types import GroupDict, MatchDict

logger = logging.getLogger(__name__)

GROUP_PREFIX = "group:"
MATCH_PREFIX = "match:"

ModelT = TypeVar("ModelT", bound=BaseModel)


class SessionRepository:
    """Load and save session records. No business rules live here."""

    def __init__(self, db: DatabaseInterface):
        self.db = db

    # =========================================================================
    # RAW ACCESS
    # =========================================================================

    def _get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            return self.db.get(key)
        except DatabaseError as e:
            logger.error(f"Store read failed for {key}: {e}")
            raise StoreFailure(str(e)) from e

    def _set(self, key: str, record: Dict[str, Any]) -> None:
        try:
            self.db.set(key, record)
        except DatabaseError as e:
            logger.error(f"Store write failed for {key}: {e}")
            raise StoreFailure(str(e)) from e

    def _scan(self, prefix: str) -> List[Dict[str, Any]]:
        try:
            return self.db.get_by_prefix(prefix)
        except DatabaseError as e:
            logger.error(f"Store scan failed for {prefix}: {e}")
            raise StoreFailure(str(e)) from e

    def _load(self, model: Type[ModelT], key: Optional[str], record: Dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(record)
        except ValidationError as e:
            logger.error(f"Unreadable {model.__name__} record under {key}: {e}")
            raise StoreFailure(f"Record {key} is not a valid {model.__name__}") from e

    def has_record(self, key: str) -> bool:
        """Check whether anything is stored under key."""
        return self._get(key) is not None

    # =========================================================================
    # GROUPS
    # =========================================================================

    def get_group(self, group_id: str) -> Group:
        """
        Load a group aggregate.

        Raises:
            GroupNotFound: If no record exists under group_id
            StoreFailure: If the stored record is not a valid group
        """
        record = self._get(group_id)
        if record is None:
            raise GroupNotFound(group_id)
        return self._load(Group, group_id, record)

    def save_group(self, group: Group) -> Group:
        """
        Persist a group aggregate, bumping its version.

        The stored version must still equal the version the caller loaded;
        otherwise another writer got there first and nothing is written.

        Raises:
            StaleAggregate: If the stored version moved on
            StoreFailure: If the store read or write fails
        """
        stored = self._get(group.id)
        if stored is not None and stored.get("version", 0) != group.version:
            raise StaleAggregate(
                f"Group {group.id} changed (stored version {stored.get('version', 0)}, "
                f"loaded version {group.version})"
            )

        record: GroupDict = group.model_dump(mode="json", by_alias=True)
        record["version"] = group.version + 1
        self._set(group.id, record)
        group.version += 1
        return group

    def list_groups(self) -> List[Group]:
        """Get every group, ordered by id (creation time)."""
        return [self._load(Group, r.get("id"), r) for r in self._scan(GROUP_PREFIX)]

    # =========================================================================
    # MATCHES
    # =========================================================================

    def get_match(self, match_id: str) -> Match:
        """
        Load a match.

        Raises:
            MatchNotFound: If no record exists under match_id
        """
        record = self._get(match_id)
        if record is None:
            raise MatchNotFound(match_id)
        return self._load(Match, match_id, record)

    def save_match(self, match: Match) -> Match:
        """Persist a match record."""
        record: MatchDict = match.model_dump(mode="json", by_alias=True)
        self._set(match.id, record)
        return match

    def list_matches(
        self,
        group_id: Optional[str] = None,
        status: Optional[MatchStatus] = None
    ) -> List[Match]:
        """
        Get matches with optional filters.

        Args:
            group_id: Only matches of this group
            status: Only matches in this state

        Returns:
            List of matches ordered by id (start time)
        """
        matches = [self._load(Match, r.get("id"), r) for r in self._scan(MATCH_PREFIX)]
        if group_id is not None:
            matches = [m for m in matches if m.group_id == group_id]
        if status is not None:
            matches = [m for m in matches if m.status == status]
        return matches
