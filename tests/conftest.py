"""
Shared test fixtures and configuration.

Provides reusable fixtures for all test files including store instances,
sample players, a controllable clock, and the session service.
"""

import pytest
import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import patch

from courtside.models import Court, Group, Player, SkillLevel
from courtside.services.session_service import SessionService
from courtside.storage import get_database, reset_database
from courtside.storage.memory_db import MemoryDatabase


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_player(player_id: str, level: str = "N", games: int = 0, **kwargs) -> Player:
    """Build a player with just the fields matchmaking looks at."""
    return Player(
        id=player_id,
        name=kwargs.pop("name", player_id.split(":")[-1].title()),
        level=SkillLevel(level),
        games_played=games,
        **kwargs
    )


# =============================================================================
# STORE FIXTURES
# =============================================================================

@pytest.fixture
def test_data_dir():
    """Provide a temporary directory for test data."""
    temp_dir = tempfile.mkdtemp(prefix="courtside_test_")
    yield temp_dir

    # Cleanup
    if os.path.exists(temp_dir):
        try:
            shutil.rmtree(temp_dir)
        except PermissionError:
            pass  # Windows file locking, ignore


@pytest.fixture
def db_fixture(test_data_dir):
    """Provide a clean SQLite store from the factory."""
    with patch.dict(os.environ, {'DB_TYPE': 'sqlite', 'DATA_DIR': test_data_dir}, clear=False):
        reset_database()
        db = get_database()
        yield db
        reset_database()  # Close connection before cleanup


@pytest.fixture
def memory_db():
    """Provide an empty in-memory store."""
    return MemoryDatabase()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    """Provide a clock frozen at a session start."""
    return FakeClock()


@pytest.fixture
def service(memory_db, clock):
    """Provide a session service over the in-memory store."""
    return SessionService(db=memory_db, clock=clock)


@pytest.fixture
def admin_id() -> str:
    return "user-admin"


@pytest.fixture
def group_with_four(service, admin_id):
    """A group with four fresh players and one court, already persisted."""
    group = service.create_group("Thursday Night", "Sports hall", admin_id=admin_id)
    for name, level in [("Ana", "P"), ("Ben", "S"), ("Cy", "N"), ("Dee", "NB")]:
        service.register_player(group.id, name, SkillLevel(level))
    service.add_court(group.id, "Court 1", user_id=admin_id)
    return service.get_group(group.id)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_players() -> List[Player]:
    """Eight free players of mixed levels and games played."""
    return [
        make_player("player:1:ana", "P", 2),
        make_player("player:2:ben", "S", 0),
        make_player("player:3:cy", "N", 1),
        make_player("player:4:dee", "NB", 0),
        make_player("player:5:eli", "BG", 3),
        make_player("player:6:fay", "BB", 1),
        make_player("player:7:gus", "N", 0),
        make_player("player:8:hal", "S", 2),
    ]


@pytest.fixture
def sample_group(sample_players) -> Group:
    """Unsaved group holding the sample players and two courts."""
    return Group(
        id="group:1:thursday",
        name="Thursday Night",
        admin_id="user-admin",
        players=sample_players,
        courts=[
            Court(id="court:1:one", name="Court 1"),
            Court(id="court:2:two", name="Court 2"),
        ],
    )
