"""Tests for match start/end transitions on a loaded group."""

from datetime import datetime, timedelta, timezone

import pytest

from courtside.models import MatchStatus
from courtside.services.exceptions import (
    CourtNotFound,
    CourtOccupied,
    InvalidTeams,
    MatchAlreadyCompleted,
    MatchNotFound,
    PlayerBusy,
    PlayerNotFound,
)
from courtside.services.match_lifecycle import elapsed_ms, end_match, start_match

START = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)
TEAM1 = ["player:1:ana", "player:2:ben"]
TEAM2 = ["player:3:cy", "player:4:dee"]


class TestStartMatch:
    """Tests for putting players on a court."""

    def test_creates_active_match(self, sample_group):
        """The match records its teams, court, group and start time."""
        match = start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)

        assert match.status == MatchStatus.ACTIVE
        assert match.team1 == TEAM1
        assert match.team2 == TEAM2
        assert match.court_id == "court:1:one"
        assert match.group_id == "group:1:thursday"
        assert match.start_time == START
        assert match.end_time is None
        assert match.id.startswith("match:")

    def test_uses_given_match_id(self, sample_group):
        """Starting an accepted proposal keeps its id."""
        match = start_match(
            sample_group, TEAM1, TEAM2, "court:1:one", now=START, match_id="match:1:prop"
        )
        assert match.id == "match:1:prop"
        assert sample_group.find_court("court:1:one").current_match == "match:1:prop"

    def test_occupies_court_and_flags_players(self, sample_group):
        """Court and all four players become busy; others stay free."""
        match = start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)

        court = sample_group.find_court("court:1:one")
        assert court.is_occupied is True
        assert court.current_match == match.id
        for player_id in TEAM1 + TEAM2:
            assert sample_group.find_player(player_id).in_active_match is True
        assert sample_group.find_player("player:5:eli").in_active_match is False
        assert sample_group.find_court("court:2:two").is_occupied is False

    def test_does_not_touch_statistics(self, sample_group):
        """Games and playtime only change when the match ends."""
        start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)
        ana = sample_group.find_player("player:1:ana")
        assert ana.games_played == 2
        assert ana.total_playtime == 0
        assert ana.partners == set()

    @pytest.mark.parametrize("team1,team2", [
        (["player:1:ana"], TEAM2),
        (TEAM1, ["player:3:cy", "player:4:dee", "player:5:eli"]),
        (["player:1:ana", "player:1:ana"], TEAM2),
        (TEAM1, ["player:2:ben", "player:3:cy"]),
    ])
    def test_invalid_teams(self, sample_group, team1, team2):
        """Teams must be two disjoint pairs."""
        with pytest.raises(InvalidTeams):
            start_match(sample_group, team1, team2, "court:1:one", now=START)

    def test_unknown_court(self, sample_group):
        with pytest.raises(CourtNotFound) as exc_info:
            start_match(sample_group, TEAM1, TEAM2, "court:9:gone", now=START)
        assert exc_info.value.record_id == "court:9:gone"

    def test_unknown_player(self, sample_group):
        with pytest.raises(PlayerNotFound) as exc_info:
            start_match(sample_group, TEAM1, ["player:3:cy", "player:9:zed"], "court:1:one", now=START)
        assert exc_info.value.record_id == "player:9:zed"

    def test_occupied_court(self, sample_group):
        """A second match on the same court is refused."""
        start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)
        with pytest.raises(CourtOccupied):
            start_match(
                sample_group,
                ["player:5:eli", "player:6:fay"],
                ["player:7:gus", "player:8:hal"],
                "court:1:one",
                now=START,
            )

    def test_busy_player(self, sample_group):
        """A player cannot be in two active matches."""
        start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)
        with pytest.raises(PlayerBusy):
            start_match(
                sample_group,
                ["player:1:ana", "player:6:fay"],
                ["player:7:gus", "player:8:hal"],
                "court:2:two",
                now=START,
            )

    def test_failure_leaves_group_unchanged(self, sample_group):
        """Checks run before any mutation."""
        sample_group.find_player("player:4:dee").in_active_match = True
        before = sample_group.model_dump()

        with pytest.raises(PlayerBusy):
            start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)

        assert sample_group.model_dump() == before


class TestEndMatch:
    """Tests for finishing a match."""

    @pytest.fixture
    def started(self, sample_group):
        match = start_match(sample_group, TEAM1, TEAM2, "court:1:one", now=START)
        return sample_group, match

    def test_completes_match(self, started):
        group, match = started
        end = START + timedelta(minutes=25)

        end_match(match, group, now=end)

        assert match.status == MatchStatus.COMPLETED
        assert match.end_time == end
        assert not match.is_active

    def test_credits_players(self, started):
        """Each player gets one game and the duration in milliseconds."""
        group, match = started
        end_match(match, group, now=START + timedelta(seconds=90))

        ana = group.find_player("player:1:ana")
        ben = group.find_player("player:2:ben")
        assert ana.games_played == 3
        assert ana.total_playtime == 90000
        assert ben.games_played == 1
        assert ben.total_playtime == 90000
        for player_id in TEAM1 + TEAM2:
            assert group.find_player(player_id).in_active_match is False

    def test_records_partners_and_opponents(self, started):
        group, match = started
        end_match(match, group, now=START + timedelta(minutes=20))

        ana = group.find_player("player:1:ana")
        cy = group.find_player("player:3:cy")
        assert ana.partners == {"player:2:ben"}
        assert ana.opponents == {"player:3:cy", "player:4:dee"}
        assert cy.partners == {"player:4:dee"}
        assert cy.opponents == {"player:1:ana", "player:2:ben"}

    def test_frees_court(self, started):
        group, match = started
        end_match(match, group, now=START + timedelta(minutes=20))

        court = group.find_court("court:1:one")
        assert court.is_occupied is False
        assert court.current_match is None

    def test_end_before_start_clamps_duration(self, started):
        """Clock skew never subtracts playtime."""
        group, match = started
        end_match(match, group, now=START - timedelta(seconds=5))

        assert group.find_player("player:1:ana").total_playtime == 0
        assert group.find_player("player:1:ana").games_played == 3

    def test_removed_court_is_skipped(self, started):
        group, match = started
        group.courts = [c for c in group.courts if c.id != "court:1:one"]

        end_match(match, group, now=START + timedelta(minutes=10))

        assert match.status == MatchStatus.COMPLETED
        assert group.find_player("player:1:ana").in_active_match is False

    def test_departed_player_is_skipped(self, started):
        """Players no longer in the group are not credited; the rest are."""
        group, match = started
        group.players = [p for p in group.players if p.id != "player:4:dee"]

        end_match(match, group, now=START + timedelta(minutes=10))

        assert group.find_player("player:3:cy").games_played == 2
        assert group.find_player("player:3:cy").partners == {"player:4:dee"}

    def test_court_reused_by_other_match_stays_occupied(self, started):
        """Only the court's own match releases it."""
        group, match = started
        group.find_court("court:1:one").current_match = "match:2:other"

        end_match(match, group, now=START + timedelta(minutes=10))

        assert group.find_court("court:1:one").current_match == "match:2:other"

    def test_match_of_another_group(self, started):
        """A match is only ended against the group it was started in."""
        group, match = started
        other = group.model_copy(update={"id": "group:2:friday"}, deep=True)
        before = other.model_dump()

        with pytest.raises(MatchNotFound):
            end_match(match, other, now=START + timedelta(minutes=10))

        assert match.is_active
        assert match.end_time is None
        assert other.model_dump() == before

    def test_cancelled_match_cannot_end(self, started):
        group, match = started
        match.status = MatchStatus.CANCELLED

        with pytest.raises(MatchAlreadyCompleted):
            end_match(match, group, now=START + timedelta(minutes=10))

        assert group.find_player("player:1:ana").games_played == 2

    def test_ending_twice_is_refused(self, started):
        """A completed match cannot be credited again."""
        group, match = started
        end_match(match, group, now=START + timedelta(minutes=10))
        before = group.model_dump()

        with pytest.raises(MatchAlreadyCompleted):
            end_match(match, group, now=START + timedelta(minutes=20))

        assert group.model_dump() == before
        assert match.end_time == START + timedelta(minutes=10)

    def test_repeat_pairings_do_not_duplicate(self, started):
        """Partner and opponent sets ignore repeats; games still count."""
        group, match = started
        end_match(match, group, now=START + timedelta(minutes=10))
        again = start_match(group, TEAM1, TEAM2, "court:2:two", now=START + timedelta(minutes=15))
        end_match(again, group, now=START + timedelta(minutes=30))

        ana = group.find_player("player:1:ana")
        assert ana.partners == {"player:2:ben"}
        assert len(ana.opponents) == 2
        assert ana.games_played == 4
        assert ana.total_playtime == 25 * 60 * 1000


class TestElapsed:
    """Tests for duration arithmetic."""

    def test_milliseconds(self):
        assert elapsed_ms(START, START + timedelta(minutes=1, milliseconds=500)) == 60500

    def test_clamped_at_zero(self):
        assert elapsed_ms(START, START - timedelta(hours=1)) == 0
