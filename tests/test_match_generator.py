"""Tests for doubles match generation."""

import pytest

from courtside.services.exceptions import InsufficientPlayers
from courtside.services.match_generator import generate

from conftest import make_player


def ids_of(proposals):
    return [pid for p in proposals for pid in p.player_ids]


class TestInsufficientPlayers:
    """Tests for pools too small to play."""

    @pytest.mark.parametrize("size", [0, 1, 2, 3])
    def test_small_pool_raises(self, size):
        """Fewer than four players never yields matches."""
        players = [make_player(f"player:{i}:p{i}") for i in range(size)]
        with pytest.raises(InsufficientPlayers) as exc_info:
            generate(players, True)
        assert exc_info.value.available == size

    def test_busy_players_do_not_count(self):
        """Players in an active match are filtered out first."""
        players = [make_player(f"player:{i}:p{i}") for i in range(5)]
        players[0].in_active_match = True
        players[3].in_active_match = True
        with pytest.raises(InsufficientPlayers):
            generate(players, True)


class TestProposals:
    """Tests for the shape of generated proposals."""

    def test_exactly_four_players(self):
        """Four free players make one proposal using all of them."""
        players = [make_player(f"player:{i}:p{i}") for i in range(4)]
        proposals = generate(players, True)

        assert len(proposals) == 1
        assert sorted(ids_of(proposals)) == sorted(p.id for p in players)
        assert proposals[0].id.startswith("match:")

    def test_disjoint_and_from_free_pool(self, sample_players):
        """Every player appears at most once, and only free players appear."""
        sample_players[0].in_active_match = True
        busy_id = sample_players[0].id
        extra = [make_player(f"player:9{i}:x{i}", "N", 1) for i in range(3)]

        proposals = generate(sample_players + extra, True)

        used = ids_of(proposals)
        assert len(proposals) == 10 // 4
        assert len(used) == len(set(used))
        assert busy_id not in used
        for proposal in proposals:
            assert len(proposal.team1) == 2
            assert len(proposal.team2) == 2
            assert not set(proposal.team1) & set(proposal.team2)

    def test_match_count_is_floor_of_quarter(self):
        """Eleven players make two matches; three sit out."""
        players = [make_player(f"player:{i:02d}:p{i}", "N", i % 3) for i in range(11)]
        proposals = generate(players, False)
        assert len(proposals) == 2
        assert len(ids_of(proposals)) == 8

    def test_does_not_mutate_players(self, sample_players):
        """Proposals reserve nothing."""
        before = [p.model_dump() for p in sample_players]
        generate(sample_players, True)
        assert [p.model_dump() for p in sample_players] == before

    def test_repeated_calls_can_overlap(self, sample_players):
        """Without starting a match, a second call proposes the same players."""
        first = generate(sample_players, True)
        second = generate(sample_players, True)
        assert set(ids_of(first)) & set(ids_of(second))


class TestSearchOrder:
    """Regression baselines for the greedy anchor search."""

    def test_fewest_games_anchor_first(self):
        """The least-played player anchors the first match, on team 1."""
        players = [
            make_player("player:1:a", "N", 3),
            make_player("player:2:b", "N", 0),
            make_player("player:3:c", "N", 2),
            make_player("player:4:d", "N", 1),
        ]
        proposal = generate(players, True)[0]
        # Sorted by games: b(0), d(1), c(2), a(3)
        assert proposal.team1 == ["player:2:b", "player:4:d"]
        assert proposal.team2 == ["player:3:c", "player:1:a"]

    def test_ties_keep_first_found(self):
        """Equal scores keep registration order and the first quad found."""
        players = [make_player(f"player:{i}:p{i}", "S", 0) for i in range(8)]
        proposals = generate(players, True)

        assert [p.team1 for p in proposals] == [
            ["player:0:p0", "player:1:p1"],
            ["player:4:p4", "player:5:p5"],
        ]
        assert [p.team2 for p in proposals] == [
            ["player:2:p2", "player:3:p3"],
            ["player:6:p6", "player:7:p7"],
        ]

    def test_teams_follow_search_order_not_balance(self):
        """[0,0,5,5] games with P,P,BB,BB: both strong players end up together."""
        players = [
            make_player("player:1:p1", "P", 0),
            make_player("player:2:p2", "P", 0),
            make_player("player:3:bb1", "BB", 5),
            make_player("player:4:bb2", "BB", 5),
        ]
        proposal = generate(players, True)[0]

        assert proposal.team1 == ["player:1:p1", "player:2:p2"]
        assert proposal.team2 == ["player:3:bb1", "player:4:bb2"]
        assert proposal.score == 105

    def test_prefers_same_level_quad(self):
        """With level preference the anchor picks players of its own level."""
        players = [
            make_player("player:1:anchor", "S", 0),
            make_player("player:2:low1", "BB", 0),
            make_player("player:3:s1", "S", 0),
            make_player("player:4:low2", "BB", 0),
            make_player("player:5:s2", "S", 0),
            make_player("player:6:s3", "S", 0),
        ]
        proposal = generate(players, True)[0]
        assert set(proposal.team1 + proposal.team2) == {
            "player:1:anchor", "player:3:s1", "player:5:s2", "player:6:s3"
        }
        assert proposal.score == 160

    def test_quads_at_or_below_floor_are_never_picked(self):
        """Veterans averaging 60 games without level preference get nothing."""
        players = [make_player(f"player:{i}:v{i}", "N", 60) for i in range(4)]
        assert generate(players, False) == []

    def test_level_bonus_lifts_veterans_over_floor(self):
        """The same veterans are matched once the level bonus applies."""
        players = [make_player(f"player:{i}:v{i}", "N", 60) for i in range(4)]
        proposals = generate(players, True)
        assert len(proposals) == 1
        assert proposals[0].score == 40

    def test_fewer_matches_than_pool_allows(self):
        """Fresh players are matched; the veteran quad falls under the floor."""
        fresh = [make_player(f"player:0{i}:f{i}", "N", 0) for i in range(4)]
        veterans = [make_player(f"player:1{i}:v{i}", "N", 100) for i in range(4)]

        proposals = generate(veterans + fresh, False)

        assert len(proposals) == 1
        assert set(ids_of(proposals)) == {p.id for p in fresh}
