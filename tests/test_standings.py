"""
Unit tests for the standings engine

Covers aggregation of participants with picks summaries, competition
ranking with ties, and cohort statistics.
"""

import random

import pytest

from app.models import PlayerStanding
from app.utils.errors import InvariantViolation
from app.utils.scoring import calculate_pick_percentage
from app.utils.standings import (
    build_player_standings,
    compute_cohort_statistics,
    compute_standings,
    rank_standings,
)
from conftest import make_participant, make_summary


def standing(user_id, correct_picks, total_picks, pick_percentage=None):
    if pick_percentage is None:
        pick_percentage = calculate_pick_percentage(correct_picks, total_picks)
    return PlayerStanding(
        user_id=user_id,
        display_name=user_id,
        total_picks=total_picks,
        correct_picks=correct_picks,
        pick_percentage=pick_percentage,
    )


def by_user(ranked):
    return {s.user_id: s for s in ranked}


class TestBuildPlayerStandings:
    def test_one_standing_per_participant(self):
        participants = [make_participant("a"), make_participant("b")]
        summaries = [make_summary("a", 3, 4), make_summary("b", 1, 4)]

        standings = build_player_standings(participants, summaries)

        assert [s.user_id for s in standings] == ["a", "b"]
        assert standings[0].correct_picks == 3
        assert standings[0].total_picks == 4
        assert standings[0].pick_percentage == 75.0

    def test_participant_without_summary_gets_zeroes(self):
        standings = build_player_standings([make_participant("a")], [])

        assert len(standings) == 1
        assert standings[0].total_picks == 0
        assert standings[0].correct_picks == 0
        assert standings[0].pick_percentage == 0.0
        assert standings[0].rank is None

    def test_summary_for_non_participant_is_ignored(self):
        standings = build_player_standings(
            [make_participant("a")], [make_summary("stranger", 5, 5)]
        )

        assert [s.user_id for s in standings] == ["a"]

    def test_duplicate_summaries_keep_first(self):
        summaries = [make_summary("a", 2, 3), make_summary("a", 9, 9)]

        standings = build_player_standings([make_participant("a")], summaries)

        assert len(standings) == 1
        assert standings[0].correct_picks == 2

    def test_identity_copied_from_participant(self):
        participant = make_participant(
            "u1", first_name="Jane", last_name="Doe", display_name="JD"
        )

        result = build_player_standings([participant], [])[0]

        assert result.first_name == "Jane"
        assert result.last_name == "Doe"
        assert result.display_name == "JD"

    def test_display_name_falls_back_to_full_name(self):
        participant = make_participant(
            "u1", first_name="Jane", last_name="Doe", display_name=""
        )

        result = build_player_standings([participant], [])[0]

        assert result.display_name == "Jane Doe"

    def test_matching_is_exact(self):
        standings = build_player_standings(
            [make_participant("User1")], [make_summary("user1", 4, 4)]
        )

        assert standings[0].correct_picks == 0


class TestRankStandings:
    def test_tie_for_first_skips_next_rank(self):
        ranked = rank_standings(
            [
                standing("A", 5, 10, 50.0),
                standing("B", 5, 10, 50.0),
                standing("C", 4, 10, 40.0),
            ]
        )
        players = by_user(ranked)

        assert (players["A"].rank, players["A"].tied) == (1, True)
        assert (players["B"].rank, players["B"].tied) == (1, True)
        assert (players["C"].rank, players["C"].tied) == (3, False)

    def test_percentage_breaks_correct_picks_tie(self):
        ranked = rank_standings(
            [standing("B", 3, 10, 30.0), standing("A", 3, 5, 60.0)]
        )

        assert [s.user_id for s in ranked] == ["A", "B"]
        assert [s.rank for s in ranked] == [1, 2]
        assert not any(s.tied for s in ranked)

    def test_total_picks_orders_but_does_not_break_tie(self):
        # Equal correct picks and percentage: tied, more picks listed first
        ranked = rank_standings(
            [standing("few", 0, 2, 0.0), standing("many", 0, 5, 0.0)]
        )

        assert [s.user_id for s in ranked] == ["many", "few"]
        assert [s.rank for s in ranked] == [1, 1]
        assert all(s.tied for s in ranked)

    def test_empty_list(self):
        assert rank_standings([]) == ()

    def test_single_player(self):
        ranked = rank_standings([standing("solo", 2, 4)])

        assert ranked[0].rank == 1
        assert ranked[0].tied is False

    def test_three_way_tie_block(self):
        ranked = rank_standings(
            [
                standing("top", 8, 10),
                standing("x", 6, 10),
                standing("y", 6, 10),
                standing("z", 6, 10),
                standing("last", 2, 10),
            ]
        )

        assert [s.rank for s in ranked] == [1, 2, 2, 2, 5]
        assert [s.tied for s in ranked] == [False, True, True, True, False]

    def test_input_is_not_mutated(self):
        original = [standing("a", 1, 2), standing("b", 2, 2)]
        snapshot = list(original)

        ranked = rank_standings(original)

        assert original == snapshot
        assert all(s.rank is None for s in original)
        assert ranked is not original

    def test_ranking_is_idempotent(self):
        ranked = rank_standings(
            [standing("a", 3, 4), standing("b", 3, 4), standing("c", 1, 4)]
        )

        assert rank_standings(ranked) == ranked

    def test_stale_rank_fields_are_recomputed(self):
        stale = [
            standing("a", 1, 4).with_rank(1, tied=True),
            standing("b", 3, 4).with_rank(7),
        ]

        ranked = rank_standings(stale)

        assert [(s.user_id, s.rank, s.tied) for s in ranked] == [
            ("b", 1, False),
            ("a", 2, False),
        ]

    @pytest.mark.parametrize(
        "bad",
        [
            standing("neg", -1, 3, 0.0),
            standing("neg_total", 0, -2, 0.0),
            standing("over", 5, 4, 100.0),
            standing("pct", 1, 2, 150.0),
        ],
    )
    def test_invariant_violation_refuses_to_rank(self, bad):
        with pytest.raises(InvariantViolation) as exc_info:
            rank_standings([standing("ok", 1, 2), bad])

        assert exc_info.value.user_id == bad.user_id


def random_inputs(seed):
    rng = random.Random(seed)
    count = rng.randint(0, 12)
    participants = [make_participant(f"user{i}") for i in range(count)]
    summaries = []
    for participant in participants:
        if rng.random() < 0.2:
            continue  # hasn't picked yet
        total = rng.randint(0, 5)
        summaries.append(make_summary(participant.user_id, rng.randint(0, total), total))
    # A few summaries for people outside the game
    for i in range(rng.randint(0, 2)):
        summaries.append(make_summary(f"outsider{i}", 1, 1))
    rng.shuffle(summaries)
    return participants, summaries


@pytest.mark.parametrize("seed", range(40))
class TestRankingProperties:
    def test_totality(self, seed):
        participants, summaries = random_inputs(seed)

        ranked, cohort = compute_standings(participants, summaries)

        assert sorted(s.user_id for s in ranked) == sorted(
            p.user_id for p in participants
        )
        assert cohort.participant_count == len(participants)

    def test_order_is_monotonic(self, seed):
        ranked, _ = compute_standings(*random_inputs(seed))

        keys = [s.sort_key() for s in ranked]
        assert keys == sorted(keys, reverse=True)
        ranks = [s.rank for s in ranked]
        assert ranks == sorted(ranks)

    def test_ties_are_symmetric(self, seed):
        ranked, _ = compute_standings(*random_inputs(seed))

        for a in ranked:
            for b in ranked:
                if a is not b and a.rank == b.rank:
                    assert a.correct_picks == b.correct_picks
                    assert a.pick_percentage == b.pick_percentage
                    assert a.tied and b.tied

    def test_rank_is_position_unless_tied_with_previous(self, seed):
        ranked, _ = compute_standings(*random_inputs(seed))

        for i, current in enumerate(ranked):
            if i > 0 and current.ties_with(ranked[i - 1]):
                assert current.rank == ranked[i - 1].rank
            else:
                assert current.rank == i + 1

    def test_tied_flag_matches_neighbours(self, seed):
        ranked, _ = compute_standings(*random_inputs(seed))

        for i, current in enumerate(ranked):
            neighbours = ranked[max(0, i - 1):i] + ranked[i + 1:i + 2]
            assert current.tied == any(current.ties_with(n) for n in neighbours)

    def test_reranking_is_idempotent(self, seed):
        ranked, _ = compute_standings(*random_inputs(seed))

        assert rank_standings(ranked) == ranked


class TestCohortStatistics:
    def test_empty_standings(self):
        ranked, cohort = compute_standings([], [])

        assert ranked == ()
        assert cohort.leader is None
        assert cohort.has_leader is False
        assert cohort.average_correct_picks == 0
        assert cohort.participant_count == 0

    def test_leader_average_and_count(self):
        ranked = rank_standings(
            [standing("a", 2, 4), standing("b", 4, 4), standing("c", 3, 4)]
        )

        cohort = compute_cohort_statistics(ranked)

        assert cohort.leader.user_id == "b"
        assert cohort.average_correct_picks == pytest.approx(3.0)
        assert cohort.participant_count == 3

    def test_tied_leaders_pick_first_in_order(self):
        ranked = rank_standings([standing("a", 4, 4), standing("b", 4, 4)])

        cohort = compute_cohort_statistics(ranked)

        assert cohort.leader.user_id == "a"
        assert cohort.leader.tied is True

    def test_to_dict_without_leader(self):
        assert compute_cohort_statistics(()).to_dict() == {
            "leader": None,
            "average_correct_picks": 0.0,
            "participant_count": 0,
        }


def test_participant_without_picks_ranks_last():
    participants = [
        make_participant("picker"),
        make_participant("idle"),
        make_participant("also_idle"),
    ]
    summaries = [make_summary("picker", 1, 3)]

    ranked, _ = compute_standings(participants, summaries)
    players = by_user(ranked)

    assert ranked[0].user_id == "picker"
    assert players["idle"].total_picks == 0
    assert players["idle"].rank == 2
    assert players["also_idle"].rank == 2
    assert players["idle"].tied and players["also_idle"].tied


def test_zero_pick_participant_ties_with_winless_picker():
    # 0 correct at 0% is level with someone who picked and missed everything
    ranked, _ = compute_standings(
        [make_participant("idle"), make_participant("unlucky")],
        [make_summary("unlucky", 0, 3)],
    )

    assert [s.user_id for s in ranked] == ["unlucky", "idle"]
    assert [s.rank for s in ranked] == [1, 1]
