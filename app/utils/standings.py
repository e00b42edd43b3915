"""
Standings Engine for the Pick'em Application

Merges game participants with their picks summary and ranks them into a
tie-aware leaderboard. Everything here is a pure function over immutable
records: nothing is fetched, cached or mutated in place, so the same code
serves request handlers, CLI commands and background callers alike.

Ranking order (highest first):
    1. correct picks
    2. pick percentage
    3. total picks

Players level on correct picks and percentage share a rank and are marked
tied; the next player's rank is their 1-based position (1, 1, 3).
"""

import logging

from app.models import CohortStatistics, PlayerStanding
from app.utils.validation import validate_standing

logger = logging.getLogger(__name__)


def build_player_standings(participants, summaries):
    """
    Merge participants with their picks summary

    Every participant yields exactly one PlayerStanding, in participant
    order. Participants who have not picked yet get zero counts rather than
    being dropped. If the summary list holds more than one entry for a user,
    the first one is used.

    Args:
        participants: Iterable of ParticipantRecord
        summaries: Iterable of PickSummary

    Returns:
        list of unranked PlayerStanding
    """
    summaries_by_user = {}
    for summary in summaries:
        if summary.user_id in summaries_by_user:
            logger.warning(
                f"Duplicate picks summary for user {summary.user_id}, keeping the first"
            )
            continue
        summaries_by_user[summary.user_id] = summary

    standings = []
    for participant in participants:
        summary = summaries_by_user.get(participant.user_id)
        standings.append(
            PlayerStanding(
                user_id=participant.user_id,
                first_name=participant.first_name,
                last_name=participant.last_name,
                display_name=participant.full_name,
                total_picks=summary.total_picks if summary else 0,
                correct_picks=summary.correct_picks if summary else 0,
                pick_percentage=summary.pick_percentage if summary else 0.0,
            )
        )

    return standings


def sort_standings(standings):
    """Order standings best first; equal keys keep their input order"""
    return sorted(standings, key=lambda s: s.sort_key(), reverse=True)


def rank_standings(standings):
    """
    Rank standings using competition ranking with tie detection

    Records are validated first; a record with broken counts raises
    InvariantViolation instead of being ranked. Ranks and tie flags are
    derived only from the pick fields, so ranking an already ranked list
    gives the same result.

    Returns:
        tuple of PlayerStanding with rank and tied set
    """
    ordered = sort_standings(validate_standing(s) for s in standings)
    if not ordered:
        return ()

    # Ties are contiguous once sorted, so comparing neighbours finds them all
    tied = [False] * len(ordered)
    ranks = [1] * len(ordered)
    for i in range(1, len(ordered)):
        if ordered[i].ties_with(ordered[i - 1]):
            ranks[i] = ranks[i - 1]
            tied[i] = True
            tied[i - 1] = True
        else:
            ranks[i] = i + 1

    return tuple(
        standing.with_rank(rank, is_tied)
        for standing, rank, is_tied in zip(ordered, ranks, tied)
    )


def compute_cohort_statistics(ranked):
    """
    Leader, average correct picks and participant count for a ranking

    The leader is the first rank-1 standing, or None when nobody is playing.
    """
    if not ranked:
        return CohortStatistics()

    leader = next((s for s in ranked if s.rank == 1), None)
    total_correct = sum(s.correct_picks for s in ranked)

    return CohortStatistics(
        leader=leader,
        average_correct_picks=total_correct / len(ranked),
        participant_count=len(ranked),
    )


def compute_standings(participants, summaries):
    """
    Run the full aggregation and ranking pipeline

    Args:
        participants: Iterable of ParticipantRecord
        summaries: Iterable of PickSummary

    Returns:
        (tuple of ranked PlayerStanding, CohortStatistics)
    """
    ranked = rank_standings(build_player_standings(participants, summaries))
    cohort = compute_cohort_statistics(ranked)

    logger.debug(
        f"Ranked {cohort.participant_count} players, "
        f"leader={cohort.leader.user_id if cohort.leader else None}"
    )

    return ranked, cohort
