"""
Pick scoring helpers for the Pick'em Application

This module turns raw pick results into the per-user summary the standings
engine consumes. For ranking, see app/utils/standings.py
"""

from app.models import PickSummary


def calculate_pick_percentage(correct_picks, total_picks):
    """
    Percentage of correct picks, rounded to two decimals

    Returns:
        0.0 when no picks have been made
    """
    if total_picks <= 0:
        return 0.0
    return round(correct_picks * 100.0 / total_picks, 2)


def summarize_picks(user_id, results, through_week=None):
    """
    Build a PickSummary from one user's pick results

    Pending picks (is_correct None) count toward total picks but not correct
    picks, matching how the pick service aggregates them.

    Args:
        user_id: User the picks belong to
        results: Iterable of (week, is_correct) pairs
        through_week: Only count picks up to and including this week
    """
    total_picks = 0
    correct_picks = 0

    for week, is_correct in results:
        if through_week is not None and week > through_week:
            continue
        total_picks += 1
        if is_correct is True:
            correct_picks += 1

    return PickSummary(
        user_id=user_id,
        total_picks=total_picks,
        correct_picks=correct_picks,
        pick_percentage=calculate_pick_percentage(correct_picks, total_picks),
    )


def summarize_game_picks(picks, through_week=None):
    """
    Summaries for every user with picks in a game

    Args:
        picks: Iterable of dicts with user_id, week and is_correct keys
        through_week: Only count picks up to and including this week

    Returns:
        list of PickSummary in first-seen user order
    """
    results_by_user = {}
    for pick in picks:
        results_by_user.setdefault(str(pick["user_id"]), []).append(
            (pick["week"], pick.get("is_correct"))
        )

    return [
        summarize_picks(user_id, results, through_week=through_week)
        for user_id, results in results_by_user.items()
    ]
