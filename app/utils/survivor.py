"""
Survivor standings

In a survivor game a player stays alive until their first incorrect pick.
Standings are built from the same participants and picks summary as the
weekly leaderboard.
"""

from app.models import ALIVE, ELIMINATED, SurvivorStanding
from app.utils.standings import build_player_standings
from app.utils.validation import validate_standing


def is_eliminated(total_picks, correct_picks):
    """A player with any incorrect pick is out"""
    return total_picks > 0 and correct_picks < total_picks


def _survivor_sort_key(standing):
    if standing.is_alive:
        return (0, -standing.correct_picks, -standing.total_picks)
    # Latest elimination first
    return (1, -(standing.elimination_week or 0), 0)


def build_survivor_standings(participants, summaries):
    """
    Classify each participant as alive or eliminated and order them

    Alive players come first, by correct picks then total picks. Eliminated
    players follow, most recently eliminated first. The elimination week is
    approximated by the number of picks made, since the summary does not say
    which week the losing pick was in.

    Returns:
        list of SurvivorStanding
    """
    survivors = []
    for standing in build_player_standings(participants, summaries):
        validate_standing(standing)
        eliminated = is_eliminated(standing.total_picks, standing.correct_picks)
        survivors.append(
            SurvivorStanding(
                user_id=standing.user_id,
                first_name=standing.first_name,
                last_name=standing.last_name,
                display_name=standing.display_name,
                total_picks=standing.total_picks,
                correct_picks=standing.correct_picks,
                status=ELIMINATED if eliminated else ALIVE,
                elimination_week=standing.total_picks if eliminated else None,
            )
        )

    return sorted(survivors, key=_survivor_sort_key)


def count_by_status(survivors):
    """Return (alive, eliminated) head counts"""
    alive = sum(1 for s in survivors if s.status == ALIVE)
    return alive, len(survivors) - alive
