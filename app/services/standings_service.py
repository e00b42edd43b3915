"""
Standings service

Fetches participants and pick totals for a game, validates them and runs
the standings engine. Season totals come from the picks summary; standings
as of an earlier week are rebuilt from each participant's picks. Fetch
failures and invariant violations surface as exceptions before anything is
ranked.
"""

import logging

from app.models import StandingsResult
from app.services.pickem_client import PickemApiClient
from app.utils.errors import StandingsError
from app.utils.logging_config import StandingsLogAdapter
from app.utils.performance import PerformanceMonitor, timer
from app.utils.scoring import summarize_picks
from app.utils.standings import compute_standings
from app.utils.survivor import build_survivor_standings, count_by_status
from app.utils.validation import (
    parse_participants,
    parse_pick_results,
    parse_summaries,
)

logger = logging.getLogger(__name__)


def rank_payload(participants_payload, summary_payload):
    """
    Rank caller-supplied participants and picks summary

    Args:
        participants_payload: Participants list (or a wrapper dict)
        summary_payload: Summary list (or ``{"summary": [...]}``)

    Returns:
        StandingsResult without a game key
    """
    participants = parse_participants(participants_payload)
    summaries = parse_summaries(summary_payload)
    standings, cohort = compute_standings(participants, summaries)
    return StandingsResult(standings=standings, cohort=cohort)


class StandingsService:
    """Builds standings for a (game, season, week) view from the pick'em API"""

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_config(cls, config):
        return cls(PickemApiClient.from_config(config))

    def _fetch_summaries(self, game_id, season_id, participants, week=None):
        if week is None:
            return parse_summaries(self.client.get_picks_summary(game_id, season_id))

        # The summary endpoint only totals the whole season, so a past week
        # is rebuilt from each participant's individual picks
        return [
            summarize_picks(
                participant.user_id,
                parse_pick_results(
                    self.client.get_user_picks(
                        game_id, season_id, participant.user_id
                    ),
                    participant.user_id,
                ),
                through_week=week,
            )
            for participant in participants
        ]

    def _fetch_inputs(self, game_id, season_id, week=None):
        # Both fetches must succeed before aggregation starts
        participants = parse_participants(self.client.get_game(game_id))
        summaries = self._fetch_summaries(game_id, season_id, participants, week=week)
        return participants, summaries

    @timer
    def get_standings(self, game_id, season_id, week=None):
        """
        Ranked standings for a game and season

        Without a week the season totals so far are ranked. With a week only
        picks from weeks up to and including it count.

        Raises:
            UpstreamFetchError: participants or picks could not be loaded
            InvariantViolation: a summary record has impossible counts
        """
        log = StandingsLogAdapter(logger, game_id, season_id, week)

        try:
            with PerformanceMonitor(f"standings game={game_id}"):
                participants, summaries = self._fetch_inputs(
                    game_id, season_id, week=week
                )
                standings, cohort = compute_standings(participants, summaries)
        except StandingsError as e:
            log.warning(f"Standings unavailable: {e.message}")
            raise

        log.info(
            f"Standings computed for {cohort.participant_count} players "
            f"({len(summaries)} summaries)"
        )

        return StandingsResult(
            standings=standings,
            cohort=cohort,
            game_id=str(game_id),
            season_id=str(season_id),
            week=week,
        )

    @timer
    def get_survivor_standings(self, game_id, season_id, week=None):
        """Alive/eliminated standings for a survivor game"""
        participants, summaries = self._fetch_inputs(game_id, season_id, week=week)
        survivors = build_survivor_standings(participants, summaries)
        alive, eliminated = count_by_status(survivors)

        return {
            "game_id": str(game_id),
            "season_id": str(season_id),
            "week": week,
            "standings": [survivor.to_dict() for survivor in survivors],
            "alive_count": alive,
            "eliminated_count": eliminated,
        }
