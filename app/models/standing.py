from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class PlayerStanding:
    """A participant merged with their pick summary, ranked by the engine"""

    user_id: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    total_picks: int = 0
    correct_picks: int = 0
    pick_percentage: float = 0.0
    rank: Optional[int] = None
    tied: bool = False

    def __repr__(self):
        return f"<PlayerStanding {self.user_id} rank={self.rank}>"

    def sort_key(self):
        """Comparison key, highest first: correct picks, percentage, total picks"""
        return (self.correct_picks, self.pick_percentage, self.total_picks)

    def ties_with(self, other):
        """Two standings share a rank when correct picks and percentage match"""
        return (
            self.correct_picks == other.correct_picks
            and self.pick_percentage == other.pick_percentage
        )

    def with_rank(self, rank, tied=False):
        """Return a copy of this standing with rank and tie flag set"""
        return replace(self, rank=rank, tied=tied)

    def to_dict(self):
        """Convert standing to dictionary for API responses"""
        return {
            "user_id": self.user_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.display_name,
            "total_picks": self.total_picks,
            "correct_picks": self.correct_picks,
            "pick_percentage": self.pick_percentage,
            "rank": self.rank,
            "tied": self.tied,
        }


@dataclass(frozen=True)
class CohortStatistics:
    """Leader, average and head count over a completed ranking"""

    leader: Optional[PlayerStanding] = None
    average_correct_picks: float = 0.0
    participant_count: int = 0

    @property
    def has_leader(self):
        return self.leader is not None

    def to_dict(self):
        return {
            "leader": self.leader.to_dict() if self.has_leader else None,
            "average_correct_picks": self.average_correct_picks,
            "participant_count": self.participant_count,
        }


@dataclass(frozen=True)
class StandingsResult:
    """Ranked standings for one (game, season, week) view"""

    standings: Tuple[PlayerStanding, ...] = ()
    cohort: CohortStatistics = field(default_factory=CohortStatistics)
    game_id: Optional[str] = None
    season_id: Optional[str] = None
    week: Optional[int] = None

    def to_dict(self):
        data = {
            "standings": [standing.to_dict() for standing in self.standings],
            "cohort": self.cohort.to_dict(),
        }
        if self.game_id is not None:
            data["game_id"] = self.game_id
            data["season_id"] = self.season_id
            data["week"] = self.week
        return data
