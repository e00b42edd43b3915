from .participant import ParticipantRecord
from .pick_summary import PickSummary
from .standing import CohortStatistics, PlayerStanding, StandingsResult
from .survivor import ALIVE, ELIMINATED, SurvivorStanding

__all__ = [
    "ParticipantRecord",
    "PickSummary",
    "PlayerStanding",
    "CohortStatistics",
    "StandingsResult",
    "SurvivorStanding",
    "ALIVE",
    "ELIMINATED",
]
