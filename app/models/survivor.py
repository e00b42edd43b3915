from dataclasses import dataclass
from typing import Optional

ALIVE = "alive"
ELIMINATED = "eliminated"


@dataclass(frozen=True)
class SurvivorStanding:
    """A participant's status in a survivor (one loss and out) game"""

    user_id: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    total_picks: int = 0
    correct_picks: int = 0
    status: str = ALIVE
    elimination_week: Optional[int] = None

    def __repr__(self):
        return f"<SurvivorStanding {self.user_id} {self.status}>"

    @property
    def is_alive(self):
        return self.status == ALIVE

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.display_name,
            "total_picks": self.total_picks,
            "correct_picks": self.correct_picks,
            "status": self.status,
            "elimination_week": self.elimination_week,
        }
