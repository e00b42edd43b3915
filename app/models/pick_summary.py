from dataclasses import dataclass


@dataclass(frozen=True)
class PickSummary:
    """Per-user pick accuracy for a game and season, across weeks picked so far"""

    user_id: str
    total_picks: int = 0
    correct_picks: int = 0
    pick_percentage: float = 0.0

    def __repr__(self):
        return (
            f"<PickSummary {self.user_id} "
            f"{self.correct_picks}/{self.total_picks}>"
        )

    @property
    def incorrect_picks(self):
        return self.total_picks - self.correct_picks

    def to_dict(self):
        """Convert summary to dictionary for API responses"""
        return {
            "user_id": self.user_id,
            "total_picks": self.total_picks,
            "correct_picks": self.correct_picks,
            "pick_percentage": self.pick_percentage,
        }
