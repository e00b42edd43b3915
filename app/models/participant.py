from dataclasses import dataclass


@dataclass(frozen=True)
class ParticipantRecord:
    """One player in a pick'em game, as reported by game membership"""

    user_id: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""

    def __repr__(self):
        return f"<ParticipantRecord {self.user_id}>"

    @property
    def full_name(self):
        """Return display name, falling back to first/last name or user id"""
        if self.display_name:
            return self.display_name
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.user_id

    def to_dict(self):
        """Convert participant to dictionary for API responses"""
        return {
            "user_id": self.user_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.full_name,
        }
