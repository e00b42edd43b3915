"""
Error types for the standings engine and the services around it
"""


class StandingsError(Exception):
    """Base class for all standings errors"""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class UpstreamFetchError(StandingsError):
    """Participants or picks summary could not be fetched or were malformed"""

    status_code = 502

    def __init__(self, message, source=None):
        super().__init__(message)
        self.source = source

    def to_dict(self):
        data = super().to_dict()
        if self.source:
            data["source"] = self.source
        return data


class InvariantViolation(StandingsError):
    """A pick record breaks the count invariants and must not be ranked"""

    status_code = 422

    def __init__(self, message, user_id=None):
        super().__init__(message)
        self.user_id = user_id

    def to_dict(self):
        data = super().to_dict()
        if self.user_id is not None:
            data["user_id"] = self.user_id
        return data
