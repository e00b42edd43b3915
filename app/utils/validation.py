"""
Boundary validation for data coming from the pick'em API

Participants and picks summaries arrive as JSON. These helpers turn them
into records and reject anything the standings engine must not rank:
malformed payloads raise UpstreamFetchError, broken counts raise
InvariantViolation.
"""

import logging
import math

from app.models import ParticipantRecord, PickSummary
from app.utils.errors import InvariantViolation, UpstreamFetchError

logger = logging.getLogger(__name__)

PARTICIPANTS = "participants"
SUMMARY = "summary"
PICKS = "picks"


def check_pick_counts(user_id, total_picks, correct_picks, pick_percentage):
    """
    Raise InvariantViolation unless the counts describe a possible record

    Counts must be non-negative, correct picks cannot exceed total picks and
    the percentage must lie in [0, 100].
    """
    if total_picks < 0 or correct_picks < 0:
        raise InvariantViolation(
            f"Negative pick count for user {user_id}: "
            f"total={total_picks} correct={correct_picks}",
            user_id=user_id,
        )
    if correct_picks > total_picks:
        raise InvariantViolation(
            f"Correct picks exceed total picks for user {user_id}: "
            f"{correct_picks} > {total_picks}",
            user_id=user_id,
        )
    if not 0 <= pick_percentage <= 100:
        raise InvariantViolation(
            f"Pick percentage out of range for user {user_id}: {pick_percentage}",
            user_id=user_id,
        )


def validate_standing(standing):
    """Check a PlayerStanding (or PickSummary) before it is ranked"""
    check_pick_counts(
        standing.user_id,
        standing.total_picks,
        standing.correct_picks,
        standing.pick_percentage,
    )
    return standing


def _coerce_user_id(value, source):
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise UpstreamFetchError(f"Record without user_id in {source}", source=source)
    # JSON numbers may decode as 1.0 on one endpoint and 1 on another
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _coerce_name(value):
    return "" if value is None else str(value)


def _coerce_count(value, field, user_id, source):
    # SQL aggregates come back as null for users with no picks
    if value is None:
        return 0
    if isinstance(value, bool):
        raise UpstreamFetchError(
            f"Invalid {field} for user {user_id}: {value!r}", source=source
        )
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise UpstreamFetchError(
            f"Invalid {field} for user {user_id}: {value!r}", source=source
        )
    if not number.is_integer():
        raise UpstreamFetchError(
            f"Non-integer {field} for user {user_id}: {value!r}", source=source
        )
    return int(number)


def _coerce_percentage(value, user_id, source):
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise UpstreamFetchError(
            f"Invalid pick_percentage for user {user_id}: {value!r}", source=source
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise UpstreamFetchError(
            f"Invalid pick_percentage for user {user_id}: {value!r}", source=source
        )
    if not math.isfinite(number):
        raise UpstreamFetchError(
            f"Invalid pick_percentage for user {user_id}: {value!r}", source=source
        )
    return number


def parse_participant(data):
    """Build a ParticipantRecord from one participant dict"""
    if not isinstance(data, dict):
        raise UpstreamFetchError(
            f"Participant entry is not an object: {data!r}", source=PARTICIPANTS
        )
    return ParticipantRecord(
        user_id=_coerce_user_id(data.get("user_id"), PARTICIPANTS),
        first_name=_coerce_name(data.get("first_name")),
        last_name=_coerce_name(data.get("last_name")),
        display_name=_coerce_name(data.get("display_name")),
    )


def parse_pick_summary(data):
    """Build a PickSummary from one summary dict, enforcing count invariants"""
    if not isinstance(data, dict):
        raise UpstreamFetchError(
            f"Summary entry is not an object: {data!r}", source=SUMMARY
        )
    user_id = _coerce_user_id(data.get("user_id"), SUMMARY)
    total_picks = _coerce_count(data.get("total_picks"), "total_picks", user_id, SUMMARY)
    correct_picks = _coerce_count(
        data.get("correct_picks"), "correct_picks", user_id, SUMMARY
    )
    pick_percentage = _coerce_percentage(data.get("pick_percentage"), user_id, SUMMARY)

    try:
        check_pick_counts(user_id, total_picks, correct_picks, pick_percentage)
    except InvariantViolation as e:
        logger.warning(f"Rejecting picks summary: {e.message}")
        raise

    return PickSummary(
        user_id=user_id,
        total_picks=total_picks,
        correct_picks=correct_picks,
        pick_percentage=pick_percentage,
    )


def _unwrap_list(payload, keys, source):
    """Accept a bare list or a list nested under one of the given keys"""
    for key in keys:
        if isinstance(payload, dict):
            payload = payload.get(key, payload)
    if isinstance(payload, dict):
        raise UpstreamFetchError(
            f"Expected a list of {source}, got an object", source=source
        )
    if not isinstance(payload, list):
        raise UpstreamFetchError(
            f"Expected a list of {source}, got {type(payload).__name__}",
            source=source,
        )
    return payload


def parse_participants(payload):
    """
    Parse participants from an upstream response

    Accepts a bare list, ``{"participants": [...]}`` or the game detail shape
    ``{"game": {"participants": [...]}}``. A user listed more than once keeps
    the first entry.
    """
    entries = _unwrap_list(payload, ("game", "participants"), PARTICIPANTS)

    participants = []
    seen = set()
    for entry in entries:
        participant = parse_participant(entry)
        if participant.user_id in seen:
            logger.warning(
                f"Duplicate participant for user {participant.user_id}, "
                "keeping the first entry"
            )
            continue
        seen.add(participant.user_id)
        participants.append(participant)
    return participants


def parse_summaries(payload):
    """Parse picks summaries from a bare list or ``{"summary": [...]}``"""
    entries = _unwrap_list(payload, ("summary",), SUMMARY)
    return [parse_pick_summary(entry) for entry in entries]


def _coerce_result(value, user_id):
    # SQLite stores is_correct as 1/0, null while the matchup is pending
    if value is None or isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    raise UpstreamFetchError(
        f"Invalid is_correct for user {user_id}: {value!r}", source=PICKS
    )


def parse_pick_results(payload, user_id):
    """
    Parse one user's picks into (week, is_correct) pairs

    Accepts a bare list or ``{"picks": [...]}``; the pairs feed
    ``summarize_picks``.
    """
    entries = _unwrap_list(payload, ("picks",), PICKS)

    results = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise UpstreamFetchError(
                f"Pick entry is not an object: {entry!r}", source=PICKS
            )
        week = _coerce_count(entry.get("week"), "week", user_id, PICKS)
        results.append((week, _coerce_result(entry.get("is_correct"), user_id)))
    return results
