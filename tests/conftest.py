import os

os.environ["FLASK_CONFIG"] = "testing"

import pytest  # noqa: E402

from app import create_app  # noqa: E402
from app.models import ParticipantRecord, PickSummary  # noqa: E402
from app.utils.scoring import calculate_pick_percentage  # noqa: E402


@pytest.fixture
def app():
    """Create application for testing"""
    app = create_app("testing")
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Test client"""
    return app.test_client()


def make_participant(user_id, first_name=None, last_name="Player", display_name=None):
    first_name = first_name if first_name is not None else user_id
    return ParticipantRecord(
        user_id=user_id,
        first_name=first_name,
        last_name=last_name,
        display_name=display_name if display_name is not None else first_name,
    )


def make_summary(user_id, correct_picks, total_picks, pick_percentage=None):
    if pick_percentage is None:
        pick_percentage = calculate_pick_percentage(correct_picks, total_picks)
    return PickSummary(
        user_id=user_id,
        total_picks=total_picks,
        correct_picks=correct_picks,
        pick_percentage=pick_percentage,
    )
