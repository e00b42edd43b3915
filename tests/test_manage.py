import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

import manage
from app.models import StandingsResult
from app.utils.errors import UpstreamFetchError


@pytest.fixture
def runner():
    with manage.app.app_context():
        yield CliRunner()


@pytest.fixture
def input_files(tmp_path):
    participants = tmp_path / "participants.json"
    participants.write_text(
        json.dumps(
            [
                {"user_id": "A", "display_name": "Ann"},
                {"user_id": "B", "display_name": "Bob"},
            ]
        )
    )
    summary = tmp_path / "summary.json"
    summary.write_text(
        json.dumps(
            {
                "summary": [
                    {"user_id": "A", "total_picks": 5, "correct_picks": 3, "pick_percentage": 60.0},
                    {"user_id": "B", "total_picks": 10, "correct_picks": 3, "pick_percentage": 30.0},
                ]
            }
        )
    )
    return str(participants), str(summary)


def test_rank_table(runner, input_files):
    result = runner.invoke(manage.cli, ["standings", "rank", *input_files])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[1].startswith("1")
    assert "Ann" in lines[1]
    assert lines[2].startswith("2")
    assert "Leader: Ann" in result.output
    assert "Players: 2" in result.output


def test_rank_json(runner, input_files):
    result = runner.invoke(manage.cli, ["standings", "rank", *input_files, "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [p["user_id"] for p in data["standings"]] == ["A", "B"]
    assert data["cohort"]["participant_count"] == 2


def test_rank_rejects_broken_counts(runner, tmp_path, input_files):
    summary = tmp_path / "bad.json"
    summary.write_text(
        json.dumps([{"user_id": "A", "total_picks": 1, "correct_picks": 2, "pick_percentage": 100}])
    )

    result = runner.invoke(manage.cli, ["standings", "rank", input_files[0], str(summary)])

    assert result.exit_code == 1


def test_show_prints_empty_game(runner):
    with patch.object(
        manage.StandingsService, "get_standings", return_value=StandingsResult()
    ):
        result = runner.invoke(manage.cli, ["standings", "show", "g1", "--season", "s1"])

    assert result.exit_code == 0, result.output
    assert "No players in this game." in result.output


def test_show_upstream_failure(runner):
    with patch.object(
        manage.StandingsService,
        "get_standings",
        side_effect=UpstreamFetchError("Failed to load participants", source="participants"),
    ):
        result = runner.invoke(manage.cli, ["standings", "show", "g1", "--season", "s1"])

    assert result.exit_code == 1


def test_show_passes_week_through(runner):
    with patch.object(
        manage.StandingsService, "get_standings", return_value=StandingsResult()
    ) as get_standings:
        result = runner.invoke(
            manage.cli, ["standings", "show", "g1", "--season", "s1", "--week", "3"]
        )

    assert result.exit_code == 0, result.output
    get_standings.assert_called_once_with("g1", "s1", week=3)
