#!/usr/bin/env python3
"""
Pick'em Standings Management CLI

Command-line access to the standings engine: fetch a game's leaderboard from
the pick'em API, or rank participants and picks summary from local JSON files.
"""

import json
import logging
import sys

import click
from flask import current_app
from flask.cli import with_appcontext

from app import create_app
from app.services.pickem_client import PickemApiClient
from app.services.standings_service import StandingsService, rank_payload
from app.utils.cache_utils import get_cache_stats
from app.utils.errors import StandingsError

app = create_app()


def _echo_standings(result, as_json):
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.standings:
        click.echo("No players in this game.")
        return

    click.echo(f"{'Rank':<6}{'Player':<28}{'Correct':>8}{'Total':>7}{'Pct':>8}")
    for standing in result.standings:
        rank = f"{standing.rank}{'T' if standing.tied else ''}"
        click.echo(
            f"{rank:<6}{standing.display_name[:27]:<28}"
            f"{standing.correct_picks:>8}{standing.total_picks:>7}"
            f"{standing.pick_percentage:>7.1f}%"
        )

    cohort = result.cohort
    click.echo("-" * 57)
    click.echo(f"Leader: {cohort.leader.display_name if cohort.has_leader else 'None'}")
    click.echo(f"Average correct picks: {cohort.average_correct_picks:.1f}")
    click.echo(f"Players: {cohort.participant_count}")


@click.group()
def cli():
    """Pick'em Standings Management CLI"""
    pass


# Standings Commands
@cli.group()
def standings():
    """Standings commands"""
    pass


@standings.command()
@click.argument("game_id")
@click.option("--season", "season_id", required=True, help="Season ID")
@click.option(
    "--week",
    type=click.IntRange(min=1),
    help="Only count picks up to and including this week",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@with_appcontext
def show(game_id, season_id, week, as_json):
    """Fetch and print standings for a game"""
    service = StandingsService.from_config(current_app.config)
    try:
        result = service.get_standings(game_id, season_id, week=week)
    except StandingsError as e:
        click.echo(f"❌ {e.message}", err=True)
        logging.error(f"Standings for game {game_id} failed: {e.message}")
        sys.exit(1)

    _echo_standings(result, as_json)


@standings.command()
@click.argument("participants_file", type=click.File("r"))
@click.argument("summary_file", type=click.File("r"))
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@with_appcontext
def rank(participants_file, summary_file, as_json):
    """Rank participants and picks summary read from JSON files"""
    try:
        participants = json.load(participants_file)
        summary = json.load(summary_file)
    except json.JSONDecodeError as e:
        click.echo(f"❌ Invalid JSON: {e}", err=True)
        sys.exit(1)

    try:
        result = rank_payload(participants, summary)
    except StandingsError as e:
        click.echo(f"❌ {e.message}", err=True)
        sys.exit(1)

    _echo_standings(result, as_json)


@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏈 Pick'em Standings Status")
    click.echo("=" * 40)

    client = PickemApiClient.from_config(current_app.config)
    settings = client.get_status()
    click.echo(f"Upstream: {settings['base_url']}")
    click.echo(
        f"Timeout: {settings['timeout']}s, retries: {settings['max_retries']}"
    )

    if client.ping():
        click.echo("✅ Upstream: Reachable")
    else:
        click.echo("❌ Upstream: Unreachable")

    cache_stats = get_cache_stats()
    click.echo(
        f"Cache: {cache_stats['type']} "
        f"(standings cached {cache_stats['standings_timeout']}s)"
    )


if __name__ == "__main__":
    with app.app_context():
        cli()
