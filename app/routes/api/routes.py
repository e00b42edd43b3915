from functools import wraps

from flask import current_app, jsonify, request

from app.routes.api import bp
from app.services.standings_service import StandingsService, rank_payload
from app.utils.cache_utils import cached_route
from app.utils.errors import UpstreamFetchError


def add_security_headers(f):
    """Add security headers to API responses"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = current_app.make_response(f(*args, **kwargs))
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Cache-Control"] = (
            "no-store, no-cache, must-revalidate, max-age=0"
        )
        return response

    return decorated_function


def get_standings_service():
    """Standings service for the current app, built once from its config"""
    service = current_app.extensions.get("standings_service")
    if service is None:
        service = StandingsService.from_config(current_app.config)
        current_app.extensions["standings_service"] = service
    return service


def _standings_args():
    """Read season_id and week from the query string"""
    season_id = request.args.get("season_id", "").strip()
    if not season_id:
        return None, None, "No season specified"

    week = request.args.get("week")
    if week is None or week == "":
        return season_id, None, None
    try:
        week = int(week)
    except ValueError:
        return season_id, None, f"Invalid week: {week}"
    if week < 1:
        return season_id, None, f"Invalid week: {week}"
    return season_id, week, None


@bp.route("/health")
def health():
    """Liveness check"""
    return jsonify({"status": "ok"})


@bp.route("/games/<game_id>/standings")
@cached_route(key_prefix="standings")
def game_standings(game_id):
    """Ranked standings for a game, counting picks up to and including ?week="""
    season_id, week, error = _standings_args()
    if error:
        return jsonify({"error": error}), 400

    result = get_standings_service().get_standings(game_id, season_id, week=week)
    return result.to_dict()


@bp.route("/games/<game_id>/survivor")
@cached_route(key_prefix="survivor")
def survivor_standings(game_id):
    """Alive/eliminated standings for a survivor game"""
    season_id, week, error = _standings_args()
    if error:
        return jsonify({"error": error}), 400

    return get_standings_service().get_survivor_standings(
        game_id, season_id, week=week
    )


@bp.route("/standings", methods=["POST"])
@add_security_headers
def rank_standings():
    """Rank participants and picks summary supplied in the request body"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    if "participants" not in data:
        return jsonify({"error": "No participants provided"}), 400

    try:
        result = rank_payload(data["participants"], data.get("summary", []))
    except UpstreamFetchError as e:
        # Malformed input here is the caller's, not an upstream failure
        return jsonify({"error": e.message}), 400
    return result.to_dict()
