import logging
import os

from flask import Flask, jsonify, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import config

logger = logging.getLogger(__name__)

cache = Cache()


def get_real_ip():
    """
    Get the real client IP address, accounting for reverse proxies.
    Checks X-Forwarded-For, X-Real-IP, and falls back to remote_addr.
    """
    # X-Forwarded-For: client, proxy1, proxy2, ...
    if request.headers.get("X-Forwarded-For"):
        return request.headers.get("X-Forwarded-For").split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers.get("X-Real-IP")
    return get_remote_address()


limiter = Limiter(key_func=get_real_ip)


def create_app(config_name=None):
    app = Flask(__name__)

    # Determine configuration
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app.config.from_object(config[config_name]())

    # Setup logging before anything logs
    from app.utils.logging_config import setup_logging

    setup_logging(app)

    # Initialize extensions
    cache.init_app(app)
    limiter.init_app(app)

    from app.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # Request timing
    from app.utils.performance import log_request_performance, track_request_performance

    app.before_request(track_request_performance)
    app.after_request(log_request_performance)

    register_error_handlers(app)

    logger.info(
        f"Standings service starting with '{config_name}' configuration, "
        f"upstream {app.config.get('PICKEM_API_BASE_URL')}"
    )

    return app


def register_error_handlers(app):
    """Register global error handlers"""
    from app.utils.errors import StandingsError

    @app.after_request
    def after_request(response):
        # Add security headers to all responses
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        if not app.config.get("DEBUG"):
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response

    @app.errorhandler(StandingsError)
    def handle_standings_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(400)
    def bad_request_error(error):
        app.logger.warning(
            f"400 Bad Request: {str(error)} - Path: {request.path} - Method: {request.method}"
        )
        return jsonify({"error": "Bad request"}), 400

    @app.errorhandler(429)
    def too_many_requests_error(error):
        return jsonify({"error": "Too many requests"}), 429

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({"error": "Internal server error"}), 500
