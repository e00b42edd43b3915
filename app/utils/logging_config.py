"""
Logging configuration for the standings service

Every record carries the standings view it belongs to (game, season and
week). Inside a request the view comes from the URL; service code outside a
request passes it through StandingsLogAdapter.
"""

import logging
import logging.handlers
import os

from flask import has_request_context, request

CONTEXT_FIELDS = ("game_id", "season_id", "week")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
    "[game=%(game_id)s season=%(season_id)s week=%(week)s]"
)
ERROR_FORMAT = FILE_FORMAT + " [%(pathname)s:%(lineno)d] [%(method)s %(path)s]"


def _request_view():
    view_args = request.view_args or {}
    return {
        "game_id": view_args.get("game_id"),
        "season_id": request.args.get("season_id"),
        "week": request.args.get("week"),
    }


class StandingsContextFilter(logging.Filter):
    """Fill in the standings view and request line on every record"""

    def filter(self, record):
        view = _request_view() if has_request_context() else {}
        for field in CONTEXT_FIELDS:
            if getattr(record, field, None) is None:
                setattr(record, field, view.get(field) or "-")

        if has_request_context():
            record.method = request.method
            record.path = request.path
        else:
            record.method = "-"
            record.path = "-"
        return True


class StandingsLogAdapter(logging.LoggerAdapter):
    """Logger bound to one (game, season, week) view"""

    def __init__(self, logger, game_id=None, season_id=None, week=None):
        super().__init__(
            logger, {"game_id": game_id, "season_id": season_id, "week": week}
        )

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class ColoredFormatter(logging.Formatter):
    """Colour the level name on an interactive console"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # File handlers share the record and must see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _rotating_handler(path, level, fmt, max_bytes, backup_count):
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(StandingsContextFilter())
    return handler


def setup_logging(app):
    """
    Configure root logging for the app

    Console output is coloured in debug mode. With LOG_TO_FILE the service
    writes standings.log and a separate errors.log under LOG_DIR.
    """
    log_level = getattr(logging, app.config.get("LOG_LEVEL", "INFO").upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # pytest owns the root handlers under test
    if not app.testing:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    if app.config.get("LOG_TO_CONSOLE", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        if app.debug:
            console_handler.setFormatter(
                ColoredFormatter(
                    FILE_FORMAT.replace("%(asctime)s", "%(asctime)s.%(msecs)03d"),
                    datefmt="%H:%M:%S",
                )
            )
        else:
            console_handler.setFormatter(
                logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
        console_handler.addFilter(StandingsContextFilter())
        root_logger.addHandler(console_handler)

    if app.config.get("LOG_TO_FILE", True):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)

        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "standings.log"),
                log_level,
                FILE_FORMAT,
                max_bytes=10 * 1024 * 1024,
                backup_count=5,
            )
        )
        root_logger.addHandler(
            _rotating_handler(
                os.path.join(log_dir, "errors.log"),
                logging.ERROR,
                ERROR_FORMAT,
                max_bytes=5 * 1024 * 1024,
                backup_count=3,
            )
        )

    for name in ("werkzeug", "urllib3", "requests", "flask_limiter"):
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.info(f"Logging configured - Level: {logging.getLevelName(log_level)}")
