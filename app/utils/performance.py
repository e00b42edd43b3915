"""
Timing for standings computations and requests

Expected failures (StandingsError and its subclasses) are reported by the
code that raises or handles them; the timers only record how long the
attempt took.
"""

import functools
import logging
import time

from flask import current_app, g, has_app_context, has_request_context, request

from app.utils.errors import StandingsError

logger = logging.getLogger(__name__)


def _threshold(key, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def _log_failure(name, elapsed, error):
    if isinstance(error, StandingsError):
        logger.debug(f"{name} gave up after {elapsed:.2f}s: {error.message}")
    else:
        logger.error(f"{name} failed after {elapsed:.2f}s: {error}")


def timer(func):
    """Log calls slower than SLOW_FUNCTION_THRESHOLD and unexpected failures"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_failure(func.__name__, time.perf_counter() - start_time, e)
            raise

        elapsed = time.perf_counter() - start_time
        threshold = _threshold("SLOW_FUNCTION_THRESHOLD", 1.0)
        if elapsed > threshold:
            logger.warning(
                f"Slow function {func.__name__} took {elapsed:.2f}s "
                f"(threshold: {threshold}s)"
            )
        return result

    return wrapper


class PerformanceMonitor:
    """
    Time one block of work and keep the result on ``g``

    The per-request list in ``g.performance_metrics`` is printed by
    log_request_performance when the request turns out slow.
    """

    def __init__(self, operation_name, log_threshold=0.1):
        self.operation_name = operation_name
        self.log_threshold = log_threshold
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time

        if exc_type is None and self.duration > self.log_threshold:
            logger.info(f"{self.operation_name} completed in {self.duration:.3f}s")
        elif exc_type is not None and not issubclass(exc_type, StandingsError):
            logger.error(
                f"{self.operation_name} failed after {self.duration:.3f}s: {exc_val}"
            )

        if has_app_context():
            g.setdefault("performance_metrics", []).append(
                {
                    "operation": self.operation_name,
                    "duration": self.duration,
                    "success": exc_type is None,
                }
            )
        return False


def track_request_performance():
    g.request_start_time = time.perf_counter()


def log_request_performance(response):
    """Warn about requests slower than SLOW_REQUEST_THRESHOLD"""
    if not has_request_context() or "request_start_time" not in g:
        return response

    elapsed = time.perf_counter() - g.request_start_time
    threshold = current_app.config.get("SLOW_REQUEST_THRESHOLD", 2.0)
    if elapsed > threshold:
        breakdown = ", ".join(
            f"{m['operation']} {m['duration']:.3f}s"
            + ("" if m["success"] else " (failed)")
            for m in g.get("performance_metrics", [])
        )
        logger.warning(
            f"Slow request: {request.method} {request.full_path.rstrip('?')} "
            f"returned {response.status_code} after {elapsed:.2f}s "
            f"(threshold: {threshold}s)" + (f" [{breakdown}]" if breakdown else "")
        )

    return response
