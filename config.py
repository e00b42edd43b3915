import os
import warnings

import redis
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


class Config:
    # Upstream pick'em API
    PICKEM_API_BASE_URL = (
        os.environ.get("PICKEM_API_BASE_URL") or "http://localhost:3001/api"
    )
    PICKEM_API_TOKEN = os.environ.get("PICKEM_API_TOKEN")
    PICKEM_API_TIMEOUT = float(os.environ.get("PICKEM_API_TIMEOUT") or 30)
    PICKEM_API_MAX_RETRIES = int(os.environ.get("PICKEM_API_MAX_RETRIES") or 3)
    PICKEM_API_RETRY_DELAY = float(os.environ.get("PICKEM_API_RETRY_DELAY") or 1.0)

    # Caching configuration
    CACHE_TYPE = os.environ.get("CACHE_TYPE", "RedisCache")
    CACHE_DEFAULT_TIMEOUT = int(
        os.environ.get("CACHE_DEFAULT_TIMEOUT", 300)
    )  # 5 minutes
    CACHE_REDIS_URL = os.environ.get("CACHE_REDIS_URL", "redis://localhost:6379/0")
    CACHE_KEY_PREFIX = "pickem_standings:"
    STANDINGS_CACHE_TIMEOUT = int(os.environ.get("STANDINGS_CACHE_TIMEOUT", 60))

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "1000 per hour")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL") or "memory://"

    # Logging configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = os.environ.get("LOG_TO_CONSOLE", "True").lower() == "true"
    LOG_TO_FILE = os.environ.get("LOG_TO_FILE", "True").lower() == "true"
    LOG_DIR = os.environ.get("LOG_DIR", "logs")
    SLOW_FUNCTION_THRESHOLD = float(os.environ.get("SLOW_FUNCTION_THRESHOLD", "1.0"))
    SLOW_REQUEST_THRESHOLD = float(os.environ.get("SLOW_REQUEST_THRESHOLD", "2.0"))

    # Environment detection
    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration with helpful defaults"""

    DEBUG = True

    def __init__(self):
        # Fallback to SimpleCache if Redis isn't available in development
        if self.CACHE_TYPE == "RedisCache":
            try:
                redis.Redis.from_url(self.CACHE_REDIS_URL).ping()
            except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
                self.CACHE_TYPE = "SimpleCache"
                warnings.warn(
                    "Redis not available, falling back to SimpleCache for development.",
                    UserWarning,
                )


class ProductionConfig(Config):
    """Production configuration"""

    DEBUG = False

    def __init__(self):
        if not os.environ.get("PICKEM_API_BASE_URL"):
            warnings.warn(
                "PRODUCTION WARNING: PICKEM_API_BASE_URL not explicitly set! "
                f"Using default {self.PICKEM_API_BASE_URL}.",
                UserWarning,
            )


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    DEBUG = False
    PICKEM_API_BASE_URL = "http://pickem.test/api"
    PICKEM_API_TOKEN = None
    PICKEM_API_MAX_RETRIES = 2
    PICKEM_API_RETRY_DELAY = 0.0
    CACHE_TYPE = "NullCache"
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False
    LOG_TO_CONSOLE = False


# Configuration mapping
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
