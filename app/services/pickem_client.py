import logging
import time
from functools import wraps

import requests

from app.utils.errors import UpstreamFetchError
from app.utils.validation import PARTICIPANTS, PICKS, SUMMARY

logger = logging.getLogger(__name__)


def retry_decorator(base_delay=1.0, backoff_factor=2.0):
    """
    Decorator to retry upstream requests with exponential backoff

    Retries connection errors, timeouts, 429 and 5xx responses. Other HTTP
    errors are raised straight away. The number of attempts comes from the
    client's max_retries and the delay can be scaled with retry_delay.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            max_retries = max(1, self.max_retries)
            for attempt in range(max_retries):
                try:
                    return func(self, *args, **kwargs)
                except requests.exceptions.HTTPError as e:
                    status = e.response.status_code if e.response is not None else 0
                    if status != 429 and status < 500:
                        raise
                    if attempt == max_retries - 1:
                        raise
                    delay = _retry_after(e.response) or self.retry_delay * base_delay * (
                        backoff_factor**attempt
                    )
                    logger.warning(
                        f"Upstream returned {status}. Waiting {delay}s before retry "
                        f"{attempt + 1}/{max_retries}"
                    )
                    time.sleep(delay)
                except (
                    requests.exceptions.ConnectionError,
                    requests.exceptions.Timeout,
                ) as e:
                    if attempt == max_retries - 1:
                        raise
                    delay = self.retry_delay * base_delay * (backoff_factor**attempt)
                    logger.warning(
                        f"Request failed: {e}. Waiting {delay}s before retry "
                        f"{attempt + 1}/{max_retries}"
                    )
                    time.sleep(delay)

        return wrapper

    return decorator


def _retry_after(response):
    if response is None or response.status_code != 429:
        return None
    try:
        return float(response.headers.get("Retry-After"))
    except (TypeError, ValueError):
        return None


class PickemApiClient:
    """
    Reads game participants and picks summaries from the pick'em API
    """

    def __init__(
        self, base_url, token=None, timeout=30, max_retries=3, retry_delay=1.0
    ):
        if not base_url:
            raise ValueError("Pick'em API base URL is not configured")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "Pickem-Standings/1.0", "Accept": "application/json"}
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def __repr__(self):
        return f"<PickemApiClient {self.base_url}>"

    @classmethod
    def from_config(cls, config):
        """Build a client from a Flask config mapping"""
        return cls(
            base_url=config.get("PICKEM_API_BASE_URL"),
            token=config.get("PICKEM_API_TOKEN"),
            timeout=config.get("PICKEM_API_TIMEOUT", 30),
            max_retries=config.get("PICKEM_API_MAX_RETRIES", 3),
            retry_delay=config.get("PICKEM_API_RETRY_DELAY", 1.0),
        )

    @retry_decorator(base_delay=1.0)
    def _make_api_request(self, path, params=None):
        """Make API request with retry logic"""
        url = f"{self.base_url}{path}"
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response

    def _get_json(self, path, source, params=None):
        try:
            response = self._make_api_request(path, params=params)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.error(f"Failed to fetch {source}: HTTP {status} from {path}")
            raise UpstreamFetchError(
                f"Failed to load {source}: upstream returned HTTP {status}",
                source=source,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch {source} from {path}: {e}")
            raise UpstreamFetchError(
                f"Failed to load {source}: {e}", source=source
            ) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Malformed JSON for {source} from {path}")
            raise UpstreamFetchError(
                f"Failed to load {source}: response is not valid JSON",
                source=source,
            ) from e

    def get_game(self, game_id):
        """Fetch game detail, including its participants"""
        return self._get_json(f"/games/{game_id}", PARTICIPANTS)

    def get_picks_summary(self, game_id, season_id):
        """Fetch per-user season pick totals for a game"""
        return self._get_json(
            f"/picks/game/{game_id}/summary", SUMMARY, params={"seasonId": season_id}
        )

    def get_user_picks(self, game_id, season_id, user_id):
        """Fetch one user's individual picks for a game and season"""
        params = {"gameId": game_id, "seasonId": season_id, "userId": user_id}
        return self._get_json("/picks", PICKS, params=params)

    def ping(self):
        """Return True if the upstream health endpoint answers"""
        try:
            response = self.session.get(
                f"{self.base_url}/health", timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"Upstream health check failed: {e}")
            return False
        return response.ok

    def get_status(self):
        """Connection settings, for status output"""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }
