"""
Client for the Infinite Craft combine endpoint.

One GET per ordered pair:

    GET {api_url}?first=Water&second=Fire
    -> {"result": "Steam", "emoji": "💨", "isNew": false}

HTTP 429 is a pacing signal, not an error: the client sleeps for the
Retry-After interval plus one second and repeats the identical request.
Every other failure is raised as a CombineError subclass so the caller can
decide what it means for the run.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://neal.fun/api/infinite-craft/pair"
DEFAULT_REFERER = "https://neal.fun/infinite-craft/"
DEFAULT_USER_AGENT = "InfiniteCraft_Mapper/rate-limited"
DEFAULT_RETRY_AFTER = 60
DEFAULT_TIMEOUT = 30.0


class CombineError(Exception):
    """Base class for combine endpoint failures."""

    pass


class RateLimitedError(CombineError):
    """Raised when the rate-limit retry cap is exhausted."""

    def __init__(self, retries: int):
        self.retries = retries
        super().__init__(f"Still rate limited after {retries} retries")


class ClientError(CombineError):
    """Raised for HTTP 4xx responses other than 429."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"API request failed with status code: {status_code}")


class ServerError(CombineError):
    """Raised for HTTP 5xx responses."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"API request failed with status code: {status_code}")


class InvalidResponseError(ServerError):
    """Raised when a 2xx response body cannot be decoded."""

    pass


class TransportError(CombineError):
    """Raised when the request never produced an HTTP response."""

    pass


@dataclass
class CombineResult:
    """Decoded success body of the combine endpoint."""

    result: str
    emoji: str
    is_new: bool

    @classmethod
    def from_json(cls, data: dict) -> "CombineResult":
        """Build from the endpoint's JSON object.

        Raises:
            ValueError: If result is not a non-empty string or emoji is not
                a string.
        """
        result = data["result"]
        emoji = data.get("emoji", "")
        if not isinstance(result, str) or not result:
            raise ValueError(f"result must be a non-empty string, got {result!r}")
        if not isinstance(emoji, str):
            raise ValueError(f"emoji must be a string, got {emoji!r}")
        return cls(result=result, emoji=emoji, is_new=bool(data.get("isNew", False)))


def parse_retry_after(value: str | None, default: int = DEFAULT_RETRY_AFTER) -> int:
    """Parse a Retry-After header given in whole seconds.

    Absent or unparsable values (including HTTP-date forms) fall back to
    default. Negative values are clamped to zero.
    """
    if value is None:
        return default
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return default


class CombineClient:
    """Blocking client for the combine endpoint with 429-aware retry."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        referer: str = DEFAULT_REFERER,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        default_retry_after: int = DEFAULT_RETRY_AFTER,
        max_rate_limit_retries: int | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client.

        Args:
            api_url: Combine endpoint URL.
            referer: Value of the Referer header sent with every request.
            user_agent: Value of the User-Agent header sent with every request.
            timeout: Per-request timeout in seconds.
            default_retry_after: Seconds to wait on 429 when Retry-After is
                missing or unparsable.
            max_rate_limit_retries: Cap on consecutive 429 retries for one
                pair. None retries until the endpoint answers.
            session: Optional requests.Session (tests pass a fake).
            sleep: Sleep function used for rate-limit waits.
        """
        self.api_url = api_url
        self.referer = referer
        self.user_agent = user_agent
        self.timeout = timeout
        self.default_retry_after = default_retry_after
        self.max_rate_limit_retries = max_rate_limit_retries
        self._session = session or requests.Session()
        self._sleep = sleep

    def _get_headers(self) -> dict[str, str]:
        return {"Referer": self.referer, "User-Agent": self.user_agent}

    def combine(self, first: str, second: str) -> CombineResult:
        """Ask the endpoint what first + second produces.

        Blocks through any number of 429 responses (up to
        max_rate_limit_retries when set).

        Raises:
            RateLimitedError: If the retry cap is exceeded.
            ClientError: On any other 4xx response.
            ServerError: On a 5xx response or an undecodable body.
            TransportError: If no HTTP response was received.
        """
        params = {"first": first, "second": second}
        retries = 0

        while True:
            logger.debug(f"Calling API: {self.api_url} first={first!r} second={second!r}")
            try:
                response = self._session.get(
                    self.api_url,
                    params=params,
                    headers=self._get_headers(),
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise TransportError(f"Request for ({first}, {second}) failed: {e}") from e

            if response.status_code != 429:
                break

            if (
                self.max_rate_limit_retries is not None
                and retries >= self.max_rate_limit_retries
            ):
                raise RateLimitedError(retries)

            retry_after = parse_retry_after(
                response.headers.get("Retry-After"), self.default_retry_after
            )
            retries += 1
            logger.warning(
                f"Rate limited on ({first}, {second}); "
                f"sleeping {retry_after + 1}s (retry {retries})"
            )
            self._sleep(retry_after + 1)

        if 400 <= response.status_code < 500:
            raise ClientError(response.status_code)
        if response.status_code >= 500:
            raise ServerError(response.status_code)

        try:
            return CombineResult.from_json(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidResponseError(
                response.status_code, f"Invalid response body for ({first}, {second}): {e}"
            ) from e

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "CombineClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
