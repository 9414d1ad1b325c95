import logging
import os
from typing import Any, Dict, Optional, Tuple, Type, Union

import requests
from diskcache import FanoutCache
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lexua.core.exceptions import RateLimitException, ServerError
from lexua.core.rate_limiter import AdaptiveRateLimiter
from lexua.settings import (
    HTTP_CACHE_DIR,
    HTTP_CACHE_TTL,
    HTTP_MAX_RETRIES,
    HTTP_TIMEOUT,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


class HttpClient:
    """A polite HTTP client with a minimum request gap, bounded retries and optional disk caching.

    Transient failures (HTTP 429, 5xx, connection errors and timeouts) are
    retried with exponential backoff of 2, 4, 8... seconds. Any other status
    is returned to the caller unchanged.
    """

    def __init__(
        self,
        max_retries: int = HTTP_MAX_RETRIES,
        initial_delay: float = 2.0,
        max_delay: float = 60.0,
        timeout: Optional[Union[float, tuple]] = HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
        user_agent: str = USER_AGENT,
        retry_exceptions: Optional[tuple[Type[Exception], ...]] = None,
        rate_limiter: Optional[AdaptiveRateLimiter] = None,
        enable_cache: bool = False,
        cache_dir: Optional[str] = None,
        cache_size_limit: int = 500_000_000,  # 500MB default
        cache_ttl: int = HTTP_CACHE_TTL,
    ):
        """
        Initialize the HTTP client.

        Args:
            max_retries: Retry attempts after the first request
            initial_delay: Backoff before the first retry, doubled on each further retry
            max_delay: Maximum delay between retries in seconds
            timeout: Default timeout for requests
            session: Optional requests.Session to use
            user_agent: User-Agent header sent with every request
            retry_exceptions: Tuple of exceptions to retry on. Defaults to transient HTTP failures
            rate_limiter: Limiter enforcing the gap between requests
            enable_cache: Whether to cache successful GET responses on disk
            cache_dir: Directory for cache storage. Defaults to data/cache/http
            cache_size_limit: Maximum cache size in bytes
            cache_ttl: Time to live for cached items in seconds
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "text/html, application/json, */*"})
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.enable_cache = enable_cache
        self.cache_ttl = cache_ttl
        self.rate_limiter = rate_limiter or AdaptiveRateLimiter()

        self.retry_exceptions = retry_exceptions or (
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
            RateLimitException,
            ServerError,
        )

        self._retry_decorator = retry(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.initial_delay,
                min=self.initial_delay,
                max=self.max_delay,
            ),
            retry=retry_if_exception_type(self.retry_exceptions),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        if self.enable_cache:
            cache_dir = cache_dir or HTTP_CACHE_DIR
            os.makedirs(cache_dir, exist_ok=True)
            self._cache = FanoutCache(
                directory=cache_dir,
                size_limit=cache_size_limit,
                timeout=60,
                shards=4,
            )
            logger.debug(f"FanoutCache initialized at {cache_dir} with 4 shards")

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Single attempt; transient failures are raised so the retry policy sees them."""
        self.rate_limiter.wait()
        response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                try:
                    retry_after = int(retry_after)
                except ValueError:
                    retry_after = None

            self.rate_limiter.record_rate_limit(retry_after)

            logger.warning(
                f"Rate limited: {url}",
                extra={
                    "event_type": "rate_limit",
                    "url": url,
                    "retry_after": retry_after,
                    "current_delay": self.rate_limiter.get_current_delay(),
                    "status_code": 429,
                },
            )
            raise RateLimitException(f"Rate limited on {url}", retry_after, body=response.text)

        if response.status_code >= 500:
            logger.warning(
                f"Server error {response.status_code}: {url}",
                extra={"event_type": "server_error", "url": url, "status_code": response.status_code},
            )
            raise ServerError(
                f"Server error {response.status_code} on {url}",
                response.status_code,
                body=response.text,
            )

        self.rate_limiter.record_success()
        return response

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Make an HTTP request with retry logic.

        Raises:
            RateLimitException: If still rate limited once retries are exhausted
            ServerError: If the server still fails once retries are exhausted
            requests.exceptions.RequestException: On persistent network failures
        """
        return self._retry_decorator(self._make_request)(method, url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """Make a GET request."""
        return self.request("GET", url, **kwargs)

    def fetch(self, url: str) -> Tuple[int, str]:
        """Fetch a page as ``(status_code, body_text)``.

        Successful answers are served from and stored in the disk cache when
        it is enabled. A final 429 or 5xx answer is returned like any other
        status rather than raised.
        """
        cached = self._cache_get(url)
        if cached is not None:
            return cached

        try:
            response = self.get(url)
        except RateLimitException as e:
            return 429, e.body
        except ServerError as e:
            return e.status_code, e.body

        # Portals omit the charset; requests would otherwise fall back to Latin-1
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8"
        result = (response.status_code, response.text)
        if response.status_code == 200:
            self._cache_set(url, result)
        return result

    def _cache_get(self, url: str) -> Optional[Tuple[int, str]]:
        if not self.enable_cache:
            return None
        try:
            cached = self._cache.get(f"GET:{url}")
        except Exception as e:
            logger.warning(f"Cache read error for {url}: {e}. Continuing without cache.")
            return None
        if cached is not None:
            logger.debug(f"Cache hit for {url}")
        return cached

    def _cache_set(self, url: str, result: Tuple[int, str]) -> None:
        if not self.enable_cache:
            return
        try:
            self._cache.set(f"GET:{url}", result, expire=self.cache_ttl)
            logger.debug(f"Cached response for {url}")
        except Exception as e:
            logger.warning(f"Cache write error for {url}: {e}. Response returned without caching.")

    def clear_cache(self) -> None:
        """Clear the entire cache."""
        if self.enable_cache:
            self._cache.clear()
            logger.debug("Cache cleared")

    def get_cache_info(self) -> Dict[str, Any]:
        """
        Get information about the current cache state.

        Returns:
            Dict containing cache statistics
        """
        if not self.enable_cache:
            return {"enabled": False}

        return {
            "enabled": True,
            "size": self._cache.volume(),
            "directory": self._cache.directory,
            "ttl": self.cache_ttl,
        }
