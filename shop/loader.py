from enum import Enum
from typing import Any, Callable, List, Optional

from sources.errors import (
    CatalogConnectionError,
    CatalogFetchError,
    CatalogHTTPError,
    CatalogParseError,
    CatalogTimeoutError,
)
from sources.escuelajs import FETCH_LIMIT, FETCH_TIMEOUT_MS

from .cache import ResponseCache
from .catalog import CatalogStore
from .logger import get_logger
from .notify import Notifier

logger = get_logger(__name__)

CACHE_KEY = "products"

FetchFn = Callable[..., List[Any]]

# (page message, notification) per failure kind, most specific first
_FAILURE_MESSAGES = [
    (CatalogTimeoutError, "Request timed out. Please try again.", "Request timed out"),
    (CatalogConnectionError, "Network error. Please check your connection.", "Connection failed"),
    (CatalogParseError, "Failed to parse product data", "Failed to load products"),
    (CatalogHTTPError, "Failed to load products. Please try again.", "Network error occurred"),
    (CatalogFetchError, "Failed to load products. Please try again.", "Failed to load products"),
]


class FetchState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def describe_failure(exc: CatalogFetchError) -> tuple[str, str]:
    for exc_type, page_message, note in _FAILURE_MESSAGES:
        if isinstance(exc, exc_type):
            return page_message, note
    return _FAILURE_MESSAGES[-1][1:]


class CatalogLoader:
    """
    Drives one catalog fetch at a time: cache first, then the source.

    A load() issued while another is running is dropped. Failures move to
    the ERROR state with a readable message and leave the cache alone; there
    is no automatic retry.
    """

    def __init__(
        self,
        fetch: FetchFn,
        catalog: CatalogStore,
        cache: Optional[ResponseCache] = None,
        notifier: Optional[Notifier] = None,
        fetch_limit: int = FETCH_LIMIT,
        timeout_ms: int = FETCH_TIMEOUT_MS,
    ):
        self.fetch = fetch
        self.catalog = catalog
        self.cache = cache or ResponseCache()
        self.notifier = notifier or Notifier()
        self.fetch_limit = fetch_limit
        self.timeout_ms = timeout_ms
        self.state = FetchState.IDLE
        self.last_error: Optional[str] = None
        self._loading = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    def load(self, use_cache: bool = True) -> bool:
        """Returns True when the catalog was (re)populated."""
        if self._loading:
            logger.debug("Catalog load already in progress; ignoring request.")
            return False

        entry = self.cache.get_valid(CACHE_KEY) if use_cache else None
        if entry is not None:
            logger.info("Serving catalog from cache.")
            self.catalog.set_products(entry.data)
            self.state = FetchState.SUCCESS
            self.last_error = None
            return True

        self._loading = True
        self.state = FetchState.LOADING
        try:
            raw = self.fetch(limit=self.fetch_limit, timeout=self.timeout_ms / 1000)
            self.cache.put(CACHE_KEY, raw)
            self.catalog.set_products(raw)
        except CatalogFetchError as exc:
            page_message, note = describe_failure(exc)
            logger.error("Catalog load failed: %s", exc)
            self.state = FetchState.ERROR
            self.last_error = page_message
            self.notifier.error(note)
            return False
        finally:
            self._loading = False

        self.state = FetchState.SUCCESS
        self.last_error = None
        self.notifier.success("Products loaded successfully!")
        return True

    def reload(self, force: bool = False) -> bool:
        """Manual retry; force bypasses a still-valid cache entry without dropping it."""
        return self.load(use_cache=not force)
