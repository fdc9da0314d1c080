import os
from typing import Any, List

import requests

from shop.logger import get_logger
from .errors import (
    CatalogConnectionError,
    CatalogFetchError,
    CatalogHTTPError,
    CatalogParseError,
    CatalogTimeoutError,
)

logger = get_logger(__name__)

CATALOG_URL = os.getenv("CATALOG_URL", "https://api.escuelajs.co/api/v1/products")
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "100"))
FETCH_TIMEOUT_MS = int(os.getenv("FETCH_TIMEOUT_MS", "8000"))
USER_AGENT = os.getenv("CATALOG_USER_AGENT", "storefront/0.1 (+python-requests)")

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})


def fetch_products(limit: int = FETCH_LIMIT, timeout: float = FETCH_TIMEOUT_MS / 1000) -> List[Any]:
    """
    Fetch raw product records from the REST endpoint.

    Makes exactly one request; retrying is left to the caller. Raises a
    CatalogFetchError subclass on timeout, connection failure, non-200
    status, or a payload that is not a JSON array.
    """
    logger.info("Fetching catalog from %s (limit=%d)", CATALOG_URL, limit)
    try:
        resp = SESSION.get(CATALOG_URL, params={"limit": limit}, timeout=timeout)
    except requests.Timeout as exc:
        logger.warning("Catalog request to %s timed out after %.1fs.", CATALOG_URL, timeout)
        raise CatalogTimeoutError(str(exc)) from exc
    except requests.ConnectionError as exc:
        logger.warning("Catalog request to %s failed to connect: %s", CATALOG_URL, exc)
        raise CatalogConnectionError(str(exc)) from exc
    except requests.RequestException as exc:
        logger.warning("Catalog request to %s failed: %s", CATALOG_URL, exc)
        raise CatalogFetchError(str(exc)) from exc

    if resp.status_code != 200:
        logger.warning("Catalog endpoint returned status %s at %s.", resp.status_code, resp.url)
        raise CatalogHTTPError(resp.status_code, CATALOG_URL)

    try:
        data = resp.json()
    except ValueError as exc:
        logger.error("Catalog response from %s is not valid JSON: %s", CATALOG_URL, exc)
        raise CatalogParseError(str(exc)) from exc

    if not isinstance(data, list):
        logger.error("Catalog response from %s is %s, expected a list.", CATALOG_URL, type(data).__name__)
        raise CatalogParseError(f"expected a JSON array, got {type(data).__name__}")

    logger.debug("Catalog response sample: %s", data[:2])
    logger.info("Fetched %d raw product records.", len(data))
    return data
