import json
import os
from pathlib import Path
from typing import Any, List

from shop.logger import get_logger
from .errors import CatalogFetchError, CatalogParseError

logger = get_logger(__name__)

CATALOG_FILE = Path(os.getenv("CATALOG_FILE", "data/products.json"))


def fetch_products(limit: int, timeout: float = 0.0) -> List[Any]:
    """Read a catalog dump (same shape as the REST payload) for offline use."""
    logger.info("Reading catalog from %s (limit=%d)", CATALOG_FILE, limit)
    try:
        text = CATALOG_FILE.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read catalog file %s: %s", CATALOG_FILE, exc)
        raise CatalogFetchError(str(exc)) from exc

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise CatalogParseError(f"{CATALOG_FILE}: {exc}") from exc
    if not isinstance(data, list):
        raise CatalogParseError(f"{CATALOG_FILE}: expected a JSON array")
    return data[:limit]
