from typing import List

from .logger import get_logger
from .storage import KeyValueStore

logger = get_logger(__name__)

WISHLIST_KEY = "wishlist"


class WishlistStore:
    """Set of product ids, persisted independently of the cart."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        raw = store.get_json(WISHLIST_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("Persisted wishlist is not a list; starting empty.")
            raw = []
        # dict keeps insertion order and drops duplicates
        self._ids = dict.fromkeys(
            i for i in raw if isinstance(i, int) and not isinstance(i, bool)
        )

    def toggle(self, product_id: int) -> bool:
        """Flip membership; returns True if the id is now in the wishlist."""
        ids = dict(self._ids)
        present = product_id not in ids
        if present:
            ids[product_id] = None
        else:
            del ids[product_id]
        self.store.set_json(WISHLIST_KEY, list(ids))
        self._ids = ids
        return present

    def contains(self, product_id: int) -> bool:
        return product_id in self._ids

    @property
    def ids(self) -> List[int]:
        return list(self._ids)

    @property
    def count(self) -> int:
        return len(self._ids)
