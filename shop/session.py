import os
from dataclasses import dataclass
from typing import Callable, List, Optional

from sources import SOURCES

from .cache import ResponseCache
from .cart import CartStore
from .catalog import CatalogStore, PageView
from .debounce import Debouncer
from .loader import CatalogLoader, FetchFn, FetchState
from .logger import get_logger
from .models import CartLineItem, CartTotals, Notification
from .notify import Notifier
from .storage import KeyValueStore
from .wishlist import WishlistStore

logger = get_logger(__name__)

CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", "escuelajs").strip().lower()


@dataclass(frozen=True)
class StorefrontView:
    page: PageView
    cart_items: List[CartLineItem]
    cart_totals: CartTotals
    wishlist_ids: List[int]
    notifications: List[Notification]
    fetch_state: FetchState
    error: Optional[str]

    @property
    def wishlist_count(self) -> int:
        return len(self.wishlist_ids)

    @property
    def loading(self) -> bool:
        return self.fetch_state is FetchState.LOADING


def resolve_source(name: str = CATALOG_SOURCE) -> FetchFn:
    fetch = SOURCES.get(name)
    if fetch is None:
        raise ValueError(f"No catalog source registered for {name!r} (known: {', '.join(SOURCES)})")
    return fetch


class ShopSession:
    """
    One storefront session: the stores plus the event intake used by a
    render adapter.

    Every handler mutates state synchronously; the adapter pulls view()
    afterwards.
    """

    def __init__(
        self,
        store: KeyValueStore,
        fetch: Optional[FetchFn] = None,
        catalog: Optional[CatalogStore] = None,
        cache: Optional[ResponseCache] = None,
        notifier: Optional[Notifier] = None,
        debouncer: Optional[Debouncer] = None,
    ):
        self.notifier = notifier or Notifier()
        self.catalog = catalog or CatalogStore()
        self.loader = CatalogLoader(
            fetch or resolve_source(),
            self.catalog,
            cache=cache,
            notifier=self.notifier,
        )
        self.cart = CartStore(store, notifier=self.notifier)
        self.wishlist = WishlistStore(store)
        self.debouncer = debouncer or Debouncer()
        self._dirty = True

    # -- catalog events ----------------------------------------------------

    def load(self) -> bool:
        return self.loader.load()

    def reload(self, force: bool = False) -> bool:
        return self.loader.reload(force=force)

    def search_input(self, text: str) -> None:
        """Keystroke-level search input; applied once typing pauses."""
        self.debouncer.schedule(self.catalog.set_search, text)

    def set_search(self, text: str) -> None:
        self.debouncer.cancel()
        self.catalog.set_search(text)

    def tick(self) -> bool:
        return self.debouncer.poll()

    def select_category(self, category: str) -> None:
        self.catalog.set_category(category)

    def select_sort(self, sort_key: str) -> None:
        self.catalog.set_sort(sort_key)

    def change_page(self, page: int) -> bool:
        return self.catalog.change_page(page)

    def set_view_mode(self, mode: str) -> bool:
        return self.catalog.set_view_mode(mode)

    def clear_filters(self) -> None:
        self.debouncer.cancel()
        self.catalog.clear_filters()
        self.notifier.info("Filters cleared successfully!")

    # -- cart / wishlist events --------------------------------------------

    def add_to_cart(self, product_id: int) -> bool:
        changed = self.cart.add_to_cart(self.catalog.get(product_id))
        self._dirty = self._dirty or changed
        return changed

    def remove_from_cart(self, product_id: int) -> bool:
        changed = self.cart.remove_from_cart(product_id)
        self._dirty = self._dirty or changed
        return changed

    def update_quantity(self, product_id: int, quantity: int) -> bool:
        changed = self.cart.update_quantity(product_id, quantity)
        self._dirty = self._dirty or changed
        return changed

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        changed = self.cart.adjust_quantity(product_id, delta)
        self._dirty = self._dirty or changed
        return changed

    def clear_cart(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        changed = self.cart.clear_cart(confirm)
        self._dirty = self._dirty or changed
        return changed

    def toggle_wishlist(self, product_id: int) -> bool:
        product = self.catalog.get(product_id)
        if product is None:
            logger.debug("Wishlist toggle for unknown product %s ignored.", product_id)
            self.notifier.error("Product not found!")
            return False
        if self.wishlist.toggle(product_id):
            self.notifier.success(f"{product.display_title} added to wishlist!")
        else:
            self.notifier.info(f"{product.display_title} removed from wishlist!")
        self._dirty = True
        return True

    # -- output ------------------------------------------------------------

    @property
    def needs_render(self) -> bool:
        return self.catalog.needs_render or self._dirty or bool(self.notifier.pending)

    def view(self) -> StorefrontView:
        self._dirty = False
        return StorefrontView(
            page=self.catalog.page_view(),
            cart_items=self.cart.items,
            cart_totals=self.cart.totals(),
            wishlist_ids=self.wishlist.ids,
            notifications=self.notifier.drain(),
            fetch_state=self.loader.state,
            error=self.loader.last_error,
        )
