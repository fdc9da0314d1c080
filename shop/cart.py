import os
from dataclasses import replace
from typing import Callable, List, Optional

from .logger import get_logger
from .models import CartLineItem, CartTotals, Product
from .notify import Notifier
from .storage import KeyValueStore

logger = get_logger(__name__)

CART_KEY = "cart"
CART_CONFIRM_CLEAR = os.getenv("CART_CONFIRM_CLEAR", "true").lower() == "true"


class CartStore:
    """
    Cart line items keyed by product id, persisted after every mutation.

    Invariants: at most one line item per id, and every quantity is >= 1.
    """

    def __init__(
        self,
        store: KeyValueStore,
        notifier: Optional[Notifier] = None,
        confirm_clear: bool = CART_CONFIRM_CLEAR,
    ):
        self.store = store
        self.notifier = notifier or Notifier()
        self.confirm_clear = confirm_clear
        self._items: List[CartLineItem] = self._load()

    def _load(self) -> List[CartLineItem]:
        raw = self.store.get_json(CART_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("Persisted cart is %s, expected a list; starting empty.", type(raw).__name__)
            return []

        items: List[CartLineItem] = []
        seen = set()
        for entry in raw:
            item = CartLineItem.from_dict(entry)
            if item is None:
                logger.warning("Dropping malformed cart entry: %s", entry)
                continue
            if item.id in seen:
                logger.warning("Dropping duplicate cart entry for product %d.", item.id)
                continue
            seen.add(item.id)
            items.append(item)
        logger.debug("Loaded %d cart line items.", len(items))
        return items

    def _commit(self, items: List[CartLineItem]) -> None:
        # memory only changes once the write has gone through
        self.store.set_json(CART_KEY, [it.to_dict() for it in items])
        self._items = items

    def _find(self, product_id: int) -> Optional[CartLineItem]:
        for it in self._items:
            if it.id == product_id:
                return it
        return None

    @property
    def items(self) -> List[CartLineItem]:
        return [replace(it) for it in self._items]

    def quantity_of(self, product_id: int) -> int:
        item = self._find(product_id)
        return item.quantity if item else 0

    def add_to_cart(self, product: Optional[Product]) -> bool:
        if product is None:
            self.notifier.error("Product not found!")
            return False

        existing = self._find(product.id)
        if existing:
            self._commit([
                replace(it, quantity=it.quantity + 1) if it is existing else it
                for it in self._items
            ])
            self.notifier.success(f"Increased {product.display_title} quantity!")
        else:
            item = CartLineItem(
                id=product.id,
                title=product.display_title,
                price=product.display_price,
                image=product.image_url,
                quantity=1,
            )
            self._commit(self._items + [item])
            self.notifier.success(f"{product.display_title} added to cart!")
        return True

    def remove_from_cart(self, product_id: int) -> bool:
        item = self._find(product_id)
        if item is None:
            self.notifier.info("Item is not in the cart.")
            return False
        self._commit([it for it in self._items if it is not item])
        self.notifier.info(f"{item.title} removed from cart!")
        return True

    def update_quantity(self, product_id: int, quantity: int) -> bool:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"Quantity must be a whole number, got {quantity!r}")
        if quantity <= 0:
            return self.remove_from_cart(product_id)
        item = self._find(product_id)
        if item is None:
            logger.debug("Product %s is not in the cart; quantity unchanged.", product_id)
            return False
        self._commit([
            replace(it, quantity=quantity) if it is item else it
            for it in self._items
        ])
        return True

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValueError(f"Quantity change must be a whole number, got {delta!r}")
        item = self._find(product_id)
        if item is None:
            return False
        return self.update_quantity(product_id, item.quantity + delta)

    def clear_cart(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        if not self._items:
            self.notifier.info("Cart is already empty!")
            return False
        if self.confirm_clear and confirm is not None and not confirm():
            logger.debug("Clearing the cart was not confirmed.")
            return False
        self._commit([])
        self.notifier.success("Cart cleared successfully!")
        return True

    def totals(self) -> CartTotals:
        return CartTotals(
            item_count=sum(it.quantity for it in self._items),
            total_price=sum(it.price * it.quantity for it in self._items),
        )
