import datetime
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pytz

DEFAULT_TITLE = "Unknown Product"
UNCATEGORIZED = "Uncategorized"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x400/f8fafc/64748b?text=No+Image"
ALL_CATEGORIES = "all"

_IMAGE_JUNK = str.maketrans("", "", '[]"')


class SortKey(str, Enum):
    NAME = "name"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"

    @classmethod
    def parse(cls, value: "str | SortKey") -> "SortKey":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown sort key {value!r} (expected one of: {choices})") from None


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"

    @classmethod
    def parse(cls, value: "str | ViewMode") -> "ViewMode":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown view mode {value!r} (expected grid or list)") from None


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _optional_price(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return float(value)


def sanitize_image_url(images: Any) -> str:
    """
    Pick the first usable image URL.

    The upstream API sometimes returns entries like '["https://..."]'
    (a JSON list serialized into a single string), so brackets and quotes
    are stripped before use.
    """
    if not isinstance(images, (list, tuple)) or not images:
        return PLACEHOLDER_IMAGE
    first = images[0]
    if not isinstance(first, str):
        return PLACEHOLDER_IMAGE
    url = first.translate(_IMAGE_JUNK).strip()
    return url or PLACEHOLDER_IMAGE


@dataclass(frozen=True)
class Product:
    """
    A catalog product as received from the source.

    Raw fields keep None when the record lacked them; display_* fields hold
    the defaults resolved once at ingestion.
    """
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category_name: Optional[str] = None
    images: tuple[str, ...] = ()
    display_title: str = DEFAULT_TITLE
    display_description: str = ""
    display_price: float = 0.0
    display_category: str = UNCATEGORIZED
    image_url: str = PLACEHOLDER_IMAGE

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Product"]:
        """Build a Product from one raw API record, or None if it has no usable id."""
        if not isinstance(raw, dict):
            return None
        pid = raw.get("id")
        if isinstance(pid, bool) or not isinstance(pid, int):
            return None

        title = _optional_text(raw.get("title"))
        description = _optional_text(raw.get("description"))
        price = _optional_price(raw.get("price"))
        category = raw.get("category")
        category_name = _optional_text(category.get("name")) if isinstance(category, dict) else None
        images = raw.get("images")
        image_list = tuple(i for i in images if isinstance(i, str)) if isinstance(images, list) else ()

        return cls(
            id=pid,
            title=title,
            description=description,
            price=price,
            category_name=category_name,
            images=image_list,
            display_title=title or DEFAULT_TITLE,
            display_description=description or "",
            display_price=price if price is not None else 0.0,
            display_category=category_name or UNCATEGORIZED,
            image_url=sanitize_image_url(images),
        )


@dataclass
class CartLineItem:
    """
    One cart entry. title/price/image are snapshots taken when the product
    was first added and are not refreshed from later catalog fetches.
    """
    id: int
    title: str
    price: float
    image: str
    quantity: int = 1

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CartLineItem"]:
        if not isinstance(data, dict):
            return None
        pid = data.get("id")
        qty = data.get("quantity")
        if isinstance(pid, bool) or not isinstance(pid, int):
            return None
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
            return None
        price = _optional_price(data.get("price"))
        return cls(
            id=pid,
            title=_optional_text(data.get("title")) or DEFAULT_TITLE,
            price=price if price is not None else 0.0,
            image=_optional_text(data.get("image")) or PLACEHOLDER_IMAGE,
            quantity=qty,
        )


@dataclass(frozen=True)
class CartTotals:
    item_count: int
    total_price: float


@dataclass(frozen=True)
class Notification:
    severity: Severity
    message: str
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(tz=pytz.UTC)
    )


@dataclass(frozen=True)
class Criteria:
    search: str = ""
    category: str = ALL_CATEGORIES
    sort: SortKey = SortKey.NAME
