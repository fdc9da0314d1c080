import unicodedata
from typing import Iterable, List, Optional

from .models import ALL_CATEGORIES, Criteria, Product, SortKey


def _contains(field: Optional[str], query: str) -> bool:
    return bool(field) and query in field.lower()


def matches_search(product: Product, query: str) -> bool:
    """Substring match on title, description or category name; absent fields never match."""
    if not query:
        return True
    query = query.lower()
    return (
        _contains(product.title, query)
        or _contains(product.description, query)
        or _contains(product.category_name, query)
    )


def matches_category(product: Product, category: str) -> bool:
    if category == ALL_CATEGORIES:
        return True
    return product.category_name == category


def _name_key(product: Product) -> tuple[str, str]:
    title = product.title or ""
    folded = unicodedata.normalize("NFKD", title)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return folded, title


def _price(product: Product) -> float:
    return product.price if product.price is not None else 0.0


def sort_products(products: Iterable[Product], sort_key: SortKey) -> List[Product]:
    """
    Return a new list ordered by sort_key.

    sorted() is stable, so equal keys keep fetch order. price-high uses
    reverse=True, which Python also keeps stable for ties.
    """
    sort_key = SortKey.parse(sort_key)
    if sort_key is SortKey.PRICE_LOW:
        return sorted(products, key=_price)
    if sort_key is SortKey.PRICE_HIGH:
        return sorted(products, key=_price, reverse=True)
    return sorted(products, key=_name_key)


def apply_criteria(products: Iterable[Optional[Product]], criteria: Criteria) -> List[Product]:
    query = criteria.search.lower()
    selected = [
        p
        for p in products
        if p is not None
        and matches_search(p, query)
        and matches_category(p, criteria.category)
    ]
    return sort_products(selected, criteria.sort)


def category_names(products: Iterable[Optional[Product]]) -> List[str]:
    """Distinct category names in first-seen order."""
    seen: dict[str, None] = {}
    for p in products:
        if p is not None and p.category_name:
            seen.setdefault(p.category_name, None)
    return list(seen)
