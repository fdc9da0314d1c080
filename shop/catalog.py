from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from .filtering import apply_criteria, category_names
from .logger import get_logger
from .models import ALL_CATEGORIES, Criteria, Product, SortKey, ViewMode
from .pagination import PAGE_SIZE, page_slice, page_window, result_range, total_pages

logger = get_logger(__name__)


@dataclass(frozen=True)
class PageView:
    products: List[Product]
    categories: List[str]
    criteria: Criteria
    view_mode: ViewMode
    current_page: int
    total_pages: int
    page_window: List[int]
    result_count: int
    first_index: int
    last_index: int

    @property
    def results_text(self) -> str:
        if self.result_count == 0:
            return "No products found"
        return f"Showing {self.first_index}-{self.last_index} of {self.result_count} products"


def parse_products(raw_items: Iterable[Any]) -> List[Product]:
    products: List[Product] = []
    skipped = 0
    for raw in raw_items:
        product = Product.from_raw(raw)
        if product is None:
            skipped += 1
            continue
        products.append(product)
    if skipped:
        logger.debug("Skipped %d catalog records without a usable id.", skipped)
    return products


class CatalogStore:
    """
    Owns the fetched catalog and the derived, paginated view of it.

    filtered_products is recomputed on every criteria change and never
    persisted; current_page resets to 1 whenever criteria change.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self.all_products: List[Product] = []
        self.filtered_products: List[Product] = []
        self.criteria = Criteria()
        self.current_page = 1
        self.view_mode = ViewMode.GRID
        self.needs_render = False
        self._by_id: Dict[int, Product] = {}

    # -- catalog lifecycle -------------------------------------------------

    def set_products(self, raw_items: Iterable[Any]) -> None:
        """Replace the catalog wholesale and reset to default criteria."""
        self.all_products = parse_products(raw_items)
        self._by_id = {}
        for p in self.all_products:
            self._by_id.setdefault(p.id, p)
        logger.info("Catalog loaded with %d products.", len(self.all_products))
        self.criteria = Criteria()
        self._refilter()

    def get(self, product_id: int) -> Optional[Product]:
        return self._by_id.get(product_id)

    @property
    def categories(self) -> List[str]:
        return category_names(self.all_products)

    # -- criteria ----------------------------------------------------------

    def set_search(self, text: str) -> None:
        self._set_criteria(replace(self.criteria, search=text or ""))

    def set_category(self, category: str) -> None:
        self._set_criteria(replace(self.criteria, category=category or ALL_CATEGORIES))

    def set_sort(self, sort_key: "str | SortKey") -> None:
        self._set_criteria(replace(self.criteria, sort=SortKey.parse(sort_key)))

    def clear_filters(self) -> None:
        self._set_criteria(Criteria())

    def _set_criteria(self, criteria: Criteria) -> None:
        self.criteria = criteria
        self._refilter()

    def _refilter(self) -> None:
        self.filtered_products = apply_criteria(self.all_products, self.criteria)
        self.current_page = 1
        self.needs_render = True
        logger.debug(
            "Filtered to %d of %d products (%s).",
            len(self.filtered_products), len(self.all_products), self.criteria,
        )

    # -- pagination --------------------------------------------------------

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_products), self.page_size)

    def change_page(self, page: int) -> bool:
        if page < 1 or page > self.total_pages:
            logger.debug("Ignoring page %d (valid range 1-%d).", page, self.total_pages)
            return False
        self.current_page = page
        self.needs_render = True
        return True

    def current_page_products(self) -> List[Product]:
        return page_slice(self.filtered_products, self.current_page, self.page_size)

    # -- presentation state ------------------------------------------------

    def set_view_mode(self, mode: "str | ViewMode") -> bool:
        mode = ViewMode.parse(mode)
        if mode is self.view_mode:
            return False
        self.view_mode = mode
        self.needs_render = True
        return True

    def page_view(self) -> PageView:
        count = len(self.filtered_products)
        pages = self.total_pages
        first, last = result_range(count, self.current_page, self.page_size)
        self.needs_render = False
        return PageView(
            products=self.current_page_products(),
            categories=self.categories,
            criteria=self.criteria,
            view_mode=self.view_mode,
            current_page=self.current_page,
            total_pages=pages,
            page_window=page_window(self.current_page, pages),
            result_count=count,
            first_index=first,
            last_index=last,
        )
