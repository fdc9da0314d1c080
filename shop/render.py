import os
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import CartLineItem, Product, ViewMode
from .session import StorefrontView

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

STOREFRONT_THEME = os.getenv("STOREFRONT_THEME", "light").strip().lower()
if STOREFRONT_THEME not in ("light", "dark"):
    STOREFRONT_THEME = "light"

THEMES = {
    "light": {
        "page_bg": "#f8fafc",
        "card_bg": "#ffffff",
        "card_border": "#e5e7eb",
        "text_primary": "#111827",
        "text_secondary": "#4b5563",
        "text_muted": "#9ca3af",
        "accent": "#3b82f6",
        "price": "#16a34a",
        "success": "#22c55e",
        "error": "#ef4444",
        "info": "#3b82f6",
    },
    "dark": {
        "page_bg": "#121212",
        "card_bg": "#1E1E1E",
        "card_border": "#333333",
        "text_primary": "#F1F1F1",
        "text_secondary": "#BBBBBB",
        "text_muted": "#777777",
        "accent": "#8AB4F8",
        "price": "#4CAF50",
        "success": "#4CAF50",
        "error": "#FF6B6B",
        "info": "#8AB4F8",
    },
}


def price_str(amount: float) -> str:
    return f"${amount:.2f}"


def _product_data(product: Product, wishlist: set[int]) -> dict:
    return {
        "id": product.id,
        "title": product.display_title,
        "description": product.display_description,
        "category": product.display_category,
        "price_str": price_str(product.display_price),
        "image_url": product.image_url,
        "wishlisted": product.id in wishlist,
    }


def _cart_data(item: CartLineItem) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "image": item.image,
        "quantity": item.quantity,
        "price_str": price_str(item.price),
        "subtotal_str": price_str(item.subtotal),
    }


def _context(view: StorefrontView) -> dict:
    page = view.page
    wishlist = set(view.wishlist_ids)
    return {
        "products": [_product_data(p, wishlist) for p in page.products],
        "categories": page.categories,
        "criteria": {
            "search": page.criteria.search,
            "category": page.criteria.category,
            "sort": page.criteria.sort.value,
        },
        "grid": page.view_mode is ViewMode.GRID,
        "view_mode": page.view_mode.value,
        "current_page": page.current_page,
        "total_pages": page.total_pages,
        "page_window": page.page_window,
        "results_text": page.results_text,
        "result_count": page.result_count,
        "cart_items": [_cart_data(it) for it in view.cart_items],
        "cart_count": view.cart_totals.item_count,
        "cart_total_str": price_str(view.cart_totals.total_price),
        "wishlist_count": view.wishlist_count,
        "notifications": [
            {"severity": n.severity.value, "message": n.message}
            for n in view.notifications
        ],
        "loading": view.loading,
        "error": view.error,
    }


def build_html_page(view: StorefrontView, theme: str = STOREFRONT_THEME) -> str:
    template = env.get_template("storefront.html")
    ctx = _context(view)
    ctx["colors"] = THEMES.get(theme, THEMES["light"])
    ctx["title"] = "Storefront"
    return template.render(**ctx)


def build_text_page(view: StorefrontView) -> str:
    template = env.get_template("storefront.txt")
    return template.render(**_context(view))
