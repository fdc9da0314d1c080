import os
import shlex
import sqlite3
import sys
from typing import Callable, Dict, List, TextIO

from shop.logger import get_logger
from shop.render import build_html_page, build_text_page
from shop.session import ShopSession
from shop.storage import DB_PATH, KeyValueStore

logger = get_logger(__name__)

MODE = os.getenv("MODE", "once").lower()  # "once" or "shell"
OUTPUT_PATH = os.getenv("OUTPUT_PATH", "data/storefront.html")

# Initial criteria for MODE=once
START_SEARCH = os.getenv("STOREFRONT_SEARCH", "")
START_CATEGORY = os.getenv("STOREFRONT_CATEGORY", "all")
START_SORT = os.getenv("STOREFRONT_SORT", "name")
START_PAGE = int(os.getenv("STOREFRONT_PAGE", "1"))
START_VIEW = os.getenv("STOREFRONT_VIEW", "grid")

HELP = """Commands:
  search <text>        filter by title/description/category (debounced)
  category <name|all>  filter by category
  sort <name|price-low|price-high>
  page <n>             go to page n
  view <grid|list>
  clear-filters
  add <id>             add product to cart
  remove <id>          remove product from cart
  qty <id> <+n|-n>     change quantity by delta
  set-qty <id> <n>     set quantity (0 removes)
  clear-cart
  wish <id>            toggle wishlist
  reload [force]       fetch the catalog again
  help | quit"""


def run_once(session: ShopSession, output_path: str = OUTPUT_PATH) -> int:
    if not session.load():
        logger.error("Catalog could not be loaded: %s", session.loader.last_error)

    if START_SEARCH:
        session.set_search(START_SEARCH)
    if START_CATEGORY != "all":
        session.select_category(START_CATEGORY)
    session.select_sort(START_SORT)
    session.set_view_mode(START_VIEW)
    if START_PAGE != 1 and not session.change_page(START_PAGE):
        logger.warning("Page %d is out of range; showing page 1.", START_PAGE)

    html = build_html_page(session.view())
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)
    logger.info("Wrote storefront page to %s", output_path)
    return 0 if session.loader.last_error is None else 1


def _confirm(stdin: TextIO, stdout: TextIO) -> Callable[[], bool]:
    def ask() -> bool:
        stdout.write("Are you sure you want to clear your entire cart? [y/N] ")
        stdout.flush()
        return stdin.readline().strip().lower() in ("y", "yes")
    return ask


def _commands(session: ShopSession, stdin: TextIO, stdout: TextIO) -> Dict[str, Callable[[List[str]], object]]:
    return {
        "search": lambda a: session.search_input(" ".join(a)),
        "category": lambda a: session.select_category(" ".join(a) or "all"),
        "sort": lambda a: session.select_sort(a[0]),
        "page": lambda a: session.change_page(int(a[0])),
        "view": lambda a: session.set_view_mode(a[0]),
        "clear-filters": lambda a: session.clear_filters(),
        "add": lambda a: session.add_to_cart(int(a[0])),
        "remove": lambda a: session.remove_from_cart(int(a[0])),
        "qty": lambda a: session.adjust_quantity(int(a[0]), int(a[1])),
        "set-qty": lambda a: session.update_quantity(int(a[0]), int(a[1])),
        "clear-cart": lambda a: session.clear_cart(_confirm(stdin, stdout)),
        "wish": lambda a: session.toggle_wishlist(int(a[0])),
        "reload": lambda a: session.reload(force=bool(a) and a[0] == "force"),
    }


def run_shell(session: ShopSession, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> int:
    commands = _commands(session, stdin, stdout)
    session.load()
    stdout.write(build_text_page(session.view()))

    while True:
        stdout.write("> ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        try:
            parts = shlex.split(line)
        except ValueError as e:
            stdout.write(f"{e}\n")
            continue
        if not parts:
            continue

        name, args = parts[0].lower(), parts[1:]
        if name in ("quit", "exit"):
            break
        if name == "help":
            stdout.write(HELP + "\n")
            continue

        handler = commands.get(name)
        if handler is None:
            stdout.write(f"Unknown command {name!r}; type 'help'.\n")
            continue

        try:
            handler(args)
        except (IndexError, ValueError) as e:
            logger.debug("Bad input %r: %s", line.strip(), e)
            stdout.write(f"Invalid input: {e or 'missing argument'}\n")
            continue
        except sqlite3.Error as e:
            logger.error("Storage error while running %r: %s", line.strip(), e)
            stdout.write(f"Could not save changes: {e}\n")
            continue

        # No keystrokes arrive while a command runs, so the quiet period has passed
        session.debouncer.flush()
        if session.needs_render:
            stdout.write(build_text_page(session.view()))

    return 0


def main() -> int:
    session = ShopSession(KeyValueStore(DB_PATH))
    if MODE == "shell":
        return run_shell(session)
    return run_once(session)


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as e:
        logger.exception("Fatal storefront error: %s", e)
        raise SystemExit(2)
