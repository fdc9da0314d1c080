import random
import sqlite3

import pytest

from shop.cart import CART_KEY, CartStore
from shop.catalog import parse_products
from shop.models import CartLineItem, CartTotals, PLACEHOLDER_IMAGE, Severity


@pytest.fixture
def products(raw_catalog):
    return {p.id: p for p in parse_products(raw_catalog)}


@pytest.fixture
def cart(kv_store, notifier):
    return CartStore(kv_store, notifier=notifier)


def test_scenario_c_adding_twice_increments(cart, products, kv_store):
    cart.add_to_cart(products[1])
    cart.add_to_cart(products[1])
    assert [(it.id, it.quantity) for it in cart.items] == [(1, 2)]
    assert len(kv_store.get_json(CART_KEY)) == 1
    assert kv_store.get_json(CART_KEY)[0]["quantity"] == 2


def test_add_snapshots_product_fields(cart, products):
    cart.add_to_cart(products[5])
    [item] = cart.items
    assert item == CartLineItem(id=5, title="Unknown Product", price=5.0, image=PLACEHOLDER_IMAGE, quantity=1)


def test_add_unknown_product_reports_not_found(cart, notifier, kv_store):
    assert cart.add_to_cart(None) is False
    assert cart.items == []
    assert kv_store.get(CART_KEY) is None
    [n] = notifier.drain()
    assert (n.severity, n.message) == (Severity.ERROR, "Product not found!")


def test_scenario_d_zero_quantity_removes(cart, products):
    cart.add_to_cart(products[1])
    assert cart.update_quantity(1, 0) is True
    assert cart.quantity_of(1) == 0
    assert all(it.id != 1 for it in cart.items)


def test_update_quantity_sets_value_and_ignores_absent(cart, products):
    cart.add_to_cart(products[2])
    assert cart.update_quantity(2, 7) is True
    assert cart.quantity_of(2) == 7
    assert cart.update_quantity(3, 4) is False
    assert [it.id for it in cart.items] == [2]


def test_update_quantity_rejects_non_integers(cart, products, kv_store):
    cart.add_to_cart(products[1])
    for bad in (2.5, True, "3"):
        with pytest.raises(ValueError):
            cart.update_quantity(1, bad)
    with pytest.raises(ValueError):
        cart.adjust_quantity(1, 0.5)
    assert cart.quantity_of(1) == 1
    assert CartStore(kv_store).items == cart.items


def test_adjust_quantity(cart, products):
    cart.add_to_cart(products[2])
    cart.adjust_quantity(2, +2)
    assert cart.quantity_of(2) == 3
    cart.adjust_quantity(2, -3)
    assert cart.items == []
    assert cart.adjust_quantity(2, +1) is False


def test_remove_absent_is_reported_noop(cart, products, notifier):
    cart.add_to_cart(products[1])
    notifier.drain()
    assert cart.remove_from_cart(99) is False
    assert [it.id for it in cart.items] == [1]
    [n] = notifier.drain()
    assert n.severity is Severity.INFO


def test_totals(cart, products):
    cart.add_to_cart(products[1])
    cart.add_to_cart(products[1])
    cart.add_to_cart(products[3])
    assert cart.totals() == CartTotals(item_count=3, total_price=45.5)


def test_clear_cart(cart, products, kv_store, notifier):
    assert cart.clear_cart() is False
    assert notifier.drain()[0].message == "Cart is already empty!"

    cart.add_to_cart(products[1])
    assert cart.clear_cart(confirm=lambda: False) is False
    assert len(cart.items) == 1

    assert cart.clear_cart(confirm=lambda: True) is True
    assert cart.items == []
    assert kv_store.get_json(CART_KEY) == []


def test_clear_cart_skips_confirmation_when_disabled(kv_store, notifier, products):
    cart = CartStore(kv_store, notifier=notifier, confirm_clear=False)
    cart.add_to_cart(products[1])
    assert cart.clear_cart(confirm=lambda: False) is True


def test_snapshot_survives_catalog_change(cart, kv_store, notifier, raw_catalog):
    cart.add_to_cart(parse_products(raw_catalog)[0])
    raw_catalog[0]["title"] = "Renamed Shoe"
    raw_catalog[0]["price"] = 99
    cart.add_to_cart(parse_products(raw_catalog)[0])
    [item] = cart.items
    assert (item.title, item.price, item.quantity) == ("Red Shoe", 10.0, 2)


def test_items_are_copies(cart, products):
    cart.add_to_cart(products[1])
    cart.items[0].quantity = 50
    assert cart.quantity_of(1) == 1


def test_persistence_round_trip(cart, products, kv_store, notifier):
    for pid in (1, 2, 1, 4):
        cart.add_to_cart(products[pid])
    cart.update_quantity(4, 6)

    reloaded = CartStore(kv_store, notifier=notifier)
    assert reloaded.items == cart.items


def test_load_drops_malformed_and_duplicate_entries(kv_store, notifier):
    kv_store.set_json(CART_KEY, [
        {"id": 1, "title": "A", "price": 2, "image": "a.png", "quantity": 1},
        {"id": 1, "title": "A again", "price": 2, "image": "a.png", "quantity": 4},
        {"id": 2, "title": "B", "price": 3, "image": "b.png", "quantity": 0},
        "junk",
        {"id": 3, "title": "C", "quantity": 2},
    ])
    cart = CartStore(kv_store, notifier=notifier)
    assert [(it.id, it.quantity) for it in cart.items] == [(1, 1), (3, 2)]


def test_load_tolerates_corrupt_storage(kv_store, notifier):
    kv_store.set(CART_KEY, "{not json")
    assert CartStore(kv_store, notifier=notifier).items == []
    kv_store.set_json(CART_KEY, {"id": 1})
    assert CartStore(kv_store, notifier=notifier).items == []


def test_invariants_hold_after_random_operations(cart, products, kv_store):
    rng = random.Random(1234)
    ids = list(products) + [42]
    for _ in range(300):
        pid = rng.choice(ids)
        op = rng.randrange(4)
        if op == 0:
            cart.add_to_cart(products.get(pid))
        elif op == 1:
            cart.remove_from_cart(pid)
        elif op == 2:
            cart.update_quantity(pid, rng.randint(-2, 5))
        else:
            cart.adjust_quantity(pid, rng.choice([-1, 1]))

        items = cart.items
        assert len({it.id for it in items}) == len(items)
        assert all(it.quantity >= 1 for it in items)
        assert kv_store.get_json(CART_KEY, default=[]) == [it.to_dict() for it in items]


def test_failed_write_leaves_cart_unchanged(cart, products, kv_store, notifier, monkeypatch):
    cart.add_to_cart(products[1])
    notifier.drain()

    def locked(key, value):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(kv_store, "set_json", locked)
    for action in (
        lambda: cart.add_to_cart(products[1]),
        lambda: cart.add_to_cart(products[2]),
        lambda: cart.update_quantity(1, 9),
        lambda: cart.remove_from_cart(1),
        lambda: cart.clear_cart(),
    ):
        with pytest.raises(sqlite3.OperationalError):
            action()

    assert [(it.id, it.quantity) for it in cart.items] == [(1, 1)]
    assert notifier.drain() == []
    monkeypatch.undo()
    assert CartStore(kv_store).items == cart.items
