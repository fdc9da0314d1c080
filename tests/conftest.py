import pytest

from shop.cache import ResponseCache
from shop.notify import Notifier
from shop.storage import KeyValueStore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubSource:
    """Stands in for a catalog source; records calls and replays a payload or error."""

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else []
        self.error = error
        self.calls = []

    def __call__(self, limit, timeout):
        self.calls.append((limit, timeout))
        if self.error is not None:
            raise self.error
        return self.payload


RAW_CATALOG = [
    {
        "id": 1,
        "title": "Red Shoe",
        "price": 10,
        "description": "Comfortable running shoe",
        "category": {"id": 4, "name": "Shoes"},
        "images": ['["https://img.example/red-shoe.jpg"]'],
    },
    {
        "id": 2,
        "title": "Blue Hat",
        "price": 5,
        "description": "Wool hat for winter",
        "category": {"id": 1, "name": "Clothes"},
        "images": ["https://img.example/blue-hat.jpg"],
    },
    {
        "id": 3,
        "title": "Green Shoe",
        "price": 25.5,
        "description": "Trail shoe",
        "category": {"id": 4, "name": "Shoes"},
        "images": [],
    },
    {
        "id": 4,
        "title": "amber lamp",
        "price": 40,
        "category": {"id": 2, "name": "Electronics"},
        "images": ["  "],
    },
    {
        "id": 5,
        "price": 5,
        "description": "mystery box",
    },
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def raw_catalog():
    return [dict(r) for r in RAW_CATALOG]


@pytest.fixture
def kv_store(tmp_path):
    return KeyValueStore(str(tmp_path / "state.sqlite3"))


@pytest.fixture
def notifier():
    return Notifier(enabled=True)


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def stub_source(raw_catalog):
    return StubSource(payload=raw_catalog)


def _make_products(n: int, price=None):
    return [
        {"id": i, "title": f"P{i:03d}", "price": price if price is not None else i}
        for i in range(1, n + 1)
    ]


@pytest.fixture
def make_products():
    """Factory for n raw product records titled P001..Pn."""
    return _make_products


@pytest.fixture
def source_factory():
    return StubSource
