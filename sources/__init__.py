from . import escuelajs
from . import local

SOURCES = {
    "escuelajs": escuelajs.fetch_products,
    "local": local.fetch_products,
}
