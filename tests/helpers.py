"""Test doubles shared by the cart tests."""
from copy import deepcopy
from types import SimpleNamespace

from shopping_cart.cart import CanBeBought

# Row ids for identifier 1 / 2 without options and with a color option
ROW_ID_1 = "0e300612089636a92fda8baceea3d4f9"
ROW_ID_2 = "59a8003a7916d7d3712fde0ee9c0ba7d"
ROW_ID_1_RED = "d9c242a370078d8dbb9e635cd1df6733"
ROW_ID_1_BLUE = "f440ab471678d6ca4d6224cdbf7e5f90"


class BuyableProduct:
    """Buyable implemented explicitly."""

    def __init__(self, id=1, name="Item name", price=10.00):
        self.id = id
        self.name = name
        self.price = price

    def get_buyable_identifier(self, options=None):
        return self.id

    def get_buyable_description(self, options=None):
        return self.name

    def get_buyable_price(self, options=None):
        return self.price


class Product(CanBeBought):
    """Buyable through the attribute-reading mixin."""

    def __init__(self, id, title, price):
        self.id = id
        self.title = title
        self.price = price


class ProductModel:
    """Associated model with a class-level finder."""

    some_value = "Some value"

    def __init__(self, id=None):
        self.id = id

    @classmethod
    def find(cls, id):
        return cls(id)

    def to_dict(self):
        return {"id": self.id, "some_value": self.some_value}


class FakeQuery:
    """Minimal async stand-in for the supabase-py table query builder."""

    def __init__(self, table):
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.max_rows = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self):
        rows = self.table.rows
        if self.action == "insert":
            row = dict(self.payload, id=len(rows) + 1)
            rows.append(row)
            return SimpleNamespace(data=[deepcopy(row)])
        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.table.rows = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed)
        found = [deepcopy(row) for row in rows if self._matches(row)]
        if self.max_rows is not None:
            found = found[: self.max_rows]
        return SimpleNamespace(data=found)


class FakeTable:
    def __init__(self):
        self.rows = []


class FakeSupabase:
    """In-memory client exposing ``table(name)`` like supabase-py."""

    def __init__(self):
        self.tables = {}

    def table(self, name):
        return FakeQuery(self.tables.setdefault(name, FakeTable()))

    def rows(self, name):
        return self.tables.setdefault(name, FakeTable()).rows
