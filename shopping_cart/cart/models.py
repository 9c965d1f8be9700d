"""Cart item model with Decimal-based pricing."""
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Protocol, runtime_checkable

from shopping_cart.config import DEFAULT_TAX_RATE, FormatConfig
from shopping_cart.errors import (
    ERROR_INVALID_IDENTIFIER,
    ERROR_INVALID_NAME,
    ERROR_INVALID_OPTIONS,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_QUANTITY,
    ERROR_INVALID_TAX_RATE,
    ValidationError,
)
from shopping_cart.services.money import (
    add,
    is_numeric,
    multiply,
    number_format,
    percent,
    round_money,
    to_decimal,
)

from .identity import generate_row_id
from .registry import model_name, resolve_model

Identifier = int | str

_OPTION_SCALARS = (str, int, float, bool, type(None))


@runtime_checkable
class Buyable(Protocol):
    """Anything that can be put in the cart directly."""

    def get_buyable_identifier(self, options: Optional[Mapping[str, Any]] = None) -> Identifier:
        ...

    def get_buyable_description(self, options: Optional[Mapping[str, Any]] = None) -> str:
        ...

    def get_buyable_price(self, options: Optional[Mapping[str, Any]] = None) -> Any:
        ...


class CanBeBought:
    """Default Buyable implementation reading common attributes.

    Identifier comes from ``get_key()`` or ``id``; description from ``name``,
    ``title`` or ``description``; price from ``price``.
    """

    def get_buyable_identifier(self, options=None):
        get_key = getattr(self, "get_key", None)
        if callable(get_key):
            return get_key()
        return getattr(self, "id", None)

    def get_buyable_description(self, options=None):
        for attr in ("name", "title", "description"):
            value = getattr(self, attr, None)
            if value is not None:
                return value
        return None

    def get_buyable_price(self, options=None):
        return getattr(self, "price", None)


class CartItemOptions(dict):
    """Item options; keys can also be read as attributes (``options.color``)."""

    def __getattr__(self, key: str) -> Any:
        if key.startswith("__"):
            raise AttributeError(key)
        return self.get(key)


def _validate_identifier(value: Any) -> Identifier:
    if isinstance(value, bool) or not isinstance(value, (int, str)) or not value:
        raise ValidationError(ERROR_INVALID_IDENTIFIER)
    return value


def _validate_name(value: Any) -> str:
    if not value or not isinstance(value, str):
        raise ValidationError(ERROR_INVALID_NAME)
    return value


def _validate_price(value: Any) -> Decimal:
    if not is_numeric(value):
        raise ValidationError(ERROR_INVALID_PRICE)
    price = to_decimal(value)
    if price < 0:
        raise ValidationError(ERROR_INVALID_PRICE)
    return price


def _validate_options(value: Any) -> CartItemOptions:
    if value is None:
        return CartItemOptions()
    if not isinstance(value, Mapping):
        raise ValidationError(ERROR_INVALID_OPTIONS)
    for key, option in value.items():
        if not isinstance(key, str) or not isinstance(option, _OPTION_SCALARS):
            raise ValidationError(ERROR_INVALID_OPTIONS)
    return CartItemOptions(value)


def coerce_quantity(value: Any) -> int:
    """Turn a numeric quantity into an int. Zero and negatives are allowed here."""
    if not is_numeric(value):
        raise ValidationError(ERROR_INVALID_QUANTITY)
    qty = to_decimal(value)
    if qty != qty.to_integral_value():
        raise ValidationError(ERROR_INVALID_QUANTITY)
    return int(qty)


def validate_tax_rate(value: Any) -> Decimal:
    if not is_numeric(value) or to_decimal(value) < 0:
        raise ValidationError(ERROR_INVALID_TAX_RATE)
    return to_decimal(value)


@dataclass
class CartItem:
    """Single line in the cart.

    The row id is derived from the identifier and the options when the item
    is built. All money values are derived on read.
    """
    id: Identifier
    name: str
    price: Decimal
    options: CartItemOptions = field(default_factory=CartItemOptions)
    qty: int = 1
    tax_rate: Decimal = DEFAULT_TAX_RATE
    associated_model: Optional[str] = None
    is_saved: bool = False
    formatting: FormatConfig = field(default_factory=FormatConfig, repr=False, compare=False)
    row_id: str = field(init=False)

    def __post_init__(self):
        self.id = _validate_identifier(self.id)
        self.name = _validate_name(self.name)
        self.price = _validate_price(self.price)
        self.options = _validate_options(self.options)
        self.qty = coerce_quantity(self.qty)
        self.tax_rate = validate_tax_rate(self.tax_rate)
        self.row_id = generate_row_id(self.id, self.options)

    # -- constructors -------------------------------------------------------

    @classmethod
    def from_attributes(
        cls,
        id: Identifier,
        name: str,
        price: Any,
        options: Optional[Mapping[str, Any]] = None,
        **kwargs,
    ) -> "CartItem":
        """Create from plain attributes."""
        return cls(id=id, name=name, price=price, options=options, **kwargs)

    @classmethod
    def from_buyable(
        cls, item: Buyable, options: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> "CartItem":
        """Create from a Buyable, passing the options to each of its getters."""
        options = dict(options or {})
        return cls(
            id=item.get_buyable_identifier(options),
            name=item.get_buyable_description(options),
            price=item.get_buyable_price(options),
            options=options,
            **kwargs,
        )

    @classmethod
    def from_dict(cls, attributes: Mapping[str, Any], **kwargs) -> "CartItem":
        """Create from a mapping with id, name, price, optional options and qty."""
        item = cls(
            id=attributes.get("id"),
            name=attributes.get("name"),
            price=attributes.get("price"),
            options=attributes.get("options"),
            **kwargs,
        )
        if "qty" in attributes:
            item.set_quantity(attributes["qty"])
        return item

    # -- derived values -----------------------------------------------------

    @property
    def tax(self) -> Decimal:
        """Tax for a single unit."""
        return round_money(percent(self.price, self.tax_rate))

    @property
    def price_tax(self) -> Decimal:
        """Unit price including tax."""
        return round_money(add(self.price, self.tax))

    @property
    def subtotal(self) -> Decimal:
        return round_money(multiply(self.price, self.qty))

    @property
    def total(self) -> Decimal:
        return round_money(multiply(self.price_tax, self.qty))

    @property
    def tax_total(self) -> Decimal:
        return round_money(multiply(self.tax, self.qty))

    @property
    def model(self) -> Any:
        """Look up the associated model by this item's identifier.

        Calls ``find(id)`` on the associated type each time; returns whatever
        it returns (await it if ``find`` is async). None when nothing is
        associated or the type has no ``find``.
        """
        if not self.associated_model:
            return None
        model_cls = resolve_model(self.associated_model)
        finder = getattr(model_cls, "find", None)
        if not callable(finder):
            return None
        return finder(self.id)

    # -- formatted values ---------------------------------------------------

    def _format(self, value: Decimal, decimals, decimal_point, thousand_separator) -> str:
        return number_format(
            value,
            self.formatting.decimals if decimals is None else decimals,
            self.formatting.decimal_point if decimal_point is None else decimal_point,
            self.formatting.thousand_separator if thousand_separator is None else thousand_separator,
        )

    def price_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.price, decimals, decimal_point, thousand_separator)

    def price_tax_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.price_tax, decimals, decimal_point, thousand_separator)

    def subtotal_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.subtotal, decimals, decimal_point, thousand_separator)

    def total_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.total, decimals, decimal_point, thousand_separator)

    def tax_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.tax, decimals, decimal_point, thousand_separator)

    def tax_total_formatted(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        return self._format(self.tax_total, decimals, decimal_point, thousand_separator)

    # -- mutation -----------------------------------------------------------

    def set_quantity(self, qty: Any) -> None:
        """Replace the quantity. Empty, zero or non-numeric values are rejected."""
        if not qty:
            raise ValidationError(ERROR_INVALID_QUANTITY)
        quantity = coerce_quantity(qty)
        if quantity == 0:
            raise ValidationError(ERROR_INVALID_QUANTITY)
        self.qty = quantity

    def update_from_buyable(self, item: Buyable) -> None:
        """Refresh id, name and price from a Buyable. The row id is kept."""
        options = dict(self.options)
        identifier = _validate_identifier(item.get_buyable_identifier(options))
        name = _validate_name(item.get_buyable_description(options))
        price = _validate_price(item.get_buyable_price(options))
        self.id, self.name, self.price = identifier, name, price

    def update_from_dict(self, attributes: Mapping[str, Any]) -> None:
        """Merge id, qty, name, price and options over the current values.

        The row id is recomputed from the merged identifier and options.
        """
        identifier = _validate_identifier(attributes.get("id", self.id))
        name = _validate_name(attributes.get("name", self.name))
        price = _validate_price(attributes.get("price", self.price))
        options = _validate_options(attributes.get("options", self.options))
        qty = coerce_quantity(attributes["qty"]) if "qty" in attributes else self.qty

        self.id, self.name, self.price, self.options, self.qty = identifier, name, price, options, qty
        self.row_id = generate_row_id(self.id, self.options)

    def associate(self, model: type | object | str) -> "CartItem":
        """Remember the model type (class, instance or dotted name) for lookups."""
        self.associated_model = model if isinstance(model, str) else model_name(model)
        return self

    def set_tax_rate(self, tax_rate: Any) -> "CartItem":
        self.tax_rate = validate_tax_rate(tax_rate)
        return self

    def set_saved(self, saved: bool) -> "CartItem":
        self.is_saved = bool(saved)
        return self

    # -- serialization ------------------------------------------------------

    def to_dict(self) -> dict:
        """Public view of the item, including tax and subtotal."""
        return {
            "row_id": self.row_id,
            "id": self.id,
            "name": self.name,
            "qty": self.qty,
            "price": str(self.price),
            "options": dict(self.options),
            "tax": str(self.tax),
            "is_saved": self.is_saved,
            "subtotal": str(self.subtotal),
        }

    def to_json(self) -> dict:
        """Public view plus the associated model, when it can be serialized."""
        data = self.to_dict()
        model = self.model
        if model is not None:
            if hasattr(model, "model_dump"):
                data["model"] = model.model_dump(mode="json")
            elif hasattr(model, "to_dict"):
                data["model"] = model.to_dict()
        return data

    def to_storage(self) -> dict:
        """Lossless representation for the session and stored snapshots."""
        return {
            "row_id": self.row_id,
            "id": self.id,
            "name": self.name,
            "qty": self.qty,
            "price": str(self.price),
            "options": dict(self.options),
            "tax_rate": str(self.tax_rate),
            "associated_model": self.associated_model,
            "is_saved": self.is_saved,
        }

    @classmethod
    def from_storage(cls, data: Mapping[str, Any], formatting: Optional[FormatConfig] = None) -> "CartItem":
        """Rebuild an item written by ``to_storage``, keeping its row id."""
        item = cls(
            id=data["id"],
            name=data["name"],
            price=data["price"],
            options=data.get("options"),
            qty=int(data["qty"]),
            tax_rate=data.get("tax_rate", DEFAULT_TAX_RATE),
            associated_model=data.get("associated_model"),
            is_saved=bool(data.get("is_saved", False)),
            formatting=formatting or FormatConfig(),
        )
        item.row_id = data.get("row_id") or item.row_id
        return item
