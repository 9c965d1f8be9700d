"""Cart configuration: default tax rate, snapshot table and number formatting."""
import os
from decimal import Decimal

from pydantic import BaseModel, field_validator

from shopping_cart.errors import ERROR_INVALID_TAX_RATE
from shopping_cart.services.money import is_numeric, to_decimal

DEFAULT_TAX_RATE = Decimal("21")
DEFAULT_TABLE = "shopping_cart"


class FormatConfig(BaseModel):
    """Defaults used for formatted numbers when a call does not override them."""
    decimals: int = 2
    decimal_point: str = "."
    thousand_separator: str = ","

    class Config:
        frozen = True

    @field_validator("decimals")
    @classmethod
    def non_negative_decimals(cls, v):
        if v < 0:
            raise ValueError("decimals must be >= 0")
        return v


class CartConfig(BaseModel):
    """Cart settings passed into Cart and CartItem."""
    tax: Decimal = DEFAULT_TAX_RATE
    table: str = DEFAULT_TABLE
    format: FormatConfig = FormatConfig()

    class Config:
        frozen = True

    @field_validator("tax", mode="before")
    @classmethod
    def valid_tax_rate(cls, v):
        if not is_numeric(v) or to_decimal(v) < 0:
            raise ValueError(ERROR_INVALID_TAX_RATE)
        return to_decimal(v)

    @classmethod
    def from_env(cls) -> "CartConfig":
        """Build config from CART_* environment variables, falling back to defaults."""
        fmt = FormatConfig(
            decimals=int(os.environ.get("CART_DECIMALS", "2")),
            decimal_point=os.environ.get("CART_DECIMAL_POINT", "."),
            thousand_separator=os.environ.get("CART_THOUSAND_SEPARATOR", ","),
        )
        return cls(
            tax=os.environ.get("CART_TAX", str(DEFAULT_TAX_RATE)),
            table=os.environ.get("CART_TABLE", DEFAULT_TABLE),
            format=fmt,
        )
