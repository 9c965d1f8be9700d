"""Tests for cart configuration"""
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from shopping_cart.cart import Cart, MemorySessionStore
from shopping_cart.config import CartConfig, FormatConfig

from helpers import BuyableProduct


class TestCartConfig:
    """Tests for CartConfig."""

    def test_defaults(self):
        """Test the default tax, table and format."""
        config = CartConfig()

        assert config.tax == Decimal("21")
        assert config.table == "shopping_cart"
        assert config.format == FormatConfig(decimals=2, decimal_point=".", thousand_separator=",")

    def test_from_env(self, monkeypatch):
        """Test CART_* environment variables."""
        monkeypatch.setenv("CART_TAX", "19")
        monkeypatch.setenv("CART_TABLE", "saved_carts")
        monkeypatch.setenv("CART_DECIMALS", "3")
        monkeypatch.setenv("CART_DECIMAL_POINT", ",")
        monkeypatch.setenv("CART_THOUSAND_SEPARATOR", ".")

        config = CartConfig.from_env()

        assert config.tax == Decimal("19")
        assert config.table == "saved_carts"
        assert config.format.decimals == 3
        assert config.format.decimal_point == ","

    @pytest.mark.parametrize("tax", ["abc", "", "-1"])
    def test_invalid_env_tax_rejected(self, monkeypatch, tax):
        """Test a junk or negative CART_TAX fails instead of becoming 0%."""
        monkeypatch.setenv("CART_TAX", tax)

        with pytest.raises(PydanticValidationError, match="valid tax rate"):
            CartConfig.from_env()

    def test_zero_tax_allowed(self):
        assert CartConfig(tax=0).tax == Decimal("0")

    def test_negative_decimals_rejected(self):
        with pytest.raises(PydanticValidationError):
            FormatConfig(decimals=-1)

    @pytest.mark.asyncio
    async def test_cart_uses_config(self):
        """Test the cart applies the configured tax and format."""
        config = CartConfig(
            tax=10,
            format=FormatConfig(decimals=1, decimal_point=",", thousand_separator="."),
        )
        cart = Cart(session=MemorySessionStore(), config=config)

        await cart.add(BuyableProduct(1, "Item", 1000))

        assert await cart.tax() == "100,0"
        assert await cart.total() == "1.100,0"
        assert await cart.total(decimals=2) == "1.100,00"
