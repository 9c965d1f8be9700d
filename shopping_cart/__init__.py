"""Session-backed shopping cart with tax/total math and stored snapshots."""
from shopping_cart.cart import (
    Buyable,
    CanBeBought,
    Cart,
    CartItem,
    CartItemOptions,
    MemorySessionStore,
    RedisSessionStore,
    get_cart,
    register_model,
)
from shopping_cart.config import CartConfig, FormatConfig
from shopping_cart.errors import CartError, RowNotFoundError, UnknownModelError, ValidationError
from shopping_cart.events import CartEvents, EventDispatcher

__version__ = "1.0.0"

__all__ = [
    "Buyable",
    "CanBeBought",
    "Cart",
    "CartConfig",
    "CartError",
    "CartEvents",
    "CartItem",
    "CartItemOptions",
    "EventDispatcher",
    "FormatConfig",
    "MemorySessionStore",
    "RedisSessionStore",
    "RowNotFoundError",
    "UnknownModelError",
    "ValidationError",
    "get_cart",
    "register_model",
]
