"""Cart package: models, storage, and cart service."""
from .identity import generate_row_id
from .models import Buyable, CanBeBought, CartItem, CartItemOptions
from .registry import register_model, resolve_model
from .service import Cart, get_cart
from .storage import MemorySessionStore, RedisSessionStore, SessionStore

__all__ = [
    "Buyable",
    "CanBeBought",
    "Cart",
    "CartItem",
    "CartItemOptions",
    "MemorySessionStore",
    "RedisSessionStore",
    "SessionStore",
    "generate_row_id",
    "get_cart",
    "register_model",
    "resolve_model",
]
