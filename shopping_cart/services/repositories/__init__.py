"""Repositories for persisted cart data."""
from .base import BaseRepository
from .cart_repo import ShoppingCartRepository

__all__ = [
    "BaseRepository",
    "ShoppingCartRepository",
]
