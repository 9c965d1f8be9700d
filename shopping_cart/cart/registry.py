"""Registry of domain model types that cart items can be associated with.

Cart items only store the type name. The type is resolved again each time
the associated model is requested.
"""
import importlib
from typing import Any

from shopping_cart.logging import get_logger

logger = get_logger(__name__)

_models: dict[str, type] = {}


def model_name(model: type | object) -> str:
    """Dotted name of a model class or of an instance's class."""
    cls = model if isinstance(model, type) else type(model)
    return f"{cls.__module__}.{cls.__qualname__}"


def register_model(cls: type, name: str | None = None) -> type:
    """Register a model type under its dotted name (and an optional alias).

    Usable as a class decorator.
    """
    _models[model_name(cls)] = cls
    if name:
        _models[name] = cls
    return cls


def unregister_model(name: str) -> None:
    _models.pop(name, None)


def resolve_model(name: str) -> type | None:
    """Resolve a model name to its type.

    Registered names win; otherwise the name is imported as a dotted path.
    Returns None if nothing matches.
    """
    if name in _models:
        return _models[name]

    parts = name.split(".")
    # Longest importable module prefix, then walk attributes (nested classes)
    for split in range(len(parts) - 1, 0, -1):
        try:
            resolved: Any = importlib.import_module(".".join(parts[:split]))
        except ImportError:
            continue
        for attr in parts[split:]:
            resolved = getattr(resolved, attr, None)
        if isinstance(resolved, type):
            return resolved
        break

    logger.debug("Model %s did not resolve to a type", name)
    return None
