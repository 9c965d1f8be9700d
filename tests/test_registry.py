"""Tests for the model registry"""
from decimal import Decimal

from shopping_cart.cart.registry import model_name, register_model, resolve_model, unregister_model


class Outer:
    class Inner:
        pass


def test_registered_alias():
    """Test a model registered under an alias."""
    class Local:
        pass

    register_model(Local, name="Local")
    try:
        assert resolve_model("Local") is Local
        assert resolve_model(model_name(Local)) is Local
    finally:
        unregister_model("Local")
        unregister_model(model_name(Local))

    assert resolve_model("Local") is None


def test_dotted_path():
    """Test importable dotted paths resolve."""
    assert resolve_model("decimal.Decimal") is Decimal


def test_nested_class():
    """Test nested classes resolve through their qualified name."""
    assert resolve_model(model_name(Outer.Inner)) is Outer.Inner


def test_unknown():
    """Test unknown names resolve to None."""
    assert resolve_model("SomeModel") is None
    assert resolve_model("no_such_module.Thing") is None
    assert resolve_model("decimal.getcontext") is None
