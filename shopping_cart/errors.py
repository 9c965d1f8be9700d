"""
Cart errors.

Message constants are kept in one place so the same wording is used by the
exceptions, the logs and the tests.
"""

# Validation errors
ERROR_INVALID_IDENTIFIER = "Please supply a valid identifier."
ERROR_INVALID_NAME = "Please supply a valid name."
ERROR_INVALID_PRICE = "Please supply a valid price."
ERROR_INVALID_QUANTITY = "Please supply a valid quantity."
ERROR_INVALID_TAX_RATE = "Please supply a valid tax rate."
ERROR_INVALID_OPTIONS = "Options must be a mapping of string keys to scalar values."

# Lookup errors
ERROR_ROW_NOT_FOUND = "The cart does not contain rowId {row_id}."
ERROR_UNKNOWN_MODEL = "The supplied model {model} does not exist."


class CartError(Exception):
    """Base class for every error raised by the cart."""


class ValidationError(CartError, ValueError):
    """Invalid identifier, name, price, quantity or tax rate."""


class RowNotFoundError(CartError, KeyError):
    """The active cart instance has no row with the given row id."""

    def __init__(self, row_id: str) -> None:
        self.row_id = row_id
        super().__init__(ERROR_ROW_NOT_FOUND.format(row_id=row_id))

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return ERROR_ROW_NOT_FOUND.format(row_id=self.row_id)


class UnknownModelError(CartError, LookupError):
    """An association was requested against a type name that cannot be resolved."""

    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__(ERROR_UNKNOWN_MODEL.format(model=model))


__all__ = [
    "ERROR_INVALID_IDENTIFIER",
    "ERROR_INVALID_NAME",
    "ERROR_INVALID_PRICE",
    "ERROR_INVALID_QUANTITY",
    "ERROR_INVALID_TAX_RATE",
    "ERROR_INVALID_OPTIONS",
    "ERROR_ROW_NOT_FOUND",
    "ERROR_UNKNOWN_MODEL",
    "CartError",
    "ValidationError",
    "RowNotFoundError",
    "UnknownModelError",
]
