"""Cart service backed by a key-value session and an optional snapshot table.

Every operation reads the whole item map of the active instance from the
session, changes it in memory and writes the whole map back. Nothing is held
between operations except the name of the active instance.
"""
from collections.abc import Mapping
from typing import Any, Callable, Optional

from shopping_cart.config import CartConfig
from shopping_cart.db import get_redis, get_supabase
from shopping_cart.errors import (
    ERROR_INVALID_QUANTITY,
    CartError,
    RowNotFoundError,
    UnknownModelError,
    ValidationError,
)
from shopping_cart.events import CartEvents, EventDispatcher
from shopping_cart.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from shopping_cart.services.money import number_format
from shopping_cart.services.repositories import ShoppingCartRepository

from .models import Buyable, CartItem, coerce_quantity, validate_tax_rate
from .registry import resolve_model
from .storage import RedisSessionStore, SessionStore

logger = get_logger(__name__)

ERROR_NO_REPOSITORY = "Storing carts requires a ShoppingCartRepository."

Content = dict[str, CartItem]


class Cart:
    """
    Session-backed shopping cart.

    Features:
    - Named instances (default cart, wishlist, ...) in one session
    - Rows keyed by a hash of identifier and options; re-adding merges
    - Tax, subtotal and total computed with Decimal
    - Snapshot store/restore keyed by (identifier, instance)
    """

    DEFAULT_INSTANCE = "default"
    SESSION_PREFIX = "cart."

    def __init__(
        self,
        session: SessionStore,
        repository: Optional[ShoppingCartRepository] = None,
        events: Optional[EventDispatcher] = None,
        config: Optional[CartConfig] = None,
    ) -> None:
        self.session = session
        self.repository = repository
        self.events = events or EventDispatcher()
        self.config = config or CartConfig()
        self._instance = ""
        self.instance(self.DEFAULT_INSTANCE)

    # -- instances ----------------------------------------------------------

    def instance(self, instance: Optional[str] = None) -> "Cart":
        """Switch the active instance. Returns the cart for chaining."""
        self._instance = f"{self.SESSION_PREFIX}{instance or self.DEFAULT_INSTANCE}"
        return self

    def current_instance(self) -> str:
        return self._instance.removeprefix(self.SESSION_PREFIX)

    # -- session access -----------------------------------------------------

    async def _get_content(self) -> Content:
        data = await self.session.get(self._instance)
        content: Content = {}
        for row in data or []:
            item = CartItem.from_storage(row, formatting=self.config.format)
            content[item.row_id] = item
        return content

    async def _put_content(self, content: Content) -> None:
        await self.session.set(self._instance, [item.to_storage() for item in content.values()])

    @staticmethod
    def _row(content: Content, row_id: str) -> CartItem:
        if row_id not in content:
            raise RowNotFoundError(row_id)
        return content[row_id]

    # -- item operations ----------------------------------------------------

    async def add(
        self,
        item: Any,
        name: Optional[str] = None,
        qty: Any = None,
        price: Any = None,
        options: Optional[Mapping[str, Any]] = None,
        tax_rate: Any = None,
    ) -> CartItem | list[CartItem]:
        """
        Add an item to the cart.

        ``item`` can be a CartItem, a Buyable followed by an optional quantity
        (default 1) and options, a mapping with id/name/qty/price/options, or
        an identifier followed by the other attributes. A list or tuple of
        CartItems, Buyables or mappings adds each of them and returns a list.

        If the row already exists its quantity is increased.
        """
        if self._is_multi(item):
            # Build everything first so a bad entry leaves the cart untouched
            prepared = [self._create_cart_item(entry) for entry in item]
            return [await self._add_item(cart_item) for cart_item in prepared]

        return await self._add_item(
            self._create_cart_item(item, name, qty, price, options, tax_rate)
        )

    async def _add_item(self, cart_item: CartItem) -> CartItem:
        content = await self._get_content()

        if cart_item.row_id in content:
            cart_item.qty += content[cart_item.row_id].qty

        content[cart_item.row_id] = cart_item
        await self._put_content(content)

        logger.debug(
            f"Added {sanitize_id_for_logging(cart_item.row_id)} x{cart_item.qty} "
            f"to {sanitize_string_for_logging(self.current_instance())}"
        )
        await self.events.trigger(CartEvents.ADDED, cart_item)
        return cart_item

    async def update(self, row_id: str, value: Any) -> Optional[CartItem]:
        """
        Update the row with a new quantity, a Buyable or a mapping of attributes.

        A changed identifier or options moves the item to a new row id, merging
        into an existing row with that id. A resulting quantity of zero or less
        removes the row and returns None.
        """
        content = await self._get_content()
        cart_item = self._row(content, row_id)

        if isinstance(value, Buyable):
            cart_item.update_from_buyable(value)
        elif isinstance(value, Mapping):
            cart_item.update_from_dict(value)
        else:
            cart_item.qty = coerce_quantity(value)

        if row_id != cart_item.row_id:
            content.pop(row_id)
            if cart_item.row_id in content:
                cart_item.qty += content[cart_item.row_id].qty

        if cart_item.qty <= 0:
            content.pop(cart_item.row_id, None)
            await self._put_content(content)
            logger.debug(f"Removed {sanitize_id_for_logging(cart_item.row_id)} on update")
            await self.events.trigger(CartEvents.REMOVED, cart_item)
            return None

        content[cart_item.row_id] = cart_item
        await self._put_content(content)

        await self.events.trigger(CartEvents.UPDATED, cart_item)
        return cart_item

    async def remove(self, row_id: str) -> None:
        """Remove the row from the cart."""
        content = await self._get_content()
        cart_item = self._row(content, row_id)

        del content[row_id]
        await self._put_content(content)

        logger.debug(f"Removed {sanitize_id_for_logging(row_id)}")
        await self.events.trigger(CartEvents.REMOVED, cart_item)

    async def get(self, row_id: str) -> CartItem:
        """Get a row by its row id.

        The item is a copy rebuilt from the session. Changing it (for example
        ``item.set_tax_rate(...)``) does not change the cart; use ``update``,
        ``set_tax`` or ``associate`` instead.
        """
        return self._row(await self._get_content(), row_id)

    async def destroy(self) -> None:
        """Drop the active instance from the session."""
        await self.session.remove(self._instance)

    async def content(self) -> Content:
        """Rows of the active instance in insertion order (empty if none).

        Like ``get``, the items are copies of what the session holds.
        """
        return await self._get_content()

    async def count(self) -> int:
        """Total quantity over all rows."""
        content = await self._get_content()
        return sum(item.qty for item in content.values())

    async def search(self, predicate: Callable[[CartItem, str], bool]) -> Content:
        """Rows for which ``predicate(item, row_id)`` is true."""
        content = await self._get_content()
        return {row_id: item for row_id, item in content.items() if predicate(item, row_id)}

    async def associate(self, row_id: str, model: Any) -> None:
        """Associate the row with a model class, instance or dotted type name."""
        if isinstance(model, str) and resolve_model(model) is None:
            raise UnknownModelError(model)

        content = await self._get_content()
        cart_item = self._row(content, row_id)
        cart_item.associate(model)

        content[cart_item.row_id] = cart_item
        await self._put_content(content)

    async def set_tax(self, row_id: str, tax_rate: Any) -> None:
        """Set the tax rate of a single row."""
        content = await self._get_content()
        cart_item = self._row(content, row_id)
        cart_item.set_tax_rate(tax_rate)

        content[cart_item.row_id] = cart_item
        await self._put_content(content)

    # -- totals -------------------------------------------------------------

    def _format(self, value, decimals, decimal_point, thousand_separator) -> str:
        fmt = self.config.format
        return number_format(
            value,
            fmt.decimals if decimals is None else decimals,
            fmt.decimal_point if decimal_point is None else decimal_point,
            fmt.thousand_separator if thousand_separator is None else thousand_separator,
        )

    async def total(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        """Sum of quantity x price including tax."""
        content = await self._get_content()
        value = sum((item.total for item in content.values()), start=0)
        return self._format(value, decimals, decimal_point, thousand_separator)

    async def tax(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        """Sum of quantity x unit tax."""
        content = await self._get_content()
        value = sum((item.tax_total for item in content.values()), start=0)
        return self._format(value, decimals, decimal_point, thousand_separator)

    async def subtotal(self, decimals=None, decimal_point=None, thousand_separator=None) -> str:
        """Sum of quantity x price without tax."""
        content = await self._get_content()
        value = sum((item.subtotal for item in content.values()), start=0)
        return self._format(value, decimals, decimal_point, thousand_separator)

    # -- stored carts -------------------------------------------------------

    def _require_repository(self) -> ShoppingCartRepository:
        if self.repository is None:
            raise CartError(ERROR_NO_REPOSITORY)
        return self.repository

    async def store(self, identifier: Any) -> None:
        """Replace the stored snapshot for (identifier, active instance)."""
        repository = self._require_repository()
        content = await self._get_content()
        instance = self.current_instance()

        await repository.delete(identifier, instance)
        await repository.insert(identifier, instance, [item.to_storage() for item in content.values()])

        logger.info(
            f"Stored cart {sanitize_string_for_logging(instance)} "
            f"for {sanitize_id_for_logging(identifier)}"
        )
        await self.events.trigger(CartEvents.STORED)

    async def stored(self, identifier: Any) -> bool:
        """Whether a snapshot exists for (identifier, active instance)."""
        return await self._require_repository().exists(identifier, self.current_instance())

    async def restore(self, identifier: Any) -> None:
        """
        Merge the stored snapshot into the session.

        Rows with the same row id are overwritten, not summed. Does nothing if
        no snapshot exists. The active instance is left unchanged.
        """
        repository = self._require_repository()
        stored = await repository.first(identifier, self.current_instance())
        if stored is None:
            return

        current_instance = self.current_instance()
        self.instance(stored.instance)
        try:
            content = await self._get_content()
            for row in stored.content:
                cart_item = CartItem.from_storage(row, formatting=self.config.format)
                content[cart_item.row_id] = cart_item

            await self._put_content(content)
            logger.info(f"Restored cart for {sanitize_id_for_logging(identifier)}")
            await self.events.trigger(CartEvents.RESTORED)
        finally:
            self.instance(current_instance)

    async def erase(self, identifier: Any) -> None:
        """Delete every stored snapshot of an identifier."""
        await self._require_repository().delete_all(identifier)
        await self.events.trigger(CartEvents.ERASED)

    # -- helpers ------------------------------------------------------------

    def _create_cart_item(
        self,
        item: Any,
        name: Optional[str] = None,
        qty: Any = None,
        price: Any = None,
        options: Optional[Mapping[str, Any]] = None,
        tax_rate: Any = None,
    ) -> CartItem:
        fmt = self.config.format

        if isinstance(item, CartItem):
            cart_item = item
            cart_item.formatting = fmt
        elif isinstance(item, Buyable):
            if name is not None:
                # add(buyable, qty, options)
                if qty is not None and not isinstance(qty, Mapping):
                    raise ValidationError(ERROR_INVALID_QUANTITY)
                qty, options = name, options if qty is None else qty
            cart_item = CartItem.from_buyable(item, options, formatting=fmt)
            cart_item.set_quantity(1 if qty is None else qty)
            cart_item.associate(item)
        elif isinstance(item, Mapping):
            cart_item = CartItem.from_dict(item, formatting=fmt)
            cart_item.set_quantity(item.get("qty"))
            tax_rate = item.get("tax_rate", tax_rate)
        else:
            cart_item = CartItem.from_attributes(item, name, price, options, formatting=fmt)
            cart_item.set_quantity(qty)

        if cart_item.qty < 1:
            raise ValidationError(ERROR_INVALID_QUANTITY)

        if tax_rate is not None:
            cart_item.set_tax_rate(validate_tax_rate(tax_rate))
        elif not isinstance(item, CartItem):
            cart_item.set_tax_rate(self.config.tax)

        return cart_item

    @staticmethod
    def _is_multi(item: Any) -> bool:
        """A list or tuple of mappings, Buyables or CartItems."""
        if not isinstance(item, (list, tuple)) or not item:
            return False
        return isinstance(item[0], (Mapping, Buyable, CartItem))


async def get_cart(session_id: str, config: Optional[CartConfig] = None) -> Cart:
    """Build a cart wired to Upstash Redis and Supabase for one session."""
    config = config or CartConfig.from_env()
    return Cart(
        session=RedisSessionStore(get_redis(), session_id),
        repository=ShoppingCartRepository(await get_supabase(), config.table),
        config=config,
    )
