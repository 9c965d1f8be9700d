"""Shopping Cart Repository - stored cart snapshots.

All methods use async/await with supabase-py v2. Client errors propagate
to the caller unchanged.
"""

import json
from datetime import UTC, datetime
from typing import Any

from shopping_cart.config import DEFAULT_TABLE
from shopping_cart.logging import get_logger, sanitize_id_for_logging
from shopping_cart.services.models import StoredCart

from .base import BaseRepository

logger = get_logger(__name__)


class ShoppingCartRepository(BaseRepository):
    """Snapshot rows keyed by (identifier, instance)."""

    def __init__(self, client, table: str = DEFAULT_TABLE) -> None:
        super().__init__(client)
        self.table = table

    async def first(self, identifier: Any, instance: str) -> StoredCart | None:
        """Get the stored snapshot for an identifier and instance."""
        result = (
            await self.client.table(self.table)
            .select("*")
            .eq("identifier", str(identifier))
            .eq("instance", instance)
            .limit(1)
            .execute()
        )
        return StoredCart(**result.data[0]) if result.data else None

    async def exists(self, identifier: Any, instance: str) -> bool:
        return await self.first(identifier, instance) is not None

    async def delete(self, identifier: Any, instance: str) -> None:
        """Delete the snapshot for an identifier and instance."""
        await (
            self.client.table(self.table)
            .delete()
            .eq("identifier", str(identifier))
            .eq("instance", instance)
            .execute()
        )

    async def delete_all(self, identifier: Any) -> None:
        """Delete every snapshot stored for an identifier, whatever the instance."""
        await self.client.table(self.table).delete().eq("identifier", str(identifier)).execute()
        logger.info(f"Erased stored carts for {sanitize_id_for_logging(identifier)}")

    async def insert(self, identifier: Any, instance: str, content: list[dict[str, Any]]) -> StoredCart:
        """Insert a new snapshot row. Timestamps are set to now (UTC)."""
        now = datetime.now(UTC).isoformat()
        data = {
            "identifier": str(identifier),
            "instance": instance,
            "content": json.dumps(content),
            "created_at": now,
            "updated_at": now,
        }
        result = await self.client.table(self.table).insert(data).execute()
        return StoredCart(**result.data[0]) if result.data else StoredCart(**data)
