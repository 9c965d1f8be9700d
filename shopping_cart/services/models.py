"""Database Models - Pydantic models for persisted rows."""
import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class StoredCart(BaseModel):
    """Stored cart snapshot row."""
    id: Optional[int] = None
    identifier: Optional[str] = None
    instance: Optional[str] = None
    content: list[dict[str, Any]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"  # Ignore unknown fields from DB

    @field_validator("identifier", mode="before")
    @classmethod
    def identifier_to_str(cls, v):
        return None if v is None else str(v)

    @field_validator("content", mode="before")
    @classmethod
    def decode_content(cls, v):
        # Column is text; the client hands it back as a JSON string
        if isinstance(v, (str, bytes)):
            return json.loads(v) if v else []
        return v or []
