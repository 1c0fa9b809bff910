# courier/models/draft.py
from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


class DraftSlot(SQLModel, table=True):
    """
    Key-value slot holding one serialized order draft.

    The key is "order_draft:<user_id>", so every user owns exactly one
    slot. `value` is the JSON document written by the DraftStore; this
    table knows nothing about its structure.
    """

    __tablename__ = "order_drafts"

    key: str = Field(
        primary_key=True,
        max_length=100,
    )

    value: str = Field(
        sa_column=Column(Text, nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
