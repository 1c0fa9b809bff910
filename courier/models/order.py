# courier/models/order.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(SQLModel, table=True):
    """
    Submitted shipment order.

    Sections copied from the finalized draft are stored as JSON documents:
      - sender, receiver, items, delivery, locations, pricing

    Once created the client only reads it; staff move `status` along
    the delivery lifecycle.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    tracking_number: str = Field(
        index=True,
        max_length=32,
        description="Human friendly reference, e.g. AL1718012345678",
    )

    # pending | processing | in_transit | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    sender: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    receiver: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    items: list[dict[str, Any]] = Field(sa_column=Column(JSON, nullable=False))
    delivery: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    locations: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    pricing: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        description="Last status change (UTC)",
    )
