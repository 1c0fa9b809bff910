# courier/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from courier.schemas.draft import (
    Delivery,
    ItemDetails,
    Locations,
    Pricing,
    Receiver,
    Sender,
)

OrderStatus = Literal[
    "pending",
    "processing",
    "in_transit",
    "delivered",
    "cancelled",
]

ACTIVE_STATUSES: tuple[str, ...] = ("pending", "processing", "in_transit")
HISTORY_STATUSES: tuple[str, ...] = ("delivered", "cancelled")


class OrderRead(SQLModel):
    """
    Submitted order as returned to the mobile app.
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    tracking_number: str
    status: OrderStatus
    sender: Sender
    receiver: Receiver
    items: list[ItemDetails]
    delivery: Delivery
    locations: Locations
    pricing: Pricing
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Staff payload to move an order along its lifecycle.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
