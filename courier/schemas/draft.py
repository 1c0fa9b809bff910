# courier/schemas/draft.py
import uuid
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Vehicle = Literal["bike", "car", "van", "truck"]
DeliveryMethod = Literal["pickup", "delivery"]
InsurancePlan = Literal["basic", "premium"]

DEFAULT_COUNTRY = "Nigeria"

# Sections every persisted draft must carry; sender/receiver stay optional.
REQUIRED_SECTIONS = ("order_details", "items", "locations", "delivery", "pricing")


class _Section(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class Sender(_Section):
    """
    Who hands the parcel over.

    Blank fields are accepted here; completeness is checked by
    `validators.validate_sender` so that all problems are reported at once.
    """

    name: str = ""
    address: str = ""
    phone: str = ""
    state: str = ""


class Receiver(_Section):
    """
    Who gets the parcel.

    - address is required for door delivery
    - pickup_center is required when the receiver collects it
    """

    name: str = ""
    address: str = ""
    phone: str = ""
    state: str = ""
    delivery_method: DeliveryMethod = "delivery"
    pickup_center: str | None = None
    city: str = ""
    landmark: str | None = None


class Dimensions(_Section):
    """Centimetres. Either all three are given or none."""

    length: float | None = None
    width: float | None = None
    height: float | None = None


class ItemDetails(_Section):
    name: str = ""
    category: str = ""
    subcategory: str = ""
    quantity: int = 0
    weight: float = 0
    value: float = 0
    dimensions: Dimensions | None = None
    is_fragile: bool = False
    requires_special_handling: bool = False
    special_instructions: str | None = None
    images: list[str] = Field(default_factory=list)


class Delivery(_Section):
    scheduled_pickup: datetime | None = None
    vehicle: Vehicle | None = None
    # Derived from pricing; only the assembler/finalizer write it.
    fee: int = 0
    insurance: InsurancePlan | None = None


class Location(_Section):
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = DEFAULT_COUNTRY
    instructions: str = ""


class Locations(_Section):
    pickup: Location = Field(default_factory=Location)
    delivery: Location = Field(default_factory=Location)


class Pricing(_Section):
    """
    Fully derived from items + delivery. Never hand-set.

    item_value is the exact Σ(value * quantity); fees are whole currency
    units.
    """

    item_value: float = 0
    delivery_fee: int = 0
    insurance_premium: int = 0
    total: float = 0


class OrderDetails(_Section):
    status: Literal["draft"] = "draft"
    created_at: datetime
    updated_at: datetime


class OrderDraft(BaseModel):
    """
    The single in-progress order of a user.
    """

    model_config = ConfigDict(extra="ignore")

    sender: Sender | None = None
    receiver: Receiver | None = None
    items: list[ItemDetails]
    delivery: Delivery
    locations: Locations
    pricing: Pricing
    order_details: OrderDetails


# ---- Section update commands ----


class UpdateSender(BaseModel):
    section: Literal["sender"] = "sender"
    sender: Sender


class UpdateReceiver(BaseModel):
    section: Literal["receiver"] = "receiver"
    receiver: Receiver


class UpdateItems(BaseModel):
    """Replaces the whole item list."""

    section: Literal["items"] = "items"
    items: list[ItemDetails]


class UpdateDelivery(BaseModel):
    section: Literal["delivery"] = "delivery"
    scheduled_pickup: datetime
    vehicle: Vehicle
    insurance: InsurancePlan | None = None


SectionUpdate = Annotated[
    Union[UpdateSender, UpdateReceiver, UpdateItems, UpdateDelivery],
    Field(discriminator="section"),
]


# ---- Responses ----


class DraftQuote(BaseModel):
    """Pricing preview plus the weight it was computed from."""

    total_weight: float
    vehicle: Vehicle | None
    max_weight: float | None
    pricing: Pricing


class OrderSubmitted(BaseModel):
    order_id: uuid.UUID
    tracking_number: str
    status: str
