# courier/services/validators.py
"""
Section validators.

Each validator is a pure function returning a list of human readable
messages; an empty list means the section is valid. Every applicable
problem is reported, never only the first one.
"""
from collections.abc import Sequence
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from courier.core.config import get_settings
from courier.schemas.draft import Delivery, ItemDetails, Receiver, Sender, Vehicle
from courier.services.pricing import total_weight

VEHICLE_MAX_WEIGHT: dict[str, float] = {
    "bike": 20,
    "car": 100,
    "van": 500,
    "truck": 1000,
}

MAX_DIMENSION_CM = 500
MAX_ITEM_IMAGES = 5

# Pickup scheduling
MIN_PICKUP_HOURS = 2
MAX_PICKUP_DAYS = 14
BUSINESS_OPEN = time(8, 0)
BUSINESS_CLOSE = time(18, 0)
WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_sender(sender: Sender | None) -> list[str]:
    sender = sender or Sender()
    errors: list[str] = []
    if _blank(sender.name):
        errors.append("Sender name is required")
    if _blank(sender.phone):
        errors.append("Sender phone is required")
    if _blank(sender.address):
        errors.append("Sender address is required")
    if _blank(sender.state):
        errors.append("Sender state is required")
    return errors


def validate_receiver(receiver: Receiver | None) -> list[str]:
    """
    name/phone/state are always required. The delivery method decides
    between address (door delivery) and pickup_center (collection).
    """
    receiver = receiver or Receiver()
    errors: list[str] = []
    if _blank(receiver.name):
        errors.append("Receiver name is required")
    if _blank(receiver.phone):
        errors.append("Receiver phone is required")
    if _blank(receiver.state):
        errors.append("Receiver state is required")

    if receiver.delivery_method == "delivery" and _blank(receiver.address):
        errors.append("Receiver address is required for door delivery")
    if receiver.delivery_method == "pickup" and _blank(receiver.pickup_center):
        errors.append("Pickup center is required when the receiver collects the parcel")
    return errors


def capacity_errors(weight_kg: float, vehicle: Vehicle | None) -> list[str]:
    """
    Empty while no vehicle is chosen; capacity is checked again once the
    delivery section names one.
    """
    if vehicle is None:
        return []
    max_weight = VEHICLE_MAX_WEIGHT[vehicle]
    if weight_kg > max_weight:
        return [
            f"Total weight {weight_kg:g}kg exceeds the {vehicle} capacity of {max_weight:g}kg"
        ]
    return []


def _item_field_errors(item: ItemDetails) -> list[str]:
    errors: list[str] = []
    if _blank(item.name):
        errors.append("Item name is required")
    if _blank(item.category):
        errors.append("Item category is required")
    if _blank(item.subcategory):
        errors.append("Item subcategory is required")
    if item.quantity <= 0:
        errors.append("Quantity must be greater than 0")
    if item.weight <= 0:
        errors.append("Weight must be greater than 0")
    if item.value <= 0:
        errors.append("Value must be greater than 0")

    dims = item.dimensions
    if dims is not None:
        given = [d for d in (dims.length, dims.width, dims.height) if d is not None]
        if given and len(given) < 3:
            errors.append("Length, width and height must all be provided")
        if any(d <= 0 for d in given):
            errors.append("Dimensions must be greater than 0")
        if any(d > MAX_DIMENSION_CM for d in given):
            errors.append(f"Dimensions cannot exceed {MAX_DIMENSION_CM}cm")

    if len(item.images) > MAX_ITEM_IMAGES:
        errors.append(f"At most {MAX_ITEM_IMAGES} images per item")
    return errors


def validate_item(
    item: ItemDetails,
    existing_items: Sequence[ItemDetails],
    vehicle: Vehicle | None,
    replace_index: int | None = None,
) -> list[str]:
    """
    Validate one item about to be added (or to replace
    existing_items[replace_index]).

    The projected weight is the existing items, minus the one being
    replaced, plus this item.
    """
    errors = _item_field_errors(item)

    others = [
        it for i, it in enumerate(existing_items) if i != replace_index
    ]
    projected = total_weight(others) + max(item.weight, 0) * max(item.quantity, 0)
    errors.extend(capacity_errors(projected, vehicle))
    return errors


def validate_items(items: Sequence[ItemDetails], vehicle: Vehicle | None) -> list[str]:
    """
    Validate a whole item list; per-item messages are prefixed with the
    1-based item position and capacity is checked once on the list total.
    """
    errors: list[str] = []
    for position, item in enumerate(items, start=1):
        errors.extend(f"Item {position}: {msg}" for msg in _item_field_errors(item))
    errors.extend(capacity_errors(total_weight(items), vehicle))
    return errors


def business_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().BUSINESS_TIMEZONE)


def _to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Naive values are already business-local wall clock time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def validate_schedule(
    scheduled: datetime | None,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> list[str]:
    """
    Pickup slot rules:
      - at least MIN_PICKUP_HOURS from now
      - at most MAX_PICKUP_DAYS ahead
      - Monday to Friday, 08:00 to 18:00

    Calendar and opening hours are judged in the business timezone
    (settings.BUSINESS_TIMEZONE), whatever offset the client sent.
    """
    if scheduled is None:
        return ["Pickup date is required"]

    tz = tz or business_timezone()
    scheduled = _to_local(scheduled, tz)
    now = datetime.now(tz) if now is None else _to_local(now, tz)

    errors: list[str] = []
    if scheduled < now + timedelta(hours=MIN_PICKUP_HOURS):
        errors.append(f"Pickup must be at least {MIN_PICKUP_HOURS} hours from now")
    if scheduled > now + timedelta(days=MAX_PICKUP_DAYS):
        errors.append(f"Pickup cannot be more than {MAX_PICKUP_DAYS} days in advance")
    if scheduled.weekday() in WEEKEND_DAYS:
        errors.append("Pickups are only available on weekdays (Monday to Friday)")

    slot = scheduled.time()
    if slot < BUSINESS_OPEN or slot > BUSINESS_CLOSE:
        errors.append("Pickup time must be between 8:00 AM and 6:00 PM")
    return errors


def validate_delivery(
    delivery: Delivery,
    items: Sequence[ItemDetails],
    now: datetime | None = None,
) -> list[str]:
    """
    Vehicle + schedule. Items already in the draft must fit the vehicle.
    """
    errors: list[str] = []
    if delivery.vehicle is None:
        errors.append("Vehicle type is required")
    errors.extend(validate_schedule(delivery.scheduled_pickup, now))
    errors.extend(capacity_errors(total_weight(items), delivery.vehicle))
    return errors
