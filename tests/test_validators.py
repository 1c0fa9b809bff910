"""Unit tests for section validators"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from courier.schemas.draft import Delivery, Dimensions, Receiver, Sender
from courier.services.validators import (
    capacity_errors,
    validate_delivery,
    validate_item,
    validate_items,
    validate_receiver,
    validate_schedule,
    validate_sender,
)
from tests.conftest import NOW, VALID_PICKUP, make_item


class TestSender:
    def test_complete_sender_is_valid(self, sender):
        assert validate_sender(sender) == []

    def test_all_missing_fields_reported(self):
        errors = validate_sender(Sender(name="  ", phone="", address="", state=""))
        assert errors == [
            "Sender name is required",
            "Sender phone is required",
            "Sender address is required",
            "Sender state is required",
        ]

    def test_absent_sender(self):
        assert len(validate_sender(None)) == 4


class TestReceiver:
    def test_door_delivery_requires_address(self, receiver):
        assert validate_receiver(receiver) == []
        errors = validate_receiver(receiver.model_copy(update={"address": ""}))
        assert errors == ["Receiver address is required for door delivery"]

    def test_pickup_requires_center_not_address(self):
        receiver = Receiver(
            name="Tunde",
            phone="0802",
            state="FCT",
            delivery_method="pickup",
        )
        errors = validate_receiver(receiver)
        assert errors == ["Pickup center is required when the receiver collects the parcel"]

        receiver = receiver.model_copy(update={"pickup_center": "Wuse Hub"})
        assert validate_receiver(receiver) == []

    def test_absent_receiver_names_fields(self):
        errors = validate_receiver(None)
        assert "Receiver name is required" in errors
        assert "Receiver phone is required" in errors
        assert "Receiver state is required" in errors
        assert "Receiver address is required for door delivery" in errors


class TestItem:
    def test_valid_item(self):
        assert validate_item(make_item(), [], "bike") == []

    def test_required_fields_and_numbers(self):
        item = make_item(name="", category="", subcategory="", quantity=0, weight=0, value=0)
        errors = validate_item(item, [], None)
        assert errors == [
            "Item name is required",
            "Item category is required",
            "Item subcategory is required",
            "Quantity must be greater than 0",
            "Weight must be greater than 0",
            "Value must be greater than 0",
        ]

    def test_partial_dimensions_rejected(self):
        item = make_item(dimensions=Dimensions(length=10, width=20))
        assert validate_item(item, [], None) == [
            "Length, width and height must all be provided"
        ]

    def test_oversized_dimension_rejected(self):
        item = make_item(dimensions=Dimensions(length=10, width=20, height=501))
        assert validate_item(item, [], None) == ["Dimensions cannot exceed 500cm"]

    def test_full_dimensions_accepted(self):
        item = make_item(dimensions=Dimensions(length=500, width=20, height=30))
        assert validate_item(item, [], None) == []

    def test_too_many_images(self):
        item = make_item(images=[f"https://img/{i}.png" for i in range(6)])
        assert validate_item(item, [], None) == ["At most 5 images per item"]

    def test_capacity_counts_existing_items(self):
        existing = [make_item(weight=8, quantity=2)]
        # 16 + 5 > 20 (bike)
        errors = validate_item(make_item(weight=5), existing, "bike")
        assert errors == ["Total weight 21kg exceeds the bike capacity of 20kg"]
        assert validate_item(make_item(weight=5), existing, "car") == []

    def test_capacity_excludes_replaced_item(self):
        existing = [make_item(weight=8, quantity=2), make_item(weight=3)]
        # replacing the 16kg line with a 15kg line: 15 + 3 fits a bike
        assert validate_item(make_item(weight=15), existing, "bike", replace_index=0) == []
        # appending instead would be 34kg
        assert validate_item(make_item(weight=15), existing, "bike") != []

    def test_no_vehicle_skips_capacity(self):
        assert validate_item(make_item(weight=5000), [], None) == []


class TestItems:
    def test_errors_prefixed_with_position(self):
        items = [make_item(), make_item(name="")]
        assert validate_items(items, None) == ["Item 2: Item name is required"]

    def test_capacity_reported_once(self):
        items = [make_item(weight=15), make_item(weight=15)]
        assert validate_items(items, "bike") == [
            "Total weight 30kg exceeds the bike capacity of 20kg"
        ]

    def test_capacity_errors_helper(self):
        assert capacity_errors(100, "car") == []
        assert capacity_errors(100.5, "car") != []
        assert capacity_errors(10_000, None) == []


class TestSchedule:
    def test_valid_slot(self):
        assert validate_schedule(VALID_PICKUP, NOW) == []

    def test_missing(self):
        assert validate_schedule(None, NOW) == ["Pickup date is required"]

    def test_minimum_lead_time(self):
        # same day, only one hour ahead
        errors = validate_schedule(datetime(2026, 10, 19, 10, 0), NOW)
        assert errors == ["Pickup must be at least 2 hours from now"]
        assert validate_schedule(datetime(2026, 10, 19, 11, 0), NOW) == []

    def test_in_the_past(self):
        errors = validate_schedule(datetime(2026, 10, 16, 10, 0), NOW)
        assert "Pickup must be at least 2 hours from now" in errors

    def test_maximum_advance(self):
        # Thursday 5 November, 17 days ahead
        errors = validate_schedule(datetime(2026, 11, 5, 10, 0), NOW)
        assert errors == ["Pickup cannot be more than 14 days in advance"]

    def test_business_hours(self):
        assert validate_schedule(datetime(2026, 10, 20, 7, 30), NOW) == [
            "Pickup time must be between 8:00 AM and 6:00 PM"
        ]
        assert validate_schedule(datetime(2026, 10, 20, 18, 30), NOW) == [
            "Pickup time must be between 8:00 AM and 6:00 PM"
        ]
        assert validate_schedule(datetime(2026, 10, 20, 8, 0), NOW) == []
        assert validate_schedule(datetime(2026, 10, 20, 18, 0), NOW) == []

    def test_weekend_rejected(self):
        # Saturday 24 October
        errors = validate_schedule(datetime(2026, 10, 24, 10, 0), NOW)
        assert errors == ["Pickups are only available on weekdays (Monday to Friday)"]

    def test_all_problems_collected(self):
        # Sunday 8 November at 20:00: too far, weekend, after hours
        errors = validate_schedule(datetime(2026, 11, 8, 20, 0), NOW)
        assert len(errors) == 3


class TestScheduleTimezone:
    """Pickup hours and days are judged on the Lagos clock (UTC+1)."""

    def test_utc_input_inside_local_hours(self):
        # 07:30Z is 08:30 in Lagos
        scheduled = datetime(2026, 10, 20, 7, 30, tzinfo=timezone.utc)
        assert validate_schedule(scheduled, NOW) == []

    def test_utc_input_after_local_closing(self):
        # 17:30Z is 18:30 in Lagos
        scheduled = datetime(2026, 10, 20, 17, 30, tzinfo=timezone.utc)
        assert validate_schedule(scheduled, NOW) == [
            "Pickup time must be between 8:00 AM and 6:00 PM"
        ]

    def test_friday_night_utc_is_saturday_locally(self):
        scheduled = datetime(2026, 10, 23, 23, 30, tzinfo=timezone.utc)
        assert "Pickups are only available on weekdays (Monday to Friday)" in (
            validate_schedule(scheduled, NOW)
        )

    def test_aware_now_against_naive_local_pickup(self):
        # 08:00Z is 09:00 in Lagos, so 10:30 local is only 1.5 hours ahead
        now = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
        assert validate_schedule(datetime(2026, 10, 19, 10, 30), now) == [
            "Pickup must be at least 2 hours from now"
        ]

    def test_explicit_zone(self):
        scheduled = datetime(2026, 10, 20, 7, 30, tzinfo=timezone.utc)
        assert validate_schedule(scheduled, NOW, tz=ZoneInfo("UTC")) == [
            "Pickup time must be between 8:00 AM and 6:00 PM"
        ]


class TestDelivery:
    def test_requires_vehicle_and_date(self):
        errors = validate_delivery(Delivery(), [], NOW)
        assert errors == ["Vehicle type is required", "Pickup date is required"]

    def test_existing_items_must_fit(self):
        delivery = Delivery(scheduled_pickup=VALID_PICKUP, vehicle="bike")
        items = [make_item(weight=25)]
        assert validate_delivery(delivery, items, NOW) == [
            "Total weight 25kg exceeds the bike capacity of 20kg"
        ]
        delivery = delivery.model_copy(update={"vehicle": "car"})
        assert validate_delivery(delivery, items, NOW) == []
