"""Unit tests for DraftStore persistence and merge rules"""

import json
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from courier.core.errors import StorageError
from courier.repositories.draft_repo import DraftSlotRepository
from courier.schemas.draft import DEFAULT_COUNTRY, Delivery, Pricing
from courier.services.draft_store import DraftStore, draft_key
from tests.conftest import STORE_CLOCK, VALID_PICKUP, make_item


class BrokenSlotRepository(DraftSlotRepository):
    def get(self, session, key):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    def set(self, session, key, value):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    def remove(self, session, key):
        raise OperationalError("DELETE", {}, Exception("disk I/O error"))


class FlakySlotRepository(DraftSlotRepository):
    """First read fails, later reads reach the database."""

    def __init__(self):
        self.failed = False

    def get(self, session, key):
        if not self.failed:
            self.failed = True
            raise OperationalError("SELECT", {}, Exception("server closed the connection"))
        return super().get(session, key)


class TestEmptyDraft:
    def test_get_without_draft_returns_none(self, store):
        assert store.get() is None

    def test_init_empty_writes_template(self, store):
        store.init_empty()
        draft = store.get()

        assert draft is not None
        assert draft.sender is None
        assert draft.receiver is None
        assert draft.items == []
        assert draft.pricing == Pricing()
        assert draft.delivery == Delivery()
        assert draft.locations.pickup.country == DEFAULT_COUNTRY
        assert draft.locations.delivery.country == DEFAULT_COUNTRY
        assert draft.order_details.status == "draft"
        assert draft.order_details.created_at == STORE_CLOCK

    def test_init_empty_overwrites_previous_draft(self, store, sender):
        store.save({"sender": sender})
        store.init_empty()
        assert store.get().sender is None


class TestSave:
    def test_round_trip(self, store, sender):
        merged = store.save({"sender": sender})
        loaded = store.get()

        assert loaded == merged
        assert loaded.sender == sender

    def test_save_without_draft_uses_template(self, store):
        item = make_item()
        store.save({"items": [item]})
        draft = store.get()
        assert draft.items == [item]
        assert draft.order_details.status == "draft"

    def test_sections_are_replaced_whole(self, store, sender):
        store.save({"sender": sender})
        store.save({"delivery": Delivery(scheduled_pickup=VALID_PICKUP, vehicle="van")})
        store.save({"delivery": Delivery(vehicle="car")})

        draft = store.get()
        assert draft.sender == sender
        assert draft.delivery.vehicle == "car"
        assert draft.delivery.scheduled_pickup is None

    def test_order_details_merged_key_by_key(self, session, customer):
        times = iter(
            [
                datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc),
                datetime(2026, 10, 19, 8, 5, tzinfo=timezone.utc),
            ]
        )
        store = DraftStore(session, draft_key(customer.id), clock=lambda: next(times))
        store.init_empty()

        created = datetime(2026, 10, 1, tzinfo=timezone.utc)
        draft = store.save({"order_details": {"created_at": created}})

        assert draft.order_details.created_at == created
        assert draft.order_details.status == "draft"
        # stamped by the store, not taken from the caller
        assert draft.order_details.updated_at == datetime(
            2026, 10, 19, 8, 5, tzinfo=timezone.utc
        )

    def test_unknown_section_rejected(self, store):
        with pytest.raises(ValueError):
            store.save({"payment": {"type": "cash"}})


class TestCorruptDraft:
    def test_missing_section_treated_as_absent(self, store, session):
        store.init_empty()
        raw = json.loads(store.repo.get(session, store.key))
        del raw["pricing"]
        store.repo.set(session, store.key, json.dumps(raw))

        assert store.get() is None

    def test_unparseable_value_treated_as_absent(self, store, session):
        store.repo.set(session, store.key, "{not json")
        assert store.get() is None

    def test_wrong_types_treated_as_absent(self, store, session):
        store.init_empty()
        raw = json.loads(store.repo.get(session, store.key))
        raw["items"] = "a blender"
        store.repo.set(session, store.key, json.dumps(raw))

        assert store.get() is None

    def test_save_over_corrupt_draft_starts_fresh(self, store, session, sender):
        store.repo.set(session, store.key, "[]")
        draft = store.save({"sender": sender})
        assert draft.sender == sender
        assert draft.items == []


class TestClear:
    def test_clear_removes_draft(self, store):
        store.init_empty()
        store.clear()
        assert store.get() is None

    def test_clear_without_draft_is_noop(self, store):
        store.clear()
        assert store.get() is None


class TestStorageFailures:
    @pytest.fixture
    def broken_store(self, session, customer):
        return DraftStore(
            session,
            draft_key(customer.id),
            repo=BrokenSlotRepository(),
            clock=lambda: STORE_CLOCK,
        )

    def test_read_failure(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.get()

    def test_write_failure(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.init_empty()

    def test_clear_failure(self, broken_store):
        with pytest.raises(StorageError):
            broken_store.clear()

    def test_read_failure_rolls_back_and_can_be_retried(self, session, customer, monkeypatch):
        rollbacks = []
        real_rollback = session.rollback

        def spy_rollback():
            rollbacks.append(True)
            real_rollback()

        monkeypatch.setattr(session, "rollback", spy_rollback)
        store = DraftStore(
            session,
            draft_key(customer.id),
            repo=FlakySlotRepository(),
            clock=lambda: STORE_CLOCK,
        )

        with pytest.raises(StorageError):
            store.get()
        assert rollbacks == [True]

        store.init_empty()
        assert store.get() == store.empty_draft()
