# courier/services/draft_assembler.py
import logging
from datetime import datetime
from typing import Any

from courier.core.errors import CapacityError, ValidationError
from courier.schemas.draft import (
    Delivery,
    ItemDetails,
    Location,
    OrderDraft,
    Receiver,
    Sender,
    UpdateDelivery,
    UpdateItems,
    UpdateReceiver,
    UpdateSender,
)
from courier.services import validators
from courier.services.draft_store import DraftStore
from courier.services.pricing import compute_pricing, total_weight

logger = logging.getLogger(__name__)


class DraftAssembler:
    """
    Single entry point for the order wizard steps.

    Responsibilities:
      - validate an incoming section before anything is written
      - replace the section in the draft
      - keep locations in sync with sender/receiver
      - recompute pricing and delivery.fee whenever items or delivery
        change, in the same write
      - persist through the DraftStore

    One merge per user at a time is assumed; there is no locking and the
    last write wins for a section.
    """

    def __init__(self, store: DraftStore, now: datetime | None = None):
        self.store = store
        # Fixed "now" for schedule checks; None means the wall clock.
        self.now = now

    # ---- internal helpers ----

    def _load(self) -> OrderDraft:
        return self.store.get() or self.store.empty_draft()

    @staticmethod
    def _raise_for(errors: list[str], over_capacity: bool) -> None:
        if not errors:
            return
        if over_capacity:
            raise CapacityError(errors)
        raise ValidationError(errors)

    @staticmethod
    def _priced(items: list[ItemDetails], delivery: Delivery) -> dict[str, Any]:
        pricing = compute_pricing(items, delivery.insurance)
        delivery = delivery.model_copy(update={"fee": pricing.delivery_fee})
        return {"items": items, "delivery": delivery, "pricing": pricing}

    @staticmethod
    def _pickup_location(sender: Sender, current: Location) -> Location:
        return current.model_copy(update={"address": sender.address, "state": sender.state})

    @staticmethod
    def _delivery_location(receiver: Receiver, current: Location) -> Location:
        address = receiver.address
        if receiver.delivery_method == "pickup":
            address = receiver.pickup_center or ""
        return current.model_copy(
            update={"address": address, "city": receiver.city, "state": receiver.state}
        )

    # ---- section merge ----

    def merge_section(
        self,
        command: UpdateSender | UpdateReceiver | UpdateItems | UpdateDelivery,
    ) -> OrderDraft:
        """
        Validate and merge one section update.

        Raises:
            ValidationError: section is incomplete/invalid; draft unchanged.
            CapacityError: items would not fit the chosen vehicle.
            StorageError: the draft could not be read or written.
        """
        draft = self._load()

        if isinstance(command, UpdateSender):
            self._raise_for(validators.validate_sender(command.sender), False)
            locations = draft.locations.model_copy(
                update={"pickup": self._pickup_location(command.sender, draft.locations.pickup)}
            )
            partial: dict[str, Any] = {"sender": command.sender, "locations": locations}

        elif isinstance(command, UpdateReceiver):
            self._raise_for(validators.validate_receiver(command.receiver), False)
            locations = draft.locations.model_copy(
                update={
                    "delivery": self._delivery_location(
                        command.receiver, draft.locations.delivery
                    )
                }
            )
            partial = {"receiver": command.receiver, "locations": locations}

        elif isinstance(command, UpdateItems):
            vehicle = draft.delivery.vehicle
            errors = validators.validate_items(command.items, vehicle)
            over = bool(validators.capacity_errors(total_weight(command.items), vehicle))
            self._raise_for(errors, over)
            partial = self._priced(list(command.items), draft.delivery)

        elif isinstance(command, UpdateDelivery):
            delivery = draft.delivery.model_copy(
                update={
                    "scheduled_pickup": command.scheduled_pickup,
                    "vehicle": command.vehicle,
                    "insurance": command.insurance,
                }
            )
            errors = validators.validate_delivery(delivery, draft.items, self.now)
            over = bool(validators.capacity_errors(total_weight(draft.items), command.vehicle))
            self._raise_for(errors, over)
            partial = self._priced(draft.items, delivery)

        else:
            raise TypeError(f"Unsupported section update: {type(command).__name__}")

        merged = self.store.save(partial)
        logger.info("Draft %s: merged section %s", self.store.key, command.section)
        return merged

    # ---- item helpers ----

    def add_item(self, item: ItemDetails) -> OrderDraft:
        draft = self._load()
        self._check_item(item, draft, None)
        return self.merge_section(UpdateItems(items=[*draft.items, item]))

    def replace_item(self, index: int, item: ItemDetails) -> OrderDraft:
        draft = self._load()
        self._check_index(draft, index)
        self._check_item(item, draft, index)
        items = list(draft.items)
        items[index] = item
        return self.merge_section(UpdateItems(items=items))

    def remove_item(self, index: int) -> OrderDraft:
        draft = self._load()
        self._check_index(draft, index)
        items = [it for i, it in enumerate(draft.items) if i != index]
        return self.merge_section(UpdateItems(items=items))

    def _check_index(self, draft: OrderDraft, index: int) -> None:
        if index < 0 or index >= len(draft.items):
            raise ValidationError([f"No item at position {index}"])

    def _check_item(self, item: ItemDetails, draft: OrderDraft, index: int | None) -> None:
        vehicle = draft.delivery.vehicle
        errors = validators.validate_item(item, draft.items, vehicle, replace_index=index)
        others = [it for i, it in enumerate(draft.items) if i != index]
        projected = total_weight(others) + max(item.weight, 0) * max(item.quantity, 0)
        over = bool(validators.capacity_errors(projected, vehicle))
        self._raise_for(errors, over)

    # ---- lifecycle ----

    def start_new_order(self) -> OrderDraft:
        """Discard any previous draft and write an empty one."""
        return self.store.init_empty()

    def cancel(self) -> None:
        self.store.clear()
