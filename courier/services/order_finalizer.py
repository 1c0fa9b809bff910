# courier/services/order_finalizer.py
import logging
import time
import uuid
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from courier.core.errors import SubmissionError, ValidationError
from courier.models.order import Order
from courier.repositories.order_repo import OrderRepository
from courier.schemas.draft import OrderDraft
from courier.services import validators
from courier.services.draft_store import DraftStore
from courier.services.pricing import compute_pricing

logger = logging.getLogger(__name__)


def generate_tracking_number() -> str:
    return f"AL{int(time.time() * 1000)}"


class OrderFinalizer:
    """
    Turns the current draft into a submitted order.

    Steps:
      1. Re-validate every section (sender, receiver, items, delivery).
      2. Recompute pricing; stored derived fields are never trusted.
      3. Build the Order (status='pending', customer_id from the session).
      4. Insert it in a single commit.
      5. Clear the draft.

    If the insert fails the draft is left as it was so the customer can
    retry without redoing the wizard.
    """

    def __init__(
        self,
        store: DraftStore,
        order_repo: OrderRepository,
        now: datetime | None = None,
    ):
        self.store = store
        self.order_repo = order_repo
        self.now = now

    def validate(self, draft: OrderDraft) -> list[str]:
        errors: list[str] = []
        errors.extend(validators.validate_sender(draft.sender))
        errors.extend(validators.validate_receiver(draft.receiver))
        if not draft.items:
            errors.append("At least one item is required")
        else:
            errors.extend(validators.validate_items(draft.items, draft.delivery.vehicle))
        # Capacity was already checked with the items above.
        errors.extend(validators.validate_delivery(draft.delivery, [], self.now))
        return errors

    def submit(self, session: Session, customer_id: uuid.UUID) -> uuid.UUID:
        """
        Finalize the draft held by the store.

        Returns:
            The id of the created order.

        Raises:
            ValidationError: draft missing or incomplete (draft untouched).
            SubmissionError: the order could not be written (draft untouched).
            StorageError: the order was written but the draft could not be
                cleared.
        """
        draft = self.store.get()
        if draft is None:
            raise ValidationError(["No order draft found"])

        errors = self.validate(draft)
        if errors:
            raise ValidationError(errors, "Order is incomplete")

        pricing = compute_pricing(draft.items, draft.delivery.insurance)
        if pricing != draft.pricing:
            logger.warning(
                "Draft %s had stale pricing %s; using %s",
                self.store.key,
                draft.pricing.model_dump(),
                pricing.model_dump(),
            )
        delivery = draft.delivery.model_copy(update={"fee": pricing.delivery_fee})

        # Validation above guarantees sender/receiver are present.
        order = Order(
            customer_id=customer_id,
            tracking_number=generate_tracking_number(),
            status="pending",
            sender=draft.sender.model_dump(mode="json"),
            receiver=draft.receiver.model_dump(mode="json"),
            items=[item.model_dump(mode="json") for item in draft.items],
            delivery=delivery.model_dump(mode="json"),
            locations=draft.locations.model_dump(mode="json"),
            pricing=pricing.model_dump(mode="json"),
        )

        try:
            order = self.order_repo.create_order(session, order)
            session.commit()
            session.refresh(order)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Submitting order for customer %s failed: %s", customer_id, e)
            raise SubmissionError(f"Could not create order: {e}") from e

        logger.info(
            "Order %s (%s) submitted for customer %s",
            order.id,
            order.tracking_number,
            customer_id,
        )

        self.store.clear()
        return order.id
