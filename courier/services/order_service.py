# courier/services/order_service.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from courier.core.errors import InvalidStatusTransition, OrderNotFoundError
from courier.models.order import Order
from courier.repositories.order_repo import OrderRepository
from courier.schemas.order import ACTIVE_STATUSES, HISTORY_STATUSES, OrderStatusUpdate

# Staff-driven lifecycle after submission
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"in_transit", "cancelled"},
    "in_transit": {"delivered", "cancelled"},
    "delivered": set(),
    "cancelled": set(),
}


class OrderService:
    """
    Read side of submitted orders plus staff status updates.

    Responsibilities:
      - active orders / history for a customer
      - single order lookup scoped to its owner
      - enforce the delivery status state machine
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    # -------- Customer-facing operations --------

    def list_active_orders(self, session: Session, customer_id: uuid.UUID) -> list[Order]:
        return self.order_repo.list_for_customer(session, customer_id, ACTIVE_STATUSES)

    def list_order_history(self, session: Session, customer_id: uuid.UUID) -> list[Order]:
        return self.order_repo.list_for_customer(session, customer_id, HISTORY_STATUSES)

    def get_customer_order(
        self,
        session: Session,
        customer_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Get a single order for the customer.

        Orders of other customers are reported as not found.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.customer_id != customer_id:
            raise OrderNotFoundError()
        return order

    # -------- Staff operations --------

    def list_all_orders(self, session: Session, skip: int = 0, limit: int = 50) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Staff status update with the state machine:

          pending    -> processing, cancelled
          processing -> in_transit, cancelled
          in_transit -> delivered, cancelled
          delivered  -> (no change)
          cancelled  -> (no change)
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise OrderNotFoundError()

        current = order.status
        new = payload.status

        if current == new:
            return order

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransition(f"Invalid status transition: {current} -> {new}")

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order
