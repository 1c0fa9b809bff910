# courier/repositories/order_repo.py
import uuid
from collections.abc import Sequence

from sqlmodel import Session, col, select

from courier.models.order import Order


class OrderRepository:
    """
    Data access layer for submitted orders.

    NOTE:
      - No commits here; the finalizer and the status update decide
        when the transaction ends.
    """

    def list_for_customer(
        self,
        session: Session,
        customer_id: uuid.UUID,
        statuses: Sequence[str],
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .where(col(Order.status).in_(statuses))
            .order_by(col(Order.created_at).desc())
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order
