# courier/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from courier.core.auth import require_customer, require_staff
from courier.database import get_session
from courier.models.user import User
from courier.repositories.order_repo import OrderRepository
from courier.schemas.order import OrderRead, OrderStatusUpdate
from courier.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
service = OrderService(order_repo)


# -------- Customer endpoints --------


@router.get("/me/active", response_model=list[OrderRead])
def list_active_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Orders still on their way: pending, processing, in_transit.
    """
    return service.list_active_orders(session, current_user.id)


@router.get("/me/history", response_model=list[OrderRead])
def list_order_history(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Delivered and cancelled orders.
    """
    return service.list_order_history(session, current_user.id)


@router.get("/me/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return service.get_customer_order(session, current_user.id, order_id)


# -------- Staff endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_staff)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return service.list_all_orders(session, skip, limit)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_staff)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Move an order along its lifecycle (staff only).

      pending    -> processing, cancelled

      processing -> in_transit, cancelled

      in_transit -> delivered, cancelled

    """
    return service.update_status(session, order_id, payload)
