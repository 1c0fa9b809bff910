# courier/routers/drafts.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlmodel import Session

from courier.core.auth import require_customer
from courier.core.storage_utils import upload_item_image
from courier.database import get_session
from courier.models.user import User
from courier.repositories.order_repo import OrderRepository
from courier.schemas.draft import (
    DraftQuote,
    ItemDetails,
    OrderDraft,
    OrderSubmitted,
    SectionUpdate,
)
from courier.services.draft_assembler import DraftAssembler
from courier.services.draft_store import DraftStore, draft_key
from courier.services.order_finalizer import OrderFinalizer
from courier.services.pricing import compute_pricing, total_weight
from courier.services.validators import VEHICLE_MAX_WEIGHT

router = APIRouter(prefix="/draft", tags=["Order draft"])

order_repo = OrderRepository()

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def get_draft_store(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
) -> DraftStore:
    """
    DraftStore bound to the authenticated customer's slot for this request.
    """
    return DraftStore(session, draft_key(current_user.id))


def _require_draft(store: DraftStore) -> OrderDraft:
    draft = store.get()
    if draft is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No order draft in progress",
        )
    return draft


@router.post("", response_model=OrderDraft, status_code=status.HTTP_201_CREATED)
def start_new_order(store: DraftStore = Depends(get_draft_store)):
    """
    Start a new order. Any previous draft is discarded.
    """
    return DraftAssembler(store).start_new_order()


@router.get("", response_model=OrderDraft)
def get_draft(store: DraftStore = Depends(get_draft_store)):
    """
    Return the draft in progress (404 if none).
    """
    return _require_draft(store)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def cancel_draft(store: DraftStore = Depends(get_draft_store)):
    """
    Cancel the order being assembled.
    """
    DraftAssembler(store).cancel()


@router.put("/sections", response_model=OrderDraft)
def merge_section(
    command: SectionUpdate,
    store: DraftStore = Depends(get_draft_store),
):
    """
    Merge one wizard step into the draft.

    Body is one of (discriminated by `section`):
      - {"section": "sender", "sender": {...}}
      - {"section": "receiver", "receiver": {...}}
      - {"section": "items", "items": [...]}
      - {"section": "delivery", "scheduled_pickup": ..., "vehicle": ..., "insurance": ...}

    Returns 422 with the full list of problems if the section is invalid.
    """
    return DraftAssembler(store).merge_section(command)


@router.post("/items", response_model=OrderDraft)
def add_item(item: ItemDetails, store: DraftStore = Depends(get_draft_store)):
    return DraftAssembler(store).add_item(item)


@router.put("/items/{index}", response_model=OrderDraft)
def replace_item(
    index: int,
    item: ItemDetails,
    store: DraftStore = Depends(get_draft_store),
):
    return DraftAssembler(store).replace_item(index, item)


@router.delete("/items/{index}", response_model=OrderDraft)
def remove_item(index: int, store: DraftStore = Depends(get_draft_store)):
    return DraftAssembler(store).remove_item(index)


@router.post("/items/images")
async def upload_image(
    file: UploadFile = File(...),
    current_user: User = Depends(require_customer),
):
    """
    Upload one item picture and return its public URL.

    The URL is then sent as part of the item's `images` list.
    """
    data = await file.read()
    if len(data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image is larger than 5MB",
        )
    try:
        url = upload_item_image(current_user.id, data, file.content_type or "")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"url": url}


@router.get("/quote", response_model=DraftQuote)
def quote(store: DraftStore = Depends(get_draft_store)):
    """
    Pricing preview computed from the draft's current items and vehicle.
    """
    draft = _require_draft(store)
    vehicle = draft.delivery.vehicle
    return DraftQuote(
        total_weight=total_weight(draft.items),
        vehicle=vehicle,
        max_weight=VEHICLE_MAX_WEIGHT[vehicle] if vehicle else None,
        pricing=compute_pricing(draft.items, draft.delivery.insurance),
    )


@router.post(
    "/submit",
    response_model=OrderSubmitted,
    status_code=status.HTTP_201_CREATED,
)
def submit_order(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    store: DraftStore = Depends(get_draft_store),
):
    """
    Finalize the draft into an order (status='pending') and clear it.
    """
    order_id = OrderFinalizer(store, order_repo).submit(session, current_user.id)
    order = order_repo.get_by_id(session, order_id)
    return OrderSubmitted(
        order_id=order.id,
        tracking_number=order.tracking_number,
        status=order.status,
    )
