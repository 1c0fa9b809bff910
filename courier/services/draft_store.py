# courier/services/draft_store.py
import json
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from courier.core.errors import StorageError
from courier.repositories.draft_repo import DraftSlotRepository
from courier.schemas.draft import (
    REQUIRED_SECTIONS,
    Delivery,
    Locations,
    OrderDetails,
    OrderDraft,
    Pricing,
)

logger = logging.getLogger(__name__)

DRAFT_SECTIONS = ("sender", "receiver", *REQUIRED_SECTIONS)


def draft_key(user_id: uuid.UUID) -> str:
    return f"order_draft:{user_id}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DraftStore:
    """
    Holder of one user's in-progress order.

    Bound to a session and a slot key for the duration of a request;
    the assembler and finalizer receive it explicitly.

    Merge rules for `save`:
      - each top-level section present in `partial` replaces the stored one
      - `order_details` is merged key by key
      - `order_details.updated_at` is stamped on every save

    Storage failures surface as StorageError; nothing is retried here.
    """

    def __init__(
        self,
        session: Session,
        key: str,
        repo: DraftSlotRepository | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.key = key
        self.repo = repo or DraftSlotRepository()
        self.clock = clock

    # ---- internal helpers ----

    def _read_raw(self) -> str | None:
        try:
            return self.repo.get(self.session, self.key)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Reading draft %s failed: %s", self.key, e)
            raise StorageError(f"Could not read order draft: {e}") from e

    def _write_raw(self, value: str) -> None:
        try:
            self.repo.set(self.session, self.key, value)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Writing draft %s failed: %s", self.key, e)
            raise StorageError(f"Could not save order draft: {e}") from e

    def _parse(self, raw: str) -> OrderDraft | None:
        """
        Structurally invalid content is treated as absent, not repaired.
        """
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable draft under %s", self.key)
            return None

        if not isinstance(data, dict) or any(s not in data for s in REQUIRED_SECTIONS):
            logger.warning("Discarding draft under %s: missing sections", self.key)
            return None

        try:
            return OrderDraft.model_validate(data)
        except PydanticValidationError as e:
            logger.warning("Discarding invalid draft under %s: %s", self.key, e)
            return None

    # ---- public operations ----

    def empty_draft(self) -> OrderDraft:
        """
        Fresh template: status=draft, no items, zeroed pricing, blank
        locations with the default country.
        """
        now = self.clock()
        return OrderDraft(
            items=[],
            delivery=Delivery(),
            locations=Locations(),
            pricing=Pricing(),
            order_details=OrderDetails(created_at=now, updated_at=now),
        )

    def get(self) -> OrderDraft | None:
        raw = self._read_raw()
        if raw is None:
            return None
        return self._parse(raw)

    def save(self, partial: dict[str, Any]) -> OrderDraft:
        """
        Merge `partial` (section name -> model or plain data) onto the
        current draft, or onto an empty template, and persist it.

        Returns the merged draft.
        """
        unknown = set(partial) - set(DRAFT_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown draft sections: {sorted(unknown)}")

        current = self.get() or self.empty_draft()
        merged = current.model_dump(mode="json")

        for section, value in partial.items():
            value = to_jsonable_python(value)
            if section == "order_details":
                merged["order_details"].update(value or {})
            else:
                merged[section] = value

        merged["order_details"]["updated_at"] = to_jsonable_python(self.clock())
        draft = OrderDraft.model_validate(merged)

        self._write_raw(draft.model_dump_json())
        return draft

    def clear(self) -> None:
        try:
            self.repo.remove(self.session, self.key)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Clearing draft %s failed: %s", self.key, e)
            raise StorageError(f"Could not clear order draft: {e}") from e

    def init_empty(self) -> OrderDraft:
        """
        Start a new order, overwriting any previous draft.
        """
        draft = self.empty_draft()
        self._write_raw(draft.model_dump_json())
        return draft
