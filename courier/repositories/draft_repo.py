# courier/repositories/draft_repo.py
from datetime import datetime, timezone

from sqlmodel import Session

from courier.models.draft import DraftSlot


class DraftSlotRepository:
    """
    Durable key-value storage backing the DraftStore.

    Responsibilities:
      - get/set/remove a raw string under a key
      - every write commits immediately

    It does not parse or validate the stored value.
    """

    def get(self, session: Session, key: str) -> str | None:
        slot = session.get(DraftSlot, key)
        if slot is None:
            return None
        return slot.value

    def set(self, session: Session, key: str, value: str) -> None:
        slot = session.get(DraftSlot, key)
        if slot is None:
            slot = DraftSlot(key=key, value=value)
        else:
            slot.value = value
            slot.updated_at = datetime.now(timezone.utc)
        session.add(slot)
        session.commit()

    def remove(self, session: Session, key: str) -> None:
        slot = session.get(DraftSlot, key)
        if slot is None:
            return
        session.delete(slot)
        session.commit()
