"""Point lookups and upserts on the options table."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.option import OptionRecord


class SQLModelOptionRepository:
    """SQLModel-based option repository.

    Works inside a session owned by the caller so that a read and a following
    write share one transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    def select_by_key(self, key: str) -> Optional[OptionRecord]:
        return self.session.exec(select(OptionRecord).where(OptionRecord.key == key)).first()

    def insert(self, key: str, value: Optional[str]) -> OptionRecord:
        record = OptionRecord(key=key, value=value)
        self.session.add(record)
        self.session.flush()
        return record

    def update_by_key(self, key: str, value: Optional[str]) -> Optional[OptionRecord]:
        record = self.select_by_key(key)
        if record is None:
            return None
        record.value = value
        self.session.add(record)
        self.session.flush()
        return record

    def upsert(self, key: str, value: Optional[str]) -> OptionRecord:
        """Insert the row if it is absent, otherwise update its value."""
        record = self.update_by_key(key, value)
        if record is None:
            record = self.insert(key, value)
        return record


__all__ = ["SQLModelOptionRepository"]
