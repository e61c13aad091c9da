"""Process-lifetime in-memory store."""

from typing import Optional

from .base import BaseStore, RecordT


class InMemoryStore(BaseStore[RecordT]):
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self):
        self._records: dict[str, RecordT] = {}

    def get(self, record_id: str) -> Optional[RecordT]:
        return self._records.get(record_id)

    def set(self, record_id: str, record: RecordT) -> None:
        self._records[record_id] = record

    def list_by_owner(self, owner_id: str) -> list[RecordT]:
        return [r for r in self._records.values() if r.owner_id == owner_id]

    def __len__(self) -> int:
        return len(self._records)
