"""Abstract base class for record stores."""

from abc import ABC, abstractmethod
from typing import Generic, Optional, Protocol, TypeVar


class OwnedRecord(Protocol):
    id: str
    owner_id: Optional[str]


RecordT = TypeVar("RecordT", bound=OwnedRecord)


class BaseStore(ABC, Generic[RecordT]):
    """Keyed storage for conversations or workout plans.

    Relay routes are the only writers, and they call ``set`` once per
    completed generation with the finished record.
    """

    @abstractmethod
    def get(self, record_id: str) -> Optional[RecordT]:
        """Return the record, or None if the id is unknown."""
        ...

    @abstractmethod
    def set(self, record_id: str, record: RecordT) -> None:
        """Insert or replace the record stored under ``record_id``."""
        ...

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[RecordT]:
        """Return the owner's records in insertion order."""
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...
