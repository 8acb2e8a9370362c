import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple
from uuid import uuid4

from fincore.domain import Record
from fincore.errors import TransportError

logger = logging.getLogger(__name__)


class RecordStorage(ABC):
    """Remote collection of one record kind, addressed by parent context id."""

    @abstractmethod
    async def list(self, parent_id: str, user_id: str) -> List[Record]:
        pass

    @abstractmethod
    async def create(self, parent_id: str, record: Record) -> Record:
        pass

    @abstractmethod
    async def update(self, parent_id: str, record: Record) -> Record:
        pass

    @abstractmethod
    async def delete(self, parent_id: str, record_id: str) -> None:
        pass


class InMemoryRecordStorage(RecordStorage):
    """Storage backed by a dict, used by the demo app and the tests."""

    def __init__(self, records: Iterable[Record] = ()):
        self._records: Dict[str, Dict[str, Record]] = {}
        for r in records:
            if r.id is None:
                r = replace(r, id=str(uuid4()))
            self._records.setdefault(r.parent_id, {})[r.id] = r
        self._failures = 0
        self.calls: List[Tuple[str, str]] = []

    def fail_next(self, n: int = 1) -> None:
        self._failures += n

    async def _roundtrip(self, op: str, parent_id: str) -> None:
        self.calls.append((op, parent_id))
        await asyncio.sleep(0)
        if self._failures > 0:
            self._failures -= 1
            raise TransportError(f"{op} failed for {parent_id}")

    @property
    def list_calls(self) -> int:
        return sum(1 for op, _ in self.calls if op == "list")

    async def list(self, parent_id: str, user_id: str) -> List[Record]:
        await self._roundtrip("list", parent_id)
        return list(self._records.get(parent_id, {}).values())

    async def create(self, parent_id: str, record: Record) -> Record:
        await self._roundtrip("create", parent_id)
        saved = replace(record, id=str(uuid4()), parent_id=parent_id)
        self._records.setdefault(parent_id, {})[saved.id] = saved
        logger.debug("created %s in %s", saved.id, parent_id)
        return saved

    async def update(self, parent_id: str, record: Record) -> Record:
        await self._roundtrip("update", parent_id)
        bucket = self._records.get(parent_id, {})
        if record.id not in bucket:
            raise TransportError(f"Record {record.id} not found in {parent_id}")
        bucket[record.id] = record
        return record

    async def delete(self, parent_id: str, record_id: str) -> None:
        await self._roundtrip("delete", parent_id)
        bucket = self._records.get(parent_id, {})
        if record_id not in bucket:
            raise TransportError(f"Record {record_id} not found in {parent_id}")
        del bucket[record_id]
