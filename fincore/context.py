"""One API for the records of a parent context, whether it is a group or a period."""

import logging
from dataclasses import replace
from typing import FrozenSet, Mapping, Optional, Tuple

from fincore.domain import ContextKind, ContextRef, Record, RecordKind
from fincore.errors import ConfigurationError, TransportError, ValidationError
from fincore.events import (
    RECORD_ADDED,
    RECORD_DELETED,
    RECORD_UPDATED,
    RECORDS_FETCHED,
    EventBus,
)
from fincore.functional import ensure_valid
from fincore.lifecycle import RequestTracker
from fincore.storage import RecordStorage
from fincore.store import RecordStore
from fincore.transforms import add_record, remove_record, replace_record

logger = logging.getLogger(__name__)

HIDDEN_COLUMNS = {
    ContextKind.GROUP: frozenset({"date", "state"}),
    ContextKind.PERIOD: frozenset(),
}


def resolve_context(group_id: Optional[str] = None, period_id: Optional[str] = None) -> ContextRef:
    if group_id and period_id:
        raise ConfigurationError("Both group_id and period_id given; a context is one or the other")
    if group_id:
        return ContextRef(ContextKind.GROUP, group_id)
    if period_id:
        return ContextRef(ContextKind.PERIOD, period_id)
    raise ConfigurationError("Neither group_id nor period_id given")


class ContextResolver:
    def __init__(
        self,
        storages: Mapping[RecordKind, RecordStorage],
        store: Optional[RecordStore] = None,
        tracker: Optional[RequestTracker] = None,
        bus: Optional[EventBus] = None,
    ):
        self.storages = dict(storages)
        self.store = store if store is not None else RecordStore()
        self.bus = bus if bus is not None else EventBus()
        self.tracker = tracker if tracker is not None else RequestTracker(ContextKind, bus=self.bus)

    def resolve(
        self,
        group_id: Optional[str] = None,
        period_id: Optional[str] = None,
        kind: RecordKind = RecordKind.OUTCOME,
    ) -> "ContextHandle":
        ref = resolve_context(group_id, period_id)
        if kind not in self.storages:
            raise ConfigurationError(f"No storage configured for {kind.value} records")
        return ContextHandle(self, ref, kind)

    @property
    def is_loading(self) -> bool:
        return self.tracker.is_loading


class ContextHandle:
    def __init__(self, resolver: ContextResolver, ref: ContextRef, kind: RecordKind):
        self._resolver = resolver
        self.ref = ref
        self.kind = kind

    def __repr__(self) -> str:
        return f"ContextHandle({self.ref.kind.value}={self.ref.id!r}, {self.kind.value})"

    @property
    def key(self):
        return (self.kind, self.ref)

    @property
    def _storage(self) -> RecordStorage:
        return self._resolver.storages[self.kind]

    @property
    def _store(self) -> RecordStore:
        return self._resolver.store

    @property
    def hidden_columns(self) -> FrozenSet[str]:
        return HIDDEN_COLUMNS[self.ref.kind]

    def list(self) -> Tuple[Record, ...]:
        return self._store.collection(self.key) or ()

    def draft(self) -> Optional[Record]:
        """The record open for editing.

        Drafts are shared by every context of the same kind: a draft set on
        group g1 is also the draft of group g2.
        """
        return self._store.draft((self.kind, self.ref.kind))

    def set_draft(self, record: Optional[Record] = None) -> None:
        self._store.set_draft((self.kind, self.ref.kind), record)

    def _prepare(self, record: Record) -> Record:
        ensure_valid(record)
        if record.parent_id and record.parent_id != self.ref.id:
            raise ValidationError(
                f"Record belongs to {record.parent_id!r}, not to {self.ref.kind.value} {self.ref.id!r}"
            )
        return replace(record, parent_id=self.ref.id, kind=self.kind)

    async def _run(self, op: str, call):
        tracker = self._resolver.tracker
        lane = self.ref.kind
        tracker.begin(lane)
        try:
            result = await call
        except TransportError as e:
            logger.warning("%s %s records for %s %s failed: %s",
                           op, self.kind.value, lane.value, self.ref.id, e)
            tracker.fail(lane, e)
            return None, False
        except BaseException as e:
            logger.exception("%s %s records for %s %s raised", op, self.kind.value, lane.value, self.ref.id)
            tracker.fail(lane, e)
            raise
        tracker.succeed(lane)
        return result, True

    def _publish(self, name: str, payload: dict) -> None:
        self._resolver.bus.publish(name, {"context": self.ref, "kind": self.kind, **payload})

    async def fetch(self, user_id: str) -> None:
        if self.list():
            logger.debug("%r already populated, fetch skipped", self)
            return
        records, ok = await self._run("fetch", self._storage.list(self.ref.id, user_id))
        if not ok:
            return
        self._store.put(self.key, tuple(records))
        logger.debug("%r fetched %d records", self, len(records))
        self._publish(RECORDS_FETCHED, {"count": len(records)})

    async def add(self, record: Record) -> Optional[Record]:
        record = self._prepare(record)
        saved, ok = await self._run("add", self._storage.create(self.ref.id, record))
        if not ok:
            return None
        self._store.put(self.key, add_record(self.list(), saved))
        logger.info("added %s record %s to %s %s", self.kind.value, saved.id, self.ref.kind.value, self.ref.id)
        self._publish(RECORD_ADDED, {"record": saved})
        return saved

    async def update(self, record: Record) -> Optional[Record]:
        if not record.id:
            raise ValidationError("Cannot update a record without an id")
        record = self._prepare(record)
        saved, ok = await self._run("update", self._storage.update(self.ref.id, record))
        if not ok:
            return None
        self._store.put(self.key, replace_record(self.list(), saved))
        logger.info("updated %s record %s in %s %s", self.kind.value, saved.id, self.ref.kind.value, self.ref.id)
        self._publish(RECORD_UPDATED, {"record": saved})
        return saved

    async def delete(self, record_id: str) -> bool:
        if not record_id:
            raise ValidationError("Cannot delete a record without an id")
        _, ok = await self._run("delete", self._storage.delete(self.ref.id, record_id))
        if not ok:
            return False
        self._store.put(self.key, remove_record(self.list(), record_id))
        logger.info("deleted %s record %s from %s %s", self.kind.value, record_id, self.ref.kind.value, self.ref.id)
        self._publish(RECORD_DELETED, {"record_id": record_id})
        return True

    async def save(self, record: Record) -> Optional[Record]:
        """Add a new record or update an existing one, then close the draft."""
        saved = await (self.update(record) if record.id else self.add(record))
        if saved is not None:
            self.set_draft(None)
        return saved
