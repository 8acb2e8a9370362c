import logging
from typing import Dict, Hashable, Optional, Tuple

from fincore.domain import ContextKind, ContextRef, Record, RecordKind

logger = logging.getLogger(__name__)

StoreKey = Tuple[RecordKind, ContextRef]


class RecordStore:
    """Record collections per context, plus the record currently open for editing.

    A collection is ``None`` until it has been populated once; only ``reset``
    drops it again.
    """

    def __init__(self):
        self._collections: Dict[StoreKey, Tuple[Record, ...]] = {}
        self._drafts: Dict[Tuple[RecordKind, ContextKind], Optional[Record]] = {}

    def collection(self, key: StoreKey) -> Optional[Tuple[Record, ...]]:
        return self._collections.get(key)

    def put(self, key: StoreKey, records: Tuple[Record, ...]) -> None:
        self._collections[key] = tuple(records)

    def draft(self, key: Tuple[RecordKind, ContextKind]) -> Optional[Record]:
        return self._drafts.get(key)

    def set_draft(self, key: Tuple[RecordKind, ContextKind], record: Optional[Record]) -> None:
        self._drafts[key] = record

    def reset(self, key: Optional[Hashable] = None) -> None:
        if key is None:
            self._collections.clear()
            self._drafts.clear()
            logger.debug("store cleared")
        else:
            self._collections.pop(key, None)
            logger.debug("store entry %s cleared", key)
