"""
Recent-entries history.

Keeps the last submitted FieldSets, most recent first, and persists the
whole list as one JSON blob in a key-value store after every append.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, List, Optional, Tuple

from .core.models import FieldSet, HistoryRecord


logger = logging.getLogger(__name__)

HISTORY_KEY = "barcodeValues"
HISTORY_CAPACITY = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


def decode_history(blob, capacity: int = HISTORY_CAPACITY) -> List[HistoryRecord]:
    """
    Parse a persisted history blob.

    Raises:
        ValueError / TypeError: blob is not JSON or not a list of entries
        RecursionError: blob nests deeper than the JSON decoder allows
    """
    if blob is None or blob == "":
        return []
    data = json.loads(blob) if isinstance(blob, (str, bytes)) else blob
    if not isinstance(data, list):
        raise TypeError(f"History must be a list, got {type(data).__name__}")
    return [HistoryRecord.from_dict(item) for item in data[:capacity]]


def encode_history(records) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False)


class RecordStore:
    """
    Capacity-bounded, append-only history.

    Args:
        store: Key-value collaborator with get(key, default) and set(key, value)
        key: Storage key of the history blob
        capacity: Maximum number of records kept
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        store,
        *,
        key: str = HISTORY_KEY,
        capacity: int = HISTORY_CAPACITY,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self.clock = clock or _now_ms
        self._records: Tuple[HistoryRecord, ...] = ()

    @property
    def records(self) -> Tuple[HistoryRecord, ...]:
        return self._records

    def load(self) -> Tuple[HistoryRecord, ...]:
        """Read persisted history; malformed data loads as empty."""
        blob = self.store.get(self.key)
        try:
            records = decode_history(blob, self.capacity)
        except (ValueError, TypeError, RecursionError) as exc:
            logger.warning("Discarding malformed history under %r: %s", self.key, exc)
            records = []
        self._records = tuple(records)
        logger.debug("Loaded %d history record(s)", len(self._records))
        return self._records

    def append(self, fields: FieldSet) -> Tuple[HistoryRecord, ...]:
        """Prepend a new record, drop the oldest past capacity, persist."""
        timestamp = self.clock()
        if self._records and timestamp < self._records[0].timestamp:
            timestamp = self._records[0].timestamp
        record = HistoryRecord(fields=fields, timestamp=timestamp)
        updated = ((record,) + self._records)[: self.capacity]
        # Memory follows the store: a failed write leaves history unchanged
        self.store.set(self.key, encode_history(updated))
        self._records = updated
        return self._records
