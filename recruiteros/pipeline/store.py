"""
Candidate record store.

Holds the session's candidate records, most recent first.  Only the
pipeline coordinator (which prepends new records) and the board
transition manager (which changes stages) mutate the store; every other
component reads snapshots.  Mutation goes through a re-entrant lock so
a threaded caller never observes a half-applied change.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Iterator, List, Optional

from .schema import CandidateRecord, Stage

logger = logging.getLogger(__name__)


class CandidateStore:
    """Ordered, in-memory collection of `CandidateRecord` objects."""

    def __init__(self, records: Optional[Iterable[CandidateRecord]] = None) -> None:
        self._lock = threading.RLock()
        self._records: List[CandidateRecord] = []
        for record in records or []:
            self.prepend(record)

    def prepend(self, record: CandidateRecord) -> None:
        """Insert ``record`` at the front of the store.

        Raises:
            ValueError: If a record with the same id is already stored.
        """
        with self._lock:
            if any(existing.id == record.id for existing in self._records):
                raise ValueError(f"Duplicate candidate id {record.id}")
            self._records.insert(0, record)
        logger.debug("Stored candidate %s (%s) in %s", record.id, record.name, record.stage.value)

    def get(self, record_id: str) -> Optional[CandidateRecord]:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def records(self) -> List[CandidateRecord]:
        """Snapshot of every record in store order."""
        with self._lock:
            return list(self._records)

    def ids(self) -> List[str]:
        with self._lock:
            return [record.id for record in self._records]

    def update_stage(self, record_id: str, stage: Stage) -> bool:
        """Replace the stage of the record with ``record_id``.

        Returns:
            ``True`` if the record was found, ``False`` otherwise (the
            store is left untouched).

        Raises:
            ValueError: If ``stage`` does not name a board stage; the store
                is left untouched.
        """
        stage = Stage.parse(stage)
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    self._records[index] = record.with_stage(stage)
                    return True
        return False

    def by_stage(self, records: Optional[Iterable[CandidateRecord]] = None) -> Dict[Stage, List[CandidateRecord]]:
        """Partition records into board columns.

        Every stage is present in the result, in board order, even when
        empty.  Records keep their relative order within a column.

        Args:
            records: Records to partition; defaults to a snapshot of the
                whole store.
        """
        columns: Dict[Stage, List[CandidateRecord]] = {stage: [] for stage in Stage}
        for record in self.records() if records is None else records:
            columns[record.stage].append(record)
        return columns

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[CandidateRecord]:
        return iter(self.records())

    def __contains__(self, record_id: object) -> bool:
        return isinstance(record_id, str) and self.get(record_id) is not None
