"""
Board transition manager.

Applies manual stage moves to the candidate store.  A move is a plain
`MoveCommand` value so the board can be driven by any input mechanism
(drag and drop, a CLI command, an API call).  Moves bypass the stage
classifier and are not checked for direction: the board is a free-form
organising tool, so an ``Offer`` candidate can be moved back to
``Screening``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .schema import CandidateRecord, MoveCommand, Stage
from .store import CandidateStore

logger = logging.getLogger(__name__)


class BoardTransitionManager:
    def __init__(self, store: CandidateStore) -> None:
        self.store = store

    def move(self, record_id: str, stage: Stage) -> bool:
        """Move a record to ``stage``.

        An unknown ``record_id`` is a no-op rather than an error, since
        the id may be stale.

        Returns:
            ``True`` if a record was moved.

        Raises:
            ValueError: If ``stage`` does not name a board stage.
        """
        stage = Stage.parse(stage)
        moved = self.store.update_stage(record_id, stage)
        if moved:
            logger.info("Moved candidate %s to %s", record_id, stage.value)
        else:
            logger.debug("Ignoring move of unknown candidate %s", record_id)
        return moved

    def dispatch(self, command: MoveCommand) -> bool:
        return self.move(command.record_id, command.target_stage)

    def columns(self, visible_ids: Optional[Iterable[str]] = None) -> Dict[Stage, List[CandidateRecord]]:
        """Board columns, optionally narrowed to ``visible_ids``.

        ``None`` shows every record.  Display order always follows the
        store, whatever order ``visible_ids`` arrives in.
        """
        records = self.store.records()
        if visible_ids is not None:
            wanted = set(visible_ids)
            records = [record for record in records if record.id in wanted]
        return self.store.by_stage(records)
