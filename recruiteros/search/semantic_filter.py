"""
Semantic filter adapter.

Narrows the board with a natural language query ("backend people with
a score above 80") answered by the semantic filter service.  Records
are projected to a compact summary before being sent, never the full
analysis payload, to keep requests small.

The adapter fails open: if the service call fails, every input id is
returned so a transient outage never hides candidates from the
recruiter.  A blank query returns ``None``, meaning "no filter active",
which is distinct from an empty match list.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..llm.providers import AIProvider
from ..pipeline.schema import CandidateRecord

logger = logging.getLogger(__name__)


def summarize(record: CandidateRecord) -> Dict[str, object]:
    """Compact projection of a record sent to the filter service."""
    return {
        "id": record.id,
        "name": record.name,
        "score": record.score,
        "tags": [tag.to_payload() for tag in record.tags],
        "summary": record.summary,
    }


class SemanticFilterAdapter:
    def __init__(self, provider: AIProvider) -> None:
        self.provider = provider

    async def filter(self, query: str, records: Sequence[CandidateRecord]) -> Optional[List[str]]:
        """Return the ids of ``records`` matching ``query``.

        Args:
            query: Free text search.  Blank means no filter.
            records: Records to search, usually a store snapshot.

        Returns:
            ``None`` for a blank query, otherwise the matching ids.
            Ids the service returns that are not among ``records`` are
            discarded.  On service failure, all ids of ``records``.
        """
        if not query or not query.strip():
            return None
        if not records:
            return []
        known = [record.id for record in records]
        try:
            matches = await self.provider.filter_candidates(query.strip(), [summarize(r) for r in records])
            wanted = set(matches)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Semantic filter failed, showing all %d candidates: %s", len(known), exc)
            return known
        unknown = wanted.difference(known)
        if unknown:
            logger.debug("Discarding %d unknown ids from filter response", len(unknown))
        return [record_id for record_id in known if record_id in wanted]


def visible(records: Iterable[CandidateRecord], ids: Optional[Iterable[str]]) -> List[CandidateRecord]:
    """Records to display for a filter result, in store order (``None`` shows all)."""
    if ids is None:
        return list(records)
    wanted = set(ids)
    return [record for record in records if record.id in wanted]
