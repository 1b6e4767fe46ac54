"""
Grounding context for the conversational assistant.

Serialises the current candidate records into a small, stable JSON
document the assistant can quote from.  Only a fixed projection of each
record is included (no raw analysis payload), and the number of records
can be capped so the context stays bounded as the board grows.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from ..pipeline.schema import CandidateRecord


def project(record: CandidateRecord) -> Dict[str, object]:
    return {
        "name": record.name,
        "role": record.role,
        "score": record.score,
        "stage": record.stage.value,
        "tags": ", ".join(tag.label for tag in record.tags),
        "strengths": list(record.analysis.top_strengths),
        "gaps": list(record.analysis.gap_analysis),
        "summary": record.summary,
    }


def build_context(records: Sequence[CandidateRecord], max_records: Optional[int] = None) -> str:
    """Return the JSON context string for ``records`` in store order.

    Args:
        records: Candidate records, most recent first.
        max_records: Keep only this many of the most recent records;
            ``None`` keeps all.
    """
    selected: List[CandidateRecord] = list(records)
    if max_records is not None:
        selected = selected[:max_records]
    return json.dumps([project(record) for record in selected], indent=2)
