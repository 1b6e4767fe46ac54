"""
Board and analysis export.

Writes the candidate board to CSV (one row per record, in store order)
and a single analysis to JSON in its camelCase wire shape.  Existing
files are overwritten.  Unicode is written in UTF‑8 encoding.
"""

from __future__ import annotations

import csv
import json
from typing import Iterable

from ..pipeline.schema import AnalysisResult, CandidateRecord

BOARD_HEADERS = [
    "id",
    "name",
    "role",
    "score",
    "stage",
    "tags",
    "summary",
    "created_at",
]


def write_board_csv(records: Iterable[CandidateRecord], path: str) -> None:
    """Write candidate records to a CSV file.

    Args:
        records: Records in the order they should appear.
        path: Destination path for the CSV.
    """
    with open(path, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=BOARD_HEADERS)
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "id": record.id,
                    "name": record.name,
                    "role": record.role,
                    "score": record.score,
                    "stage": record.stage.value,
                    "tags": ";".join(tag.label for tag in record.tags),
                    "summary": record.summary,
                    "created_at": record.created_at.isoformat(),
                }
            )


def save_analysis_json(analysis: AnalysisResult, out_path: str) -> None:
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(analysis.to_payload(), f, indent=2, ensure_ascii=False)
