"""Tests for the hand-off email and export writers."""

from __future__ import annotations

import csv
import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from conftest import analysis_payload, make_record

from recruiteros.pipeline.schema import AnalysisResult, Stage
from recruiteros.report import BOARD_HEADERS, draft_handoff_email, save_analysis_json, write_board_csv


class TestHandoffEmail(unittest.TestCase):
    def test_uses_first_strength_gap_and_question(self) -> None:
        analysis = AnalysisResult.from_payload(analysis_payload(87))
        email = draft_handoff_email(analysis, "Jane Doe")
        self.assertIn("Jane Doe is a 87% match", email)
        self.assertIn("Top Strength: Python", email)
        self.assertIn("Potential Concern: No Kubernetes", email)
        self.assertIn("Tell me about your API design.", email)
        self.assertTrue(email.startswith("Hi [Hiring Manager],"))

    def test_integrity_issue_takes_priority(self) -> None:
        analysis = AnalysisResult.from_payload(
            analysis_payload(60, integrityCheck={"status": "flagged", "issues": ["Overlapping dates"]})
        )
        self.assertIn("Potential Concern: Overlapping dates", draft_handoff_email(analysis, "Sam"))

    def test_defaults_for_empty_analysis(self) -> None:
        email = draft_handoff_email(AnalysisResult.from_payload({}), "Sam")
        self.assertIn("Sam is a 0% match", email)
        self.assertIn("Top Strength: Solid technical background", email)
        self.assertIn("Potential Concern: No major red flags identified.", email)
        self.assertIn("Walk me through your most complex project.", email)


class TestExport(unittest.TestCase):
    def test_write_board_csv(self) -> None:
        records = [make_record(name="Ann", score=91, stage=Stage.INTERVIEW), make_record(name="Bob")]
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "board.csv"
            write_board_csv(records, str(path))
            with path.open(encoding="utf-8") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual(list(rows[0].keys()), BOARD_HEADERS)
        self.assertEqual([row["name"] for row in rows], ["Ann", "Bob"])
        self.assertEqual(rows[0]["stage"], "Interview")
        self.assertEqual(rows[0]["score"], "91")
        self.assertEqual(rows[0]["tags"], "Ex-Startup;Short Tenure;Python Expert")
        self.assertEqual(rows[0]["created_at"], "2024-05-01T09:30:00")

    def test_save_analysis_json(self) -> None:
        analysis = AnalysisResult.from_payload(analysis_payload(73))
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "analysis.json"
            save_analysis_json(analysis, str(path))
            data = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(data["fitScore"], 73)
        self.assertEqual(data["candidateTags"][1]["type"], "risk")


if __name__ == "__main__":
    unittest.main()
