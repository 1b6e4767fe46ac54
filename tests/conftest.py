"""Shared fixtures: in-memory AI providers and record builders.

No test talks to a real AI service.  `FakeProvider` returns canned
payloads (or raises) per document name and records every call so tests
can assert on what was sent.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pytest  # type: ignore

from recruiteros.llm.providers import AIProvider, ProviderError
from recruiteros.pipeline.schema import AnalysisResult, CandidateRecord, ChatTurn, Document, Stage


def analysis_payload(score: Optional[float] = 70, **overrides: object) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "scoreReasoning": "Solid backend experience.",
        "topStrengths": ["Python", "APIs", "Mentoring"],
        "candidateTags": [
            {"label": "Ex-Startup", "color": "green", "type": "strength"},
            {"label": "Short Tenure", "color": "red", "type": "risk"},
            {"label": "Python Expert", "color": "blue", "type": "skill"},
        ],
        "resumeQuality": {"readabilityScore": 82, "visualFeedback": ["Clean layout"]},
        "integrityCheck": {"status": "clean", "issues": []},
        "gapAnalysis": ["No Kubernetes"],
        "interviewQuestions": ["Tell me about your API design."],
    }
    if score is not None:
        payload["fitScore"] = score
    payload.update(overrides)
    return payload


class FakeProvider(AIProvider):
    name = "fake"

    def __init__(
        self,
        scores: Optional[Dict[str, Optional[float]]] = None,
        fail_for: Sequence[str] = (),
        filter_result: Optional[List[str]] = None,
        filter_error: bool = False,
        chat_reply: str = "Here is what I found.",
        chat_error: bool = False,
    ) -> None:
        self.scores = scores or {}
        self.fail_for = set(fail_for)
        self.filter_result = filter_result
        self.filter_error = filter_error
        self.chat_reply = chat_reply
        self.chat_error = chat_error
        self.analyze_calls: List[tuple] = []
        self.filter_calls: List[tuple] = []
        self.chat_calls: List[tuple] = []

    async def analyze_resume(self, job_description: str, document: Document, blind_mode: bool = False) -> Dict[str, object]:
        self.analyze_calls.append((job_description, document.name, document.media_type, blind_mode))
        if document.name in self.fail_for:
            raise ProviderError(f"analyzer down for {document.name}")
        return analysis_payload(self.scores.get(document.name, 70))

    async def filter_candidates(self, query: str, summaries: List[Dict[str, object]]) -> List[str]:
        self.filter_calls.append((query, summaries))
        if self.filter_error:
            raise ProviderError("filter down")
        return list(self.filter_result or [])

    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        self.chat_calls.append((tuple(history), message, context))
        if self.chat_error:
            raise ProviderError("assistant down")
        return self.chat_reply


class GatedChatProvider(FakeProvider):
    """Chat replies wait until `release` is set, to hold a session in PENDING."""

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        self.started.set()
        await self.release.wait()
        return await super().chat(history, message, context)


def make_document(name: str, media_type: str = "application/pdf") -> Document:
    return Document(name=name, media_type=media_type, data=b"%PDF-1.4 fake")


_ids = itertools.count(1)


def make_record(
    name: str = "Jane Doe",
    score: int = 70,
    stage: Stage = Stage.SCREENING,
    record_id: Optional[str] = None,
) -> CandidateRecord:
    analysis = AnalysisResult.from_payload(analysis_payload(score))
    return CandidateRecord(
        id=record_id or f"rec-{next(_ids)}",
        name=name,
        score=score,
        stage=stage,
        tags=analysis.candidate_tags,
        summary=analysis.score_reasoning,
        created_at=datetime(2024, 5, 1, 9, 30),
        analysis=analysis,
    )


@pytest.fixture
def fake_provider():
    """Factory for `FakeProvider` instances."""
    return FakeProvider


@pytest.fixture
def gated_provider():
    return GatedChatProvider


@pytest.fixture
def document():
    return make_document


@pytest.fixture
def record():
    return make_record
