"""
Pipeline data model.

Defines the dataclasses shared by every pipeline component: the four
board stages, the tags attached to a candidate, the validated analysis
result returned by the résumé analyzer, the candidate record kept in the
store, the résumé document handed to the analyzer, chat turns and the
board move command.

The analyzer response is loosely shaped on the wire (every field is
optional).  `AnalysisResult.from_payload` is the single place where
defaults are applied; the rest of the package can rely on every field
being present and typed.
"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

TAG_COLORS = ("green", "red", "blue")
TAG_KINDS = ("strength", "risk", "skill")
INTEGRITY_STATUSES = ("clean", "flagged")


class Stage(str, Enum):
    """Pipeline bucket a candidate occupies.  Declaration order is board order."""

    NEW_APPLICATIONS = "New Applications"
    SCREENING = "Screening"
    INTERVIEW = "Interview"
    OFFER = "Offer"

    @classmethod
    def parse(cls, text: str) -> "Stage":
        """Resolve a stage from its display value or member name.

        Matching ignores case and treats underscores, hyphens and spaces
        alike, so ``"offer"``, ``"NEW_APPLICATIONS"`` and
        ``"new applications"`` all resolve.

        Raises:
            ValueError: If ``text`` does not name a stage.
        """
        if isinstance(text, cls):
            return text
        key = " ".join(str(text).replace("_", " ").replace("-", " ").split()).lower()
        for stage in cls:
            if key in (stage.value.lower(), stage.name.replace("_", " ").lower()):
                return stage
        raise ValueError(f"Unknown stage '{text}'; expected one of: {', '.join(s.value for s in cls)}")


@dataclass(frozen=True)
class CandidateTag:
    """Short coloured label summarising a strength, risk or top skill."""

    label: str
    color: str  # 'green' | 'red' | 'blue'
    kind: str   # 'strength' | 'risk' | 'skill'

    @classmethod
    def from_payload(cls, data: object) -> Optional["CandidateTag"]:
        """Build a tag from its wire dict, or ``None`` if it is malformed."""
        if not isinstance(data, dict):
            return None
        label = data.get("label")
        color = str(data.get("color", "")).lower()
        kind = str(data.get("type", data.get("kind", ""))).lower()
        if not isinstance(label, str) or not label.strip():
            return None
        if color not in TAG_COLORS or kind not in TAG_KINDS:
            logger.warning("Dropping tag %r with color=%r kind=%r", label, color, kind)
            return None
        return cls(label=label.strip(), color=color, kind=kind)

    def to_payload(self) -> Dict[str, str]:
        return {"label": self.label, "color": self.color, "type": self.kind}


@dataclass(frozen=True)
class ResumeQuality:
    readability_score: int = 0
    visual_feedback: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IntegrityCheck:
    status: str = "clean"  # 'clean' | 'flagged'
    issues: Tuple[str, ...] = ()

    @property
    def flagged(self) -> bool:
        return self.status == "flagged"


def _score(value: object) -> int:
    """Coerce a wire score to an int in [0, 100]; anything non-numeric is 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                return 0
        else:
            return 0
    if value != value:  # NaN
        return 0
    return max(0, min(100, int(round(value))))


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _strings(value: object) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True)
class AnalysisResult:
    """Validated résumé analysis returned by the analyzer service."""

    fit_score: int = 0
    score_reasoning: str = ""
    top_strengths: Tuple[str, ...] = ()
    candidate_tags: Tuple[CandidateTag, ...] = ()
    resume_quality: ResumeQuality = field(default_factory=ResumeQuality)
    integrity_check: IntegrityCheck = field(default_factory=IntegrityCheck)
    gap_analysis: Tuple[str, ...] = ()
    interview_questions: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: object) -> "AnalysisResult":
        """Validate a raw analyzer response and apply defaults.

        Missing or non-numeric ``fitScore`` becomes 0 and numeric scores
        are rounded and clamped to 0–100.  Missing strings become ``""``
        and missing lists become empty tuples.  Tags with an unknown
        colour or kind are dropped.  An unknown integrity status is
        treated as ``clean``.

        Args:
            payload: Decoded JSON object from the analyzer.  Anything
                other than a dict yields an all-default result.

        Returns:
            An `AnalysisResult` with every field populated.
        """
        if not isinstance(payload, dict):
            logger.warning("Analyzer payload is %s, not an object; using defaults", type(payload).__name__)
            payload = {}
        tags: List[CandidateTag] = []
        raw_tags = payload.get("candidateTags")
        for raw_tag in raw_tags if isinstance(raw_tags, list) else []:
            tag = CandidateTag.from_payload(raw_tag)
            if tag is not None:
                tags.append(tag)
        quality = payload.get("resumeQuality")
        quality = quality if isinstance(quality, dict) else {}
        integrity = payload.get("integrityCheck")
        integrity = integrity if isinstance(integrity, dict) else {}
        status = str(integrity.get("status", "clean")).lower()
        if status not in INTEGRITY_STATUSES:
            status = "clean"
        return cls(
            fit_score=_score(payload.get("fitScore")),
            score_reasoning=_text(payload.get("scoreReasoning")),
            top_strengths=_strings(payload.get("topStrengths")),
            candidate_tags=tuple(tags),
            resume_quality=ResumeQuality(
                readability_score=_score(quality.get("readabilityScore")),
                visual_feedback=_strings(quality.get("visualFeedback")),
            ),
            integrity_check=IntegrityCheck(status=status, issues=_strings(integrity.get("issues"))),
            gap_analysis=_strings(payload.get("gapAnalysis")),
            interview_questions=_strings(payload.get("interviewQuestions")),
        )

    def to_payload(self) -> Dict[str, object]:
        """Return the camelCase wire shape used for display and export."""
        return {
            "fitScore": self.fit_score,
            "scoreReasoning": self.score_reasoning,
            "topStrengths": list(self.top_strengths),
            "candidateTags": [tag.to_payload() for tag in self.candidate_tags],
            "resumeQuality": {
                "readabilityScore": self.resume_quality.readability_score,
                "visualFeedback": list(self.resume_quality.visual_feedback),
            },
            "integrityCheck": {
                "status": self.integrity_check.status,
                "issues": list(self.integrity_check.issues),
            },
            "gapAnalysis": list(self.gap_analysis),
            "interviewQuestions": list(self.interview_questions),
        }


@dataclass(frozen=True)
class CandidateRecord:
    """One analysed candidate on the board.

    Records are immutable; a stage move swaps in a copy produced by
    `with_stage` so every other field stays exactly as created.
    """

    id: str
    name: str
    score: int
    stage: Stage
    tags: Tuple[CandidateTag, ...]
    summary: str
    created_at: datetime
    analysis: AnalysisResult
    role: str = "Candidate"

    def with_stage(self, stage: Stage) -> "CandidateRecord":
        return replace(self, stage=stage)


@dataclass(frozen=True)
class Document:
    """A résumé file ready to be sent to the analyzer."""

    name: str
    media_type: str
    data: bytes

    @property
    def display_name(self) -> str:
        """File name with its final extension removed (``"jane.doe.pdf"`` -> ``"jane.doe"``)."""
        stem, ext = os.path.splitext(self.name)
        return stem if ext else self.name

    @property
    def content_b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    role: ChatRole
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class MoveCommand:
    """Board move request: put ``record_id`` into ``target_stage``."""

    record_id: str
    target_stage: Stage
