"""
Pipeline coordinator.

Runs résumé analysis batches and turns each successful analysis into a
candidate record on the board.  Documents are analysed strictly one at
a time: the loop awaits each analyzer call before starting the next, so
the ``Analyzing i/N...`` progress label stays meaningful, the external
service never sees a burst of requests, and a failure is isolated to
the document that caused it.

The coordinator also owns the "currently displayed" analysis: the
result of a single-document batch, a record selected from the board, or
a blind-mode re-analysis of the most recent batch's first document.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from .classify import classify
from .schema import AnalysisResult, CandidateRecord, Document
from .store import CandidateStore

if TYPE_CHECKING:
    from ..llm.providers import AIProvider

logger = logging.getLogger(__name__)


@dataclass
class BatchProgress:
    """Progress of the batch currently (or most recently) running."""

    total: int = 0
    completed: int = 0
    succeeded: int = 0
    failed: int = 0
    running: bool = False

    @property
    def label(self) -> str:
        if not self.running:
            return ""
        current = min(self.completed + 1, self.total)
        return f"Analyzing {current}/{self.total}..."


@dataclass
class BatchReport:
    """Outcome of one `PipelineCoordinator.run_batch` call."""

    created: List[CandidateRecord] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.created) + len(self.failures)


ProgressCallback = Callable[[BatchProgress], None]


class PipelineCoordinator:
    """Owns the candidate store, batch progress and the displayed result.

    Args:
        provider: AI provider used as the résumé analyzer.
        store: Candidate store to append to; a fresh one by default.
        blind_mode: Initial blind hiring flag sent with each analysis.
        on_progress: Called with the `BatchProgress` before and after
            every document.
        id_factory: Produces record ids; defaults to random UUID hex.
        clock: Produces record creation timestamps.
    """

    def __init__(
        self,
        provider: AIProvider,
        store: Optional[CandidateStore] = None,
        *,
        blind_mode: bool = False,
        on_progress: Optional[ProgressCallback] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.provider = provider
        self.store = store if store is not None else CandidateStore()
        self.blind_mode = blind_mode
        self.on_progress = on_progress
        self.progress = BatchProgress()
        self.current_result: Optional[AnalysisResult] = None
        self.selected_id: Optional[str] = None
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._clock = clock or datetime.now
        self._last_job_description: Optional[str] = None
        self._last_documents: List[Document] = []

    def _publish(self) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(self.progress)
        except Exception:  # noqa: BLE001
            logger.exception("Progress callback failed")

    def _new_id(self) -> str:
        record_id = self._id_factory()
        while record_id in self.store:
            record_id = self._id_factory()
        return record_id

    def _build_record(self, document: Document, analysis: AnalysisResult) -> CandidateRecord:
        return CandidateRecord(
            id=self._new_id(),
            name=document.display_name,
            score=analysis.fit_score,
            stage=classify(analysis.fit_score),
            tags=analysis.candidate_tags,
            summary=analysis.score_reasoning,
            created_at=self._clock(),
            analysis=analysis,
        )

    async def _analyze(self, job_description: str, document: Document, blind_mode: bool) -> AnalysisResult:
        payload = await self.provider.analyze_resume(job_description, document, blind_mode)
        return AnalysisResult.from_payload(payload)

    async def run_batch(
        self,
        job_description: str,
        documents: Sequence[Document],
        blind_mode: Optional[bool] = None,
    ) -> BatchReport:
        """Analyse ``documents`` against ``job_description`` one at a time.

        Each successful analysis becomes a record, classified by fit
        score and prepended to the store, so a fully successful batch of
        ``[A, B, C]`` leaves the store ordered ``[C, B, A, ...]``.  A
        failing document is logged and reported, and the loop moves on.
        Nothing raised by the analyzer escapes this method.

        A blank job description or an empty document list is a no-op.

        Args:
            job_description: Job description text to match against.
            documents: Résumés to analyse, in submission order.
            blind_mode: Overrides the coordinator's blind hiring flag
                for this batch.

        Returns:
            A `BatchReport` listing created records and failures.
        """
        report = BatchReport()
        if not job_description or not job_description.strip() or not documents:
            logger.info("Nothing to analyse: job description or documents missing")
            return report
        blind = self.blind_mode if blind_mode is None else blind_mode
        documents = list(documents)
        self._last_job_description = job_description
        self._last_documents = documents
        self.selected_id = None
        self.current_result = None
        self.progress = BatchProgress(total=len(documents), running=True)
        try:
            for index, document in enumerate(documents, start=1):
                self._publish()
                logger.info("Analyzing %d/%d: %s", index, len(documents), document.name)
                try:
                    analysis = await self._analyze(job_description, document, blind)
                    record = self._build_record(document, analysis)
                    self.store.prepend(record)
                except Exception as exc:  # noqa: BLE001
                    logger.exception("Failed to analyze %s", document.name)
                    report.failures.append((document.name, str(exc)))
                    self.progress.failed += 1
                else:
                    report.created.append(record)
                    self.progress.succeeded += 1
                    if len(documents) == 1:
                        self.current_result = analysis
                self.progress.completed += 1
        finally:
            self.progress.running = False
            self._publish()
        logger.info(
            "Batch complete: %d analysed, %d failed",
            len(report.created),
            len(report.failures),
        )
        return report

    def select(self, record_id: str) -> Optional[AnalysisResult]:
        """Display the stored analysis of a board record.

        Returns:
            The record's analysis, or ``None`` if the id is unknown (the
            current selection is left as it was).
        """
        record = self.store.get(record_id)
        if record is None:
            return None
        self.selected_id = record.id
        self.current_result = record.analysis
        return record.analysis

    def clear_selection(self) -> None:
        self.selected_id = None
        self.current_result = None

    async def set_blind_mode(self, enabled: bool) -> Optional[AnalysisResult]:
        """Toggle blind hiring mode and refresh the displayed analysis.

        When the flag changes, a batch has already run and no board
        record is selected, the first document of the most recent batch
        is analysed again with the new flag.  Only `current_result` is
        replaced; the store is never modified.  A failed re-analysis is
        logged and leaves `current_result` unchanged.

        Returns:
            The re-analysed result, or ``None`` if nothing was re-run.
        """
        changed = enabled != self.blind_mode
        self.blind_mode = enabled
        if not changed or self.selected_id is not None:
            return None
        if not self._last_job_description or not self._last_documents:
            return None
        document = self._last_documents[0]
        logger.info("Re-analyzing %s with blind mode %s", document.name, "on" if enabled else "off")
        try:
            analysis = await self._analyze(self._last_job_description, document, enabled)
        except Exception:  # noqa: BLE001
            logger.exception("Re-analysis of %s failed", document.name)
            return None
        self.current_result = analysis
        return analysis
