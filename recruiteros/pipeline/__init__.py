"""
Candidate pipeline.

The `pipeline` package holds the state of a recruiting session and the
operations that change it:

* `schema` – Stages, tags, validated analysis results, candidate
  records, documents, chat turns and board move commands.
* `classify` – Maps a fit score onto a starting stage.
* `store` – Ordered, most-recent-first candidate record store.
* `coordinator` – Runs analysis batches and creates records.
* `board` – Applies manual stage moves.
"""

from .schema import (  # noqa: F401
    AnalysisResult,
    CandidateRecord,
    CandidateTag,
    ChatRole,
    ChatTurn,
    Document,
    MoveCommand,
    Stage,
)
from .classify import classify  # noqa: F401
from .store import CandidateStore  # noqa: F401
from .coordinator import BatchProgress, BatchReport, PipelineCoordinator  # noqa: F401
from .board import BoardTransitionManager  # noqa: F401
