"""
Conversational assistant grounded in the candidate pipeline.

* `context` – Bounded JSON projection of the candidate records.
* `session` – Chat transcript with a single in-flight request guard.
"""

from .context import build_context  # noqa: F401
from .session import FALLBACK_REPLY, GREETING, ChatSession, SessionState  # noqa: F401
