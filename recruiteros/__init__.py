"""
RecruiterOS candidate pipeline package.

This package triages résumés against a job description with an external
AI analysis service and tracks the resulting candidates through a hiring
pipeline board.  Each subpackage implements one step of that flow:

1. **ingest** – Load résumé documents (PDF or image) from disk into
   `Document` values carrying their bytes and media type.
2. **llm** – Provider abstractions for the three external AI services:
   the résumé analyzer, the semantic candidate filter and the
   conversational assistant.  Gemini and OpenAI implementations are
   provided along with an offline placeholder.
3. **pipeline** – The candidate record store, the stage classifier, the
   batch coordinator that turns analysis results into records, and the
   board transition manager for manual stage moves.
4. **search** – Natural language filtering of the board via the
   semantic filter service, failing open when the service is down.
5. **assistant** – Grounding context for the assistant and the chat
   session that talks to it.
6. **report** – Hiring manager hand-off emails and board exports.
7. **cli** – Command line entry point wiring the above together.
"""

__version__ = "0.1.0"
