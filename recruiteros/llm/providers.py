"""
AI provider abstractions.

This module defines a common interface for the three external AI
services the pipeline talks to: the résumé analyzer, the semantic
candidate filter and the conversational assistant.  Concrete
implementations are provided for the Gemini (google-generativeai) and
OpenAI APIs.  A placeholder implementation, which never touches the
network, is used when no API keys are configured.

Providers report every service failure by raising `ProviderError`.
They do not recover on their own: the batch coordinator isolates a
failed analysis, the filter adapter fails open and the chat session
appends a fallback reply.

The provider is selected via `get_default_provider`, from the
``LLM_PROVIDER`` setting or from whichever API key is available.
"""

from __future__ import annotations

import io
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

import pdfplumber

from ..config import Settings, load_settings
from ..pipeline.schema import ChatRole, ChatTurn, Document
from .prompts import (
    ANALYSIS_RESPONSE_SCHEMA,
    FILTER_RESPONSE_SCHEMA,
    analysis_prompt,
    analysis_system_instruction,
    chat_system_instruction,
    filter_prompt,
)

logger = logging.getLogger(__name__)

EMPTY_REPLY = "I couldn't generate a response."


class ProviderError(RuntimeError):
    """An external AI service call failed or returned unusable data."""


def parse_json_response(content: Optional[str]) -> object:
    """Decode a JSON model response, tolerating Markdown code fences.

    Raises:
        ProviderError: If the content is empty or not valid JSON.
    """
    if not content or not content.strip():
        raise ProviderError("Empty response from model")
    text = content.strip()
    fenced = re.match(r"^```(?:json)?\s*(.*?)\s*```$", text, re.S)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Model returned invalid JSON: {exc}") from exc


def _id_list(data: object) -> List[str]:
    """Extract candidate ids from a filter response (bare list or ``{"ids": [...]}``)."""
    if isinstance(data, dict):
        data = data.get("ids", [])
    if not isinstance(data, list):
        raise ProviderError(f"Filter response is {type(data).__name__}, expected a list of ids")
    return [str(item) for item in data if isinstance(item, (str, int))]


class AIProvider(ABC):
    """Abstract base class for AI service providers."""

    name = "abstract"

    @abstractmethod
    async def analyze_resume(self, job_description: str, document: Document, blind_mode: bool = False) -> Dict[str, object]:
        """Analyse a résumé document against a job description.

        Args:
            job_description: Job description text.
            document: Résumé bytes and media type (PDF or image).
            blind_mode: Ask the analyzer to ignore identity and
                demographic signals and to refer to "The Candidate".

        Returns:
            The raw analysis payload (camelCase keys, all optional).
        """
        raise NotImplementedError

    @abstractmethod
    async def filter_candidates(self, query: str, summaries: List[Dict[str, object]]) -> List[str]:
        """Return the ids of the candidate summaries matching ``query``."""
        raise NotImplementedError

    @abstractmethod
    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        """Reply to ``message`` given the prior transcript and grounding context."""
        raise NotImplementedError


_WORD_RE = re.compile(r"[A-Za-z][A-Za-z0-9+#.\-]{2,}")
_STOPWORDS = {
    "and", "the", "for", "with", "you", "our", "are", "will", "have", "has", "this", "that",
    "from", "your", "who", "all", "can", "able", "work", "working", "team", "role", "job",
    "experience", "years", "strong", "skills", "including", "must", "plus", "etc", "we're",
    "about", "into", "their", "they", "them", "other", "using", "use", "such", "not", "but",
}
_SCORE_CLAUSE_RE = re.compile(r"score\s*(>=|<=|>|<|=)\s*(\d+)", re.I)


def _keywords(text: str) -> List[str]:
    seen: Dict[str, None] = {}
    for word in _WORD_RE.findall(text):
        word = word.lower().strip(".-")
        if len(word) >= 3 and word not in _STOPWORDS:
            seen.setdefault(word, None)
    return list(seen)


def _extract_text(document: Document) -> str:
    """Text of a PDF résumé; images carry no extractable text."""
    if document.media_type != "application/pdf":
        return ""
    try:
        with pdfplumber.open(io.BytesIO(document.data)) as pdf:
            return "\n".join(page.extract_text() or "" for page in pdf.pages)
    except Exception as exc:  # noqa: BLE001
        raise ProviderError(f"Could not read PDF {document.name}: {exc}") from exc


class PlaceholderProvider(AIProvider):
    """Offline provider that does not call any external API.

    Scores a résumé by the share of job description keywords found in
    the text extracted from the PDF, filters by plain substring match
    (plus ``score > N`` style clauses) and answers chat messages with a
    short canned reply.
    """

    name = "placeholder"

    async def analyze_resume(self, job_description: str, document: Document, blind_mode: bool = False) -> Dict[str, object]:
        text = _extract_text(document)
        wanted = _keywords(job_description)
        found = set(_keywords(text))
        matched = [word for word in wanted if word in found]
        missing = [word for word in wanted if word not in found]
        score = round(100 * len(matched) / len(wanted)) if wanted else 0
        subject = "The Candidate" if blind_mode else document.name
        if not text.strip():
            reasoning = f"No text could be extracted from {subject}; keyword matching was not possible."
        else:
            reasoning = f"{subject} matches {len(matched)} of {len(wanted)} job description keywords."
        top = matched[0] if matched else "fundamentals"
        return {
            "fitScore": score,
            "scoreReasoning": reasoning,
            "topStrengths": [f"Mentions {word}" for word in matched[:3]],
            "candidateTags": [
                {"label": f"{top.title()} Background", "color": "green", "type": "strength"},
                {"label": f"Missing {missing[0]}" if missing else "Generalist", "color": "red", "type": "risk"},
                {"label": top.title(), "color": "blue", "type": "skill"},
            ],
            "resumeQuality": {"readabilityScore": 0, "visualFeedback": ["Layout was not assessed offline."]},
            "integrityCheck": {"status": "clean", "issues": []},
            "gapAnalysis": [f"No mention of {word}" for word in missing[:5]],
            "interviewQuestions": [f"Describe a project where you used {word}." for word in (matched or missing)[:3]],
        }

    async def filter_candidates(self, query: str, summaries: List[Dict[str, object]]) -> List[str]:
        clauses = _SCORE_CLAUSE_RE.findall(query)
        terms = [term for term in _SCORE_CLAUSE_RE.sub(" ", query).lower().split() if len(term) > 2 and term not in _STOPWORDS]
        matches: List[str] = []
        for summary in summaries:
            score = summary.get("score") or 0
            if not all(_compare(score, op, int(value)) for op, value in clauses):
                continue
            haystack = " ".join(
                [str(summary.get("name", "")), str(summary.get("summary", ""))]
                + [str(tag.get("label", "")) for tag in summary.get("tags", []) if isinstance(tag, dict)]
            ).lower()
            if all(term in haystack for term in terms):
                matches.append(str(summary.get("id")))
        return matches

    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        count = 0
        if context:
            try:
                count = len(json.loads(context))
            except (json.JSONDecodeError, TypeError):
                count = 0
        return (
            f"There are {count} candidates in the pipeline. "
            "Configure GEMINI_API_KEY or OPENAI_API_KEY to get full assistant answers."
        )


def _compare(score: object, op: str, value: int) -> bool:
    if not isinstance(score, (int, float)):
        return False
    return {
        ">": score > value,
        ">=": score >= value,
        "<": score < value,
        "<=": score <= value,
        "=": score == value,
    }[op]


class GeminiProvider(AIProvider):
    """Provider that uses Google Generative AI (Gemini) via google-generativeai."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        chat_model: str = "gemini-3-pro-preview",
    ) -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "google-generativeai package is required for GeminiProvider. Install it via pip."
            ) from exc
        self.genai = genai
        self.api_key = api_key
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY/GOOGLE_API_KEY not provided")
        self.model_name = model
        self.chat_model_name = chat_model
        self.genai.configure(api_key=self.api_key)

    def _model(self, name: str, system_instruction: str):
        try:
            return self.genai.GenerativeModel(name, system_instruction=system_instruction)
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Failed to load Gemini model {name}: {exc}") from exc

    async def analyze_resume(self, job_description: str, document: Document, blind_mode: bool = False) -> Dict[str, object]:
        prompt = analysis_prompt(job_description, blind_mode)
        model = self._model(self.model_name, analysis_system_instruction(blind_mode))
        logger.debug("Sending prompt to Gemini: %s", prompt[:200])
        try:
            response = await model.generate_content_async(
                [{"mime_type": document.media_type, "data": document.data}, prompt],
                generation_config=self.genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=ANALYSIS_RESPONSE_SCHEMA,
                ),
            )
            content = response.text
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Gemini analysis failed for {document.name}: {exc}") from exc
        data = parse_json_response(content)
        if not isinstance(data, dict):
            raise ProviderError("Gemini analysis response is not a JSON object")
        return data

    async def filter_candidates(self, query: str, summaries: List[Dict[str, object]]) -> List[str]:
        prompt = filter_prompt(query, summaries)
        model = self._model(self.model_name, "You match recruiters' search queries to candidates.")
        logger.debug("Sending filter prompt to Gemini: %s", prompt[:200])
        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=self.genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=FILTER_RESPONSE_SCHEMA,
                ),
            )
            content = response.text
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Gemini filter call failed: {exc}") from exc
        if not content:
            return []
        return _id_list(parse_json_response(content))

    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        model = self._model(self.chat_model_name, chat_system_instruction(context))
        gemini_history = [
            {"role": "user" if turn.role == ChatRole.USER else "model", "parts": [turn.text]}
            for turn in history
        ]
        try:
            session = model.start_chat(history=gemini_history)
            response = await session.send_message_async(message)
            return response.text or EMPTY_REPLY
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Gemini chat call failed: {exc}") from exc


class OpenAIProvider(AIProvider):
    """Provider that uses the OpenAI chat completions API."""

    name = "openai"

    def __init__(self, api_key: str | None = None, model: str = "gpt-4o-mini") -> None:
        try:
            from openai import AsyncOpenAI  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "openai package is required for OpenAIProvider. Install it via pip."
            ) from exc
        self.api_key = api_key
        self.model = model
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not provided")
        self.client = AsyncOpenAI(api_key=self.api_key)

    async def _complete(self, messages: List[Dict[str, object]], json_mode: bool) -> str:
        kwargs: Dict[str, object] = {"model": self.model, "messages": messages}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
            kwargs["temperature"] = 0.0
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"OpenAI API call failed: {exc}") from exc
        return response.choices[0].message.content or ""

    async def analyze_resume(self, job_description: str, document: Document, blind_mode: bool = False) -> Dict[str, object]:
        prompt = analysis_prompt(job_description, blind_mode)
        data_url = f"data:{document.media_type};base64,{document.content_b64}"
        if document.media_type == "application/pdf":
            attachment: Dict[str, object] = {
                "type": "file",
                "file": {"filename": document.name, "file_data": data_url},
            }
        else:
            attachment = {"type": "image_url", "image_url": {"url": data_url}}
        messages = [
            {"role": "system", "content": analysis_system_instruction(blind_mode)},
            {"role": "user", "content": [attachment, {"type": "text", "text": prompt}]},
        ]
        logger.debug("Sending prompt to OpenAI: %s", prompt[:200])
        data = parse_json_response(await self._complete(messages, json_mode=True))
        if not isinstance(data, dict):
            raise ProviderError("OpenAI analysis response is not a JSON object")
        return data

    async def filter_candidates(self, query: str, summaries: List[Dict[str, object]]) -> List[str]:
        prompt = filter_prompt(query, summaries) + '\nRespond with a JSON object of the form {"ids": [...]}.'
        content = await self._complete([{"role": "user", "content": prompt}], json_mode=True)
        if not content:
            return []
        return _id_list(parse_json_response(content))

    async def chat(self, history: Sequence[ChatTurn], message: str, context: Optional[str] = None) -> str:
        messages: List[Dict[str, object]] = [{"role": "system", "content": chat_system_instruction(context)}]
        for turn in history:
            messages.append({"role": "user" if turn.role == ChatRole.USER else "assistant", "content": turn.text})
        messages.append({"role": "user", "content": message})
        return await self._complete(messages, json_mode=False) or EMPTY_REPLY


def get_default_provider(settings: Optional[Settings] = None) -> AIProvider:
    """Return an AIProvider instance based on configuration and API keys.

    The resolution order is:

    1. If ``settings.provider`` (the ``LLM_PROVIDER`` variable) is
       ``"openai"``, ``"gemini"`` or ``"placeholder"``, the
       corresponding provider is selected.  If it cannot be initialised
       (e.g. missing API key or package), a warning is logged and the
       automatic detection logic is used.
    2. If an OpenAI key is present, return :class:`OpenAIProvider`.
    3. If a Gemini key is present, return :class:`GeminiProvider`.
    4. Otherwise, return :class:`PlaceholderProvider`.

    Args:
        settings: Loaded settings; read from the environment if omitted.

    Returns:
        An instance of :class:`AIProvider`.
    """
    settings = settings or load_settings()
    preferred = settings.provider
    if preferred:
        pref = preferred.lower()
        if pref == "openai":
            try:
                return OpenAIProvider(settings.openai_api_key, model=settings.openai_model)
            except Exception as exc:  # noqa: BLE001
                logger.warning("LLM_PROVIDER=openai but failed to initialise OpenAIProvider: %s", exc)
        elif pref == "gemini":
            try:
                return GeminiProvider(settings.gemini_api_key, model=settings.gemini_model, chat_model=settings.gemini_chat_model)
            except Exception as exc:  # noqa: BLE001
                logger.warning("LLM_PROVIDER=gemini but failed to initialise GeminiProvider: %s", exc)
        elif pref == "placeholder":
            logger.info("LLM_PROVIDER=placeholder; using placeholder provider")
            return PlaceholderProvider()
        else:
            logger.warning("Unknown LLM_PROVIDER value '%s'; falling back to automatic detection", preferred)
    if settings.openai_api_key:
        try:
            return OpenAIProvider(settings.openai_api_key, model=settings.openai_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to initialise OpenAIProvider: %s", exc)
    if settings.gemini_api_key:
        try:
            return GeminiProvider(settings.gemini_api_key, model=settings.gemini_model, chat_model=settings.gemini_chat_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to initialise GeminiProvider: %s", exc)
    logger.info("No LLM API keys found; using placeholder provider")
    return PlaceholderProvider()
