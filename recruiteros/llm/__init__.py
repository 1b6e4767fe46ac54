"""
AI service providers.

* `providers` – The `AIProvider` interface with Gemini, OpenAI and
  offline placeholder implementations, plus `get_default_provider`.
* `prompts` – Prompt templates and response schemas shared by the
  providers.
"""

from .providers import (  # noqa: F401
    AIProvider,
    GeminiProvider,
    OpenAIProvider,
    PlaceholderProvider,
    ProviderError,
    get_default_provider,
)
