from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Sequence, Tuple

from .exceptions import GenerationError, GenerationUnavailable
from .models import CandidateItem, Mode

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "Gemini 1.5"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

_DEFAULT_SYSTEM = "You are a professional news editor. Output strictly valid JSON. Language: {language}."

_DEFAULT_DETAILED = """
MANDATORY TASK: Summarize and format these {count} news items into valid JSON.
LANGUAGE: All content must be in {language}.

DATA: {data}

EXPECTED JSON STRUCTURE (STRICT):
{{ "points": [ {{ "title": "Headline in {language}", "summary": "1 short sentence in {language}", "sourceName": "Source", "sourceUrl": "Link" }} ] }}

FINAL RULE: NO preamble, NO extra text, ONLY the JSON object.
"""

_DEFAULT_HEADLINES = """
MANDATORY TASK: Rewrite these {count} news items as concise headlines in valid JSON.
LANGUAGE: All content must be in {language}.

DATA: {data}

EXPECTED JSON STRUCTURE (STRICT):
{{ "points": [ {{ "title": "Headline in {language}", "summary": "A few words of context in {language}", "sourceName": "Source", "sourceUrl": "Link" }} ] }}

FINAL RULE: NO preamble, NO extra text, ONLY the JSON object.
"""


@dataclass
class InstructionPolicy:
    """Prompt wording. Templates are str.format()ed with count, language and data."""
    system_template: str = _DEFAULT_SYSTEM
    detailed_template: str = _DEFAULT_DETAILED
    headlines_template: str = _DEFAULT_HEADLINES

    def system_instruction(self, language: str) -> str:
        return self.system_template.format(language=language)

    def build_prompt(self, candidates: Sequence[CandidateItem], language: str, mode: Mode) -> str:
        template = self.headlines_template if mode is Mode.HEADLINES_ONLY else self.detailed_template
        data = json.dumps([c.to_dict() for c in candidates], ensure_ascii=False)
        return template.format(count=len(candidates), language=language, data=data).strip()


class Summarizer(Protocol):
    def summarize(
        self,
        candidates: Sequence[CandidateItem],
        *,
        language: str,
        mode: Mode,
        policy: InstructionPolicy,
    ) -> str:  # pragma: no cover - interface
        ...


@dataclass
class SummarizeOptions:
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    timeout_sec: float = 15.0
    # UI label (lower-cased) -> (provider, provider model id)
    model_aliases: Dict[str, Tuple[str, str]] = field(default_factory=lambda: {
        "gemini 1.5": ("gemini", "gemini-1.5-flash"),
        "gemini 2.0": ("gemini", "gemini-2.0-flash"),
        "gemini 2.5": ("gemini", "gemini-2.5-flash-lite"),
    })


def _is_quota_message(exc: BaseException) -> bool:
    msg = str(exc).lower()
    return "429" in msg or "quota" in msg or "rate limit" in msg


class GeminiSummarizer:
    def __init__(self, *, api_key: Optional[str], model: str, timeout_sec: float) -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except Exception as e:  # pragma: no cover - optional dep
            raise GenerationError("google-generativeai package is required for Gemini summarization.") from e
        key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not key:
            raise GenerationError("GEMINI_API_KEY not found")
        genai.configure(api_key=key)
        self._genai = genai
        self._model_name = model
        self._timeout = timeout_sec

    def summarize(
        self,
        candidates: Sequence[CandidateItem],
        *,
        language: str,
        mode: Mode,
        policy: InstructionPolicy,
    ) -> str:
        from google.api_core import exceptions as google_exceptions  # type: ignore

        try:
            model = self._genai.GenerativeModel(
                self._model_name,
                system_instruction=policy.system_instruction(language),
                generation_config={"response_mime_type": "application/json"},
            )
            prompt = policy.build_prompt(candidates, language, mode)
            resp = model.generate_content(prompt, request_options={"timeout": self._timeout})
            text = resp.text
        except (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests) as e:
            raise GenerationUnavailable(f"Gemini quota exhausted: {e}") from e
        except Exception as e:
            if _is_quota_message(e):
                raise GenerationUnavailable(f"Gemini quota exhausted: {e}") from e
            raise GenerationError(f"Gemini request failed: {e}") from e
        if not text or not text.strip():
            raise GenerationError("No response generated from Gemini.")
        return text


class OpenAISummarizer:
    def __init__(self, *, api_key: Optional[str], model: str, timeout_sec: float) -> None:
        try:
            from openai import OpenAI  # type: ignore
        except Exception as e:  # pragma: no cover - optional dep
            raise GenerationError("openai package is required for OpenAI summarization.") from e
        key = api_key or os.getenv("OPENAI_API_KEY")
        if not key:
            raise GenerationError("OPENAI_API_KEY not set.")
        self._client = OpenAI(api_key=key)
        self._model = model
        self._timeout = timeout_sec

    def summarize(
        self,
        candidates: Sequence[CandidateItem],
        *,
        language: str,
        mode: Mode,
        policy: InstructionPolicy,
    ) -> str:
        import openai  # type: ignore

        try:
            messages = [
                {"role": "system", "content": policy.system_instruction(language)},
                {"role": "user", "content": policy.build_prompt(candidates, language, mode)},
            ]
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                response_format={"type": "json_object"},
                timeout=self._timeout,
            )
        except openai.RateLimitError as e:
            raise GenerationUnavailable(f"OpenAI rate limit or quota exhausted: {e}") from e
        except Exception as e:
            if _is_quota_message(e):
                raise GenerationUnavailable(f"OpenAI rate limit or quota exhausted: {e}") from e
            raise GenerationError(f"OpenAI request failed: {e}") from e
        content = resp.choices[0].message.content if resp and resp.choices else None
        if not content or not content.strip():
            raise GenerationError("No response generated from OpenAI.")
        return content


def resolve_backend(model: Optional[str], options: SummarizeOptions) -> Tuple[str, str]:
    """
    Map a model label to (provider, provider model id).

    Unrecognized labels fail closed to the default Gemini model.
    """
    label = (model or "").strip()
    lowered = label.lower()
    if lowered in options.model_aliases:
        return options.model_aliases[lowered]
    if lowered.startswith("gemini-"):
        return "gemini", label
    if lowered in {"openai", "chatgpt", "gpt"}:
        return "openai", options.openai_model
    if lowered.startswith(("gpt-", "o1", "o3", "o4")):
        return "openai", label
    if lowered in {"gemini", "google", "googleai"}:
        return "gemini", options.gemini_model
    if label:
        logger.warning("Unknown model %r, using %s", label, options.gemini_model)
    return "gemini", options.gemini_model


def build_summarizer(model: Optional[str], options: Optional[SummarizeOptions] = None) -> Summarizer:
    """
    Construct the backend selected by `model`.

    Raises GenerationError when the backend cannot be set up (missing key or package);
    the resolver treats that like any other generation failure.
    """
    opts = options or SummarizeOptions()
    provider, model_id = resolve_backend(model, opts)
    if provider == "openai":
        return OpenAISummarizer(api_key=opts.openai_api_key, model=model_id, timeout_sec=opts.timeout_sec)
    return GeminiSummarizer(api_key=opts.gemini_api_key, model=model_id, timeout_sec=opts.timeout_sec)
