"""
Document oracle: asks a multimodal LLM whether an uploaded document is
genuine and matches the registration data.

One request per document: a system prompt enumerating the checks and
the JSON response contract, and a user turn carrying the document plus
the expected name and expiry date.

The client never raises past `inspect()`.  Transport failures, empty
responses, and unparseable replies all come back as an invalid Verdict
so a single flaky call can only fail its own document.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI

from driver_onboarding.core.config import Settings, settings
from driver_onboarding.core.constants import DocumentKind, LLMProvider
from driver_onboarding.core.logging import get_logger
from driver_onboarding.core.tracing import traceable_step
from driver_onboarding.validation.documents import FetchedDocument
from driver_onboarding.validation.errors import OracleError
from driver_onboarding.validation.models import Verdict
from driver_onboarding.validation.prompts import build_system_prompt, build_user_prompt

logger = get_logger(__name__)

# Greedy: from the first "{" to the last "}"
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

DEFAULT_REASON = "Validation completed"
FALLBACK_VALID_REASON = "Document appears valid"
FALLBACK_INVALID_REASON = "Could not validate document format"


# ═══════════════════════════════════════════════════════════
#  Response Parsing
# ═══════════════════════════════════════════════════════════

def parse_verdict(text: str | None) -> Verdict:
    """
    Turn a free-form oracle reply into a Verdict.

    1. Take the brace-delimited substring and parse it as JSON;
       `isValid` counts only when it is the literal boolean true.
    2. Otherwise fall back to substring matching: the text mentions
       "valid" and never "invalid" ⇒ valid, anything else ⇒ invalid.
    """
    content = text or ""

    match = _JSON_OBJECT_RE.search(content)
    if match:
        try:
            payload = json.loads(match.group(0))
        except json.JSONDecodeError:
            payload = None

        if isinstance(payload, dict):
            reason = payload.get("reason") or DEFAULT_REASON
            return Verdict(
                is_valid=payload.get("isValid") is True,
                reason=reason if isinstance(reason, str) else str(reason),
            )

    lowered = content.lower()
    if "valid" in lowered and "invalid" not in lowered:
        return Verdict(is_valid=True, reason=FALLBACK_VALID_REASON)
    return Verdict(is_valid=False, reason=FALLBACK_INVALID_REASON)


# ═══════════════════════════════════════════════════════════
#  Configuration
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OracleConfig:
    """Everything an oracle client needs; built once per pass."""

    provider: str = LLMProvider.OPENAI
    api_key: str = ""
    model: str = "gpt-4o"
    max_tokens: int = 500
    temperature: float = 0.0
    timeout_seconds: float = 60.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "OracleConfig":
        """Pick the credential and model for the configured provider."""
        source = source or settings
        provider = source.LLM_PROVIDER.strip().lower()

        if provider == LLMProvider.GEMINI:
            return cls(
                provider=LLMProvider.GEMINI,
                api_key=source.GOOGLE_API_KEY,
                model=source.GEMINI_MODEL,
                max_tokens=source.LLM_MAX_TOKENS,
                temperature=source.LLM_TEMPERATURE,
                timeout_seconds=source.LLM_TIMEOUT_SECONDS,
            )
        if provider == LLMProvider.OPENAI:
            return cls(
                provider=LLMProvider.OPENAI,
                api_key=source.OPENAI_API_KEY,
                model=source.LLM_MODEL,
                max_tokens=source.LLM_MAX_TOKENS,
                temperature=source.LLM_TEMPERATURE,
                timeout_seconds=source.LLM_TIMEOUT_SECONDS,
            )
        raise ValueError(f"Unsupported LLM_PROVIDER '{source.LLM_PROVIDER}'")


# ═══════════════════════════════════════════════════════════
#  Clients
# ═══════════════════════════════════════════════════════════

class OracleClient:
    """
    Base class for oracle backends.

    Subclasses implement `_complete()`, which returns the raw reply text
    and may raise anything; `inspect()` turns every outcome into a Verdict.
    """

    enabled: bool = True

    def __init__(self, config: OracleConfig) -> None:
        self.config = config

    async def inspect(
        self,
        document: FetchedDocument,
        expected_name: str,
        expected_expiry: str,
        kind: DocumentKind | str,
    ) -> Verdict:
        """Inspect one document against the expected name and expiry date."""
        kind_label = str(kind)
        log = logger.bind(
            document_kind=kind_label,
            provider=str(self.config.provider),
            model=self.config.model,
        )

        system_prompt = build_system_prompt(kind_label, expected_name, expected_expiry)
        user_prompt = build_user_prompt(kind_label, expected_name, expected_expiry)

        try:
            reply = await self._complete(document, system_prompt, user_prompt)
            verdict = parse_verdict(reply)
        except Exception as exc:
            log.error("Oracle call failed", error=str(exc), error_type=type(exc).__name__)
            return Verdict(is_valid=False, reason=f"API error: {exc}")

        log.info("Oracle verdict received", is_valid=verdict.is_valid, reason=verdict.reason)
        return verdict

    async def _complete(
        self,
        document: FetchedDocument,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        raise NotImplementedError


class OpenAIOracleClient(OracleClient):
    """Chat completion with the document embedded as a base64 data URL."""

    def __init__(self, config: OracleConfig, client: AsyncOpenAI | None = None) -> None:
        super().__init__(config)
        self._client = client or AsyncOpenAI(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    @traceable_step(name="oracle_openai_inspect", run_type="llm", tags=["oracle", "openai"])
    async def _complete(
        self,
        document: FetchedDocument,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        response = await self._client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": user_prompt},
                        {"type": "image_url", "image_url": {"url": document.data_url()}},
                    ],
                },
            ],
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )

        if not response.choices:
            raise OracleError("Oracle returned no choices")
        return response.choices[0].message.content or ""


class GeminiOracleClient(OracleClient):
    """Gemini generate_content with the document passed as inline bytes."""

    def __init__(self, config: OracleConfig, client: genai.Client | None = None) -> None:
        super().__init__(config)
        self._client = client or genai.Client(api_key=config.api_key)

    @traceable_step(name="oracle_gemini_inspect", run_type="llm", tags=["oracle", "gemini"])
    async def _complete(
        self,
        document: FetchedDocument,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        response = await self._client.aio.models.generate_content(
            model=self.config.model,
            contents=[
                genai_types.Part.from_bytes(data=document.data, mime_type=document.mime_type),
                user_prompt,
            ],
            config=genai_types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_tokens,
            ),
        )
        return response.text or ""


class DisabledOracleClient(OracleClient):
    """Stand-in when no credential is configured; passes skip entirely."""

    enabled = False

    async def _complete(
        self,
        document: FetchedDocument,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        raise OracleError("No oracle credential configured")


def build_oracle_client(config: OracleConfig) -> OracleClient:
    """Choose the oracle backend for `config`."""
    if not config.enabled:
        return DisabledOracleClient(config)
    if config.provider == LLMProvider.GEMINI:
        return GeminiOracleClient(config)
    return OpenAIOracleClient(config)
