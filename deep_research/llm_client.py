"""OpenRouter-backed text and structured generation services."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from deep_research.config import settings
from deep_research.errors import ConfigurationError, StructuredOutputError
from deep_research.services import logger as log_service
from deep_research.services.prompt_store import render_prompt

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


def get_client() -> Any:
    """Get an OpenRouter client via the OpenAI-compatible SDK."""
    from openai import AsyncOpenAI

    if not settings.openrouter_api_key:
        raise ConfigurationError("OPENROUTER_API_KEY is not configured")

    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    return AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=base_url,
        timeout=settings.llm_timeout_seconds,
    )


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """Pull the first JSON object out of a model response, tolerating code fences."""
    text = raw_text.strip()
    if text.startswith("```"):
        parts = text.split("```")
        if len(parts) >= 2:
            text = parts[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        raise json.JSONDecodeError("object not found", text, 0)
    parsed = json.loads(text[start : end + 1])
    if not isinstance(parsed, dict):
        raise json.JSONDecodeError("not an object", text, 0)
    return parsed


class LLMClient:
    """Generative text service and structured generation service over one chat API.

    The model id is passed per call so callers pick the fast or flagship tier.
    """

    def __init__(self, openai_client: Any | None = None):
        self._client = openai_client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_client()
        return self._client

    @staticmethod
    def _temperature_for_model(model: str) -> int:
        # Some OpenAI GPT-5-compatible gateways reject temperature=0.
        lowered = (model or "").lower()
        if "gpt-5" in lowered:
            return 1
        return 0

    @staticmethod
    def _build_messages(prompt: str, system: str | None) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def _complete(
        self,
        prompt: str,
        *,
        model: str,
        system: str | None,
        caller: str,
        json_mode: bool = False,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": self._build_messages(prompt, system),
            "temperature": self._temperature_for_model(model),
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        t0 = time.monotonic()
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except Exception as exc:
            log_service.log_llm_call(
                model=model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(exc),
            )
            raise
        elapsed_ms = int((time.monotonic() - t0) * 1000)

        usage = getattr(response, "usage", None)
        mapped_usage = Usage(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )
        log_service.log_llm_call(
            model=model,
            caller=caller,
            input_tokens=mapped_usage.input_tokens,
            output_tokens=mapped_usage.output_tokens,
            duration_ms=elapsed_ms,
        )

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return getattr(choices[0].message, "content", None) or ""

    async def generate_text(
        self,
        prompt: str,
        *,
        model: str,
        system: str | None = None,
        caller: str = "llm",
    ) -> str:
        return await self._complete(prompt, model=model, system=system, caller=caller)

    async def generate_object(
        self,
        prompt: str,
        schema: type[SchemaT],
        *,
        model: str,
        system: str | None = None,
        caller: str = "llm",
    ) -> SchemaT:
        """Generate a value conforming to `schema`, or raise StructuredOutputError."""
        instruction = render_prompt(
            "llm_client.structured_instruction",
            schema=json.dumps(schema.model_json_schema(), indent=2),
        )
        system_text = f"{system}\n\n{instruction}" if system else instruction

        raw = await self._complete(
            prompt, model=model, system=system_text, caller=caller, json_mode=True
        )
        try:
            payload = extract_json_object(raw)
        except json.JSONDecodeError as exc:
            raise StructuredOutputError(
                f"{caller}: response is not a JSON object ({exc.msg})", raw_output=raw
            ) from exc

        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise StructuredOutputError(
                f"{caller}: response does not match {schema.__name__}: {exc.error_count()} error(s)",
                raw_output=raw,
            ) from exc
