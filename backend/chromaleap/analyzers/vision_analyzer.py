# -*- coding: utf-8 -*-
"""Vision model client used to reverse engineer editing pipelines."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from anthropic import Anthropic
from anthropic import APIConnectionError as AnthropicConnectionError
from anthropic import APIStatusError as AnthropicStatusError
from openai import APIConnectionError as OpenAIConnectionError
from openai import APIStatusError as OpenAIStatusError
from openai import OpenAI

from chromaleap.analyzers.response_extractor import extract_json_payload
from chromaleap.config import Settings, get_settings
from chromaleap.errors import (
    ConfigurationError,
    UpstreamUnavailable,
    upstream_error_for_status,
)
from chromaleap.prompts import PIPELINE_USER_INSTRUCTION, build_system_prompt

logger = logging.getLogger(__name__)

PIPELINE_TEMPERATURE = 0.3
CLAUDE_MAX_TOKENS = 4096


def _status_error_body(exc: Any) -> str:
    response = getattr(exc, "response", None)
    return getattr(response, "text", "") if response is not None else ""


class VisionAnalyzer:
    """Send an image URL to a vision model and parse its pipeline hypothesis."""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None) -> None:
        self.settings = settings or get_settings()
        self.provider = self.settings.vision_provider
        self.model = self.settings.model_name
        self.client = client

        if self.client is not None:
            return

        api_key = self.settings.credential
        logger.info(
            "Vision client being created (provider=%s, model=%s, api_key_var=%s)",
            self.provider,
            self.model,
            bool(api_key),
        )
        if not api_key:
            logger.warning("%s not found, analysis requests will fail.", self.settings.credential_name)
            return

        if self.provider == "claude":
            self.client = Anthropic(api_key=api_key, max_retries=0)
        else:
            self.client = OpenAI(
                api_key=api_key,
                base_url=self.settings.gateway_url,
                max_retries=0,
            )

    def _require_client(self) -> Any:
        if self.client is None:
            raise ConfigurationError(f"{self.settings.credential_name} is not configured")
        return self.client

    @staticmethod
    def build_user_content(image_url: str) -> List[Dict[str, Any]]:
        return [
            {"type": "text", "text": PIPELINE_USER_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": image_url}},
        ]

    def analyze(self, image_url: str) -> Any:
        """Return the parsed JSON payload the model produced for ``image_url``.

        Raises a subclass of :class:`chromaleap.errors.AnalysisError` when the
        credential is missing, the gateway rejects the call or the reply is
        not valid JSON. Nothing is retried.
        """

        client = self._require_client()
        logger.info("Analyzing image: %s", image_url)

        raw_text = self.complete(
            build_system_prompt(),
            self.build_user_content(image_url),
            model=self.model,
            temperature=PIPELINE_TEMPERATURE,
            client=client,
        )
        logger.debug("Model reply received (length=%s chars)", len(raw_text))
        return extract_json_payload(raw_text)

    def complete(
        self,
        system_prompt: str,
        user_content: List[Dict[str, Any]],
        *,
        model: str,
        temperature: float,
        client: Any = None,
    ) -> str:
        client = client or self._require_client()
        if self.provider == "claude":
            return self._complete_with_claude(client, system_prompt, user_content, model, temperature)
        return self._complete_with_gateway(client, system_prompt, user_content, model, temperature)

    @staticmethod
    def _complete_with_gateway(
        client: Any,
        system_prompt: str,
        user_content: List[Dict[str, Any]],
        model: str,
        temperature: float,
    ) -> str:
        try:
            response = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                temperature=temperature,
            )
        except OpenAIStatusError as exc:
            body = _status_error_body(exc)
            logger.error("AI Gateway error: %s %s", exc.status_code, body)
            raise upstream_error_for_status(exc.status_code, body) from exc
        except OpenAIConnectionError as exc:
            logger.exception("AI Gateway request failed")
            raise UpstreamUnavailable("AI Gateway request failed", details=str(exc)) from exc

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None) if message is not None else None
        if not content:
            raise UpstreamUnavailable("No content in AI response")
        return content

    @staticmethod
    def _to_claude_blocks(user_content: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        blocks: List[Dict[str, Any]] = []
        for part in user_content:
            if part.get("type") == "image_url":
                url = (part.get("image_url") or {}).get("url", "")
                blocks.append({"type": "image", "source": {"type": "url", "url": url}})
            elif part.get("type") == "text":
                blocks.append({"type": "text", "text": part.get("text", "")})
        return blocks

    def _complete_with_claude(
        self,
        client: Any,
        system_prompt: str,
        user_content: List[Dict[str, Any]],
        model: str,
        temperature: float,
    ) -> str:
        try:
            response = client.messages.create(
                model=model,
                max_tokens=CLAUDE_MAX_TOKENS,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": self._to_claude_blocks(user_content)}],
            )
        except AnthropicStatusError as exc:
            body = _status_error_body(exc)
            logger.error("Claude error: %s %s", exc.status_code, body)
            raise upstream_error_for_status(exc.status_code, body) from exc
        except AnthropicConnectionError as exc:
            logger.exception("Claude request failed")
            raise UpstreamUnavailable("AI Gateway request failed", details=str(exc)) from exc

        text_chunks = [
            getattr(block, "text", "")
            for block in getattr(response, "content", None) or []
            if getattr(block, "type", "") == "text"
        ]
        raw_text = "".join(text_chunks)
        if not raw_text.strip():
            raise UpstreamUnavailable("No content in AI response")
        return raw_text


__all__ = ["PIPELINE_TEMPERATURE", "VisionAnalyzer"]
