"""OpenAI chat-completion summary engine.

Asks the chat model for a short factual summary followed by a JSON array
of action items, then splits and sanitizes the hybrid reply.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from meeting_transcriber.models import ExtractionOutcome
from meeting_transcriber.summary.interface import SummaryEngine
from meeting_transcriber.summary.parsing import parse_hybrid_reply
from meeting_transcriber.utils.errors import SummaryError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4.1"

SYSTEM_PROMPT = (
    "You are an assistant that extracts a short, factual summary and a list of "
    "concrete, concise action items from a meeting transcript. Do NOT use emojis, "
    "symbols or decorative text. Return the action items as a JSON array "
    "containing only plain text strings."
)

USER_PROMPT_TEMPLATE = (
    "Transcript:\n\n{transcript}\n\n"
    "Give a short summary (1-2 sentences, plain text only, no emojis) followed by "
    "a JSON array of action items (plain text only, no emojis)."
)


def build_messages(transcript: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(transcript=transcript)},
    ]


def extract_reply_text(body: Any) -> str:
    """Return ``choices[0].message.content`` or an empty string."""
    if not isinstance(body, dict):
        return ""
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


class OpenAIChatSummaryEngine(SummaryEngine):
    """Summary engine backed by the ``/chat/completions`` endpoint.

    Args:
        api_key: OpenAI API key for authentication.
        base_url: API root including the version segment.
        model: Chat model identifier.
        max_tokens: Completion token ceiling.
        temperature: Sampling temperature; kept low for repeatable output.
        timeout: Request timeout in seconds.
        client: Optional shared AsyncClient.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 300,
        temperature: float = 0.2,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout
        self._client = client

    def build_request(self, transcript: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": build_messages(transcript),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }

    async def extract(self, transcript: str) -> ExtractionOutcome:
        """Summarize a transcript via one chat-completion call.

        Raises:
            SummaryError: On a non-success status, a transport failure or
                an unreadable response body.
        """
        if self._client is not None:
            body = await self._post(self._client, transcript)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                body = await self._post(client, transcript)

        summary, action_items = parse_hybrid_reply(extract_reply_text(body))
        return ExtractionOutcome(summary=summary, action_items=action_items)

    async def _post(self, client: httpx.AsyncClient, transcript: str) -> Any:
        url = f"{self._base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await client.post(
                url, headers=headers, json=self.build_request(transcript)
            )
        except httpx.HTTPError as exc:
            raise SummaryError(f"Chat completion request failed: {exc!r}") from exc

        if not response.is_success:
            logger.error(
                "OpenAI chat completion error %d: %s",
                response.status_code,
                response.text,
            )
            raise SummaryError(
                f"Chat completion returned status {response.status_code}"
            )

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SummaryError("Chat completion response was not valid JSON") from exc
