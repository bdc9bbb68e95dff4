"""HTTP adapter around OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import LLMSettings


class LLMError(RuntimeError):
    """Raised when the suggestion service cannot produce a usable response."""


@dataclass
class LLMRequest:
    """Represents one chat completion request."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]
    json_response: bool = True


@dataclass(frozen=True)
class LLMResponse:
    """Text content plus token usage reported by the service."""

    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMRunner:
    """Executes prompts against the configured suggestion service."""

    def __init__(
        self,
        settings: LLMSettings,
        *,
        runner: Callable[[LLMRequest], LLMResponse] | None = None,
    ) -> None:
        self.settings = settings
        self._runner = runner or self._http_runner

    @property
    def model(self) -> str:
        return self.settings.model

    def complete(self, prompt: str, *, system: str | None = None) -> LLMResponse:
        """Send the prompt and return the response text with usage counters."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            base_url=self.settings.base_url,
            api_key=self.settings.api_key,
            request_timeout=self.settings.request_timeout,
        )
        return self._runner(request)

    @staticmethod
    def _http_runner(request: LLMRequest) -> LLMResponse:
        endpoint = f"{request.base_url.rstrip('/')}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        if request.json_response:
            payload["response_format"] = {"type": "json_object"}

        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 60.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise LLMError(f"Suggestion service failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise LLMError(f"Suggestion service unreachable: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMError("Suggestion service timed out") from exc
        except (OSError, HTTPException) as exc:
            raise LLMError(f"Suggestion service connection failed: {exc!r}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LLMError("Suggestion service returned invalid JSON") from exc
        if not isinstance(response_payload, dict):
            raise LLMError(
                f"Suggestion service returned {type(response_payload).__name__}, expected an object"
            )

        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise LLMError("Empty response from suggestion service")
        usage = response_payload.get("usage")
        usage = usage if isinstance(usage, dict) else {}
        prompt_tokens = _as_count(usage.get("prompt_tokens"))
        completion_tokens = _as_count(usage.get("completion_tokens"))
        total_tokens = _as_count(usage.get("total_tokens")) or prompt_tokens + completion_tokens
        return LLMResponse(
            content=content.strip(),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: dict[str, object]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""


def _as_count(value: object) -> int:
    return value if isinstance(value, int) and value >= 0 else 0


__all__ = ["LLMError", "LLMRequest", "LLMResponse", "LLMRunner"]
