from __future__ import annotations

import hashlib
from typing import Any

import httpx

from storyforge.config import Settings
from storyforge.logs import get_logger

logger = get_logger(__name__)


class LLMError(RuntimeError):
    pass


class LLMGateway:
    """Chat and image calls against the configured provider (``mock`` or ``openai_compat``)."""

    def __init__(
        self,
        provider: str = "mock",
        base_url: str = "https://api.openai.com",
        api_key: str = "",
        model: str = "gpt-4",
        image_model: str = "dall-e-3",
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.image_model = image_model
        self.timeout = timeout_s
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "LLMGateway":
        return cls(
            provider=settings.ai_provider,
            base_url=settings.ai_base_url,
            api_key=settings.ai_api_key,
            model=settings.ai_model,
            image_model=settings.ai_image_model,
            timeout_s=settings.ai_timeout_s,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.post(f"{self.base_url}{path}", headers=self._headers(), json=payload)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise LLMError(f"provider returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise LLMError(f"provider request failed: {exc}") from exc
        except ValueError as exc:
            raise LLMError("provider returned invalid JSON") from exc

    async def chat_complete(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        model: str | None = None,
    ) -> dict[str, Any]:
        model = model or self.model
        if self.provider == "mock":
            text = self._mock_text(messages)
            prompt_tokens = max(1, len(str(messages)) // 4)
            completion_tokens = max(1, len(text) // 4)
            return {
                "text": text,
                "model": f"mock-{model}",
                "usage": {
                    "prompt": prompt_tokens,
                    "completion": completion_tokens,
                    "total": prompt_tokens + completion_tokens,
                },
            }

        if self.provider == "openai_compat":
            payload = {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
            data = await self._post("/v1/chat/completions", payload)
            try:
                text = data["choices"][0]["message"]["content"] or ""
            except (KeyError, IndexError, TypeError) as exc:
                raise LLMError("provider response missing completion content") from exc
            usage = data.get("usage") or {}
            prompt_tokens = int(usage.get("prompt_tokens", 0))
            completion_tokens = int(usage.get("completion_tokens", 0))
            return {
                "text": text,
                "model": data.get("model", model),
                "usage": {
                    "prompt": prompt_tokens,
                    "completion": completion_tokens,
                    "total": int(usage.get("total_tokens", prompt_tokens + completion_tokens)),
                },
            }

        raise LLMError(f"unsupported provider: {self.provider}")

    async def generate_image(self, prompt: str, size: str) -> dict[str, Any]:
        if self.provider == "mock":
            digest = hashlib.sha1(prompt.encode("utf-8")).hexdigest()[:12]
            return {"url": f"https://placeholder.url/ai-images/{digest}-{size}.png", "model": f"mock-{self.image_model}"}

        if self.provider == "openai_compat":
            payload = {"model": self.image_model, "prompt": prompt, "n": 1, "size": size}
            data = await self._post("/v1/images/generations", payload)
            try:
                url = data["data"][0]["url"]
            except (KeyError, IndexError, TypeError) as exc:
                raise LLMError("provider response missing image url") from exc
            return {"url": url, "model": self.image_model}

        raise LLMError(f"unsupported provider: {self.provider}")

    def _mock_text(self, messages: list[dict[str, str]]) -> str:
        prompt = messages[-1].get("content", "") if messages else ""
        return f"Mock response: {prompt[:220]}"
