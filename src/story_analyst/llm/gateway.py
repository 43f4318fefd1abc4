from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
import openai

from ..config import DEFAULT_API_VERSION, DEFAULT_MAX_TOKENS, DEFAULT_TIMEOUT_SECONDS, Settings
from ..errors import MalformedResponseError, UpstreamError

logger = logging.getLogger(__name__)


class LLMGateway:
    """One synchronous prompt -> text call against a configured model.

    Implementations never retry; a failure propagates to the caller as
    UpstreamError or MalformedResponseError.
    """

    model: str
    max_tokens: int
    timeout: float

    def complete(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        raise NotImplementedError


class MessagesGateway(LLMGateway):
    """Gateway for an HTTP messages endpoint.

    Request:  {"model", "max_tokens", "messages": [{"role": "user", "content": prompt}]}
    Response: {"content": [{"type": "text", "text": ...}, ...]}
    """

    def __init__(
        self,
        *,
        endpoint: str,
        model: str,
        api_key: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_version: str = DEFAULT_API_VERSION,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.api_version = api_version
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": self.api_version,
        }
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _post(self, payload: dict[str, Any], timeout: float) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.endpoint, headers=self._headers(), json=payload, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.post(self.endpoint, headers=self._headers(), json=payload)

    def complete(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        deadline = timeout if timeout is not None else self.timeout
        logger.debug("POST %s model=%s prompt_chars=%d timeout=%ss", self.endpoint, self.model, len(prompt), deadline)

        try:
            response = self._post(payload, deadline)
        except httpx.TimeoutException as exc:
            raise UpstreamError(None, f"Request timed out after {deadline}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(None, f"{type(exc).__name__}: {exc}") from exc

        logger.debug("Model endpoint answered %s", response.status_code)
        if not response.is_success:
            raise UpstreamError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Model endpoint returned a non-JSON body") from exc

        return _first_text_block(body)


def _first_text_block(body: Any) -> str:
    content = body.get("content") if isinstance(body, dict) else None
    if isinstance(content, list):
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str):
                return block["text"]
    raise MalformedResponseError()


class OpenAIGateway(LLMGateway):
    """Gateway for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        *,
        model: str,
        api_key: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def complete(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        deadline = timeout if timeout is not None else self.timeout
        logger.debug("chat.completions model=%s prompt_chars=%d timeout=%ss", self.model, len(prompt), deadline)
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                timeout=deadline,
            )
        except openai.APIStatusError as exc:
            raise UpstreamError(exc.status_code, exc.response.text) from exc
        except openai.APITimeoutError as exc:
            raise UpstreamError(None, f"Request timed out after {deadline}s") from exc
        except openai.APIConnectionError as exc:
            raise UpstreamError(None, f"{type(exc).__name__}: {exc}") from exc

        choices = getattr(resp, "choices", None) or []
        text = choices[0].message.content if choices else None
        if not isinstance(text, str) or not text:
            raise MalformedResponseError()
        return text


def build_gateway(settings: Settings) -> LLMGateway:
    """Construct the gateway selected by `settings.provider`."""
    if settings.provider == "openai":
        return OpenAIGateway(
            model=settings.model,
            api_key=settings.api_key,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
            base_url=settings.base_url,
        )
    return MessagesGateway(
        endpoint=settings.endpoint,
        model=settings.model,
        api_key=settings.api_key,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout,
        api_version=settings.api_version,
    )
