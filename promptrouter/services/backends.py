import asyncio
import logging
import threading
from typing import Any, Optional, Protocol

import google.generativeai as genai
import httpx

from promptrouter.models.catalog import DEEPSEEK_MODEL_ID, GEMINI_MODEL_ID, MODEL_CATALOG, find_model
from promptrouter.models.schemas import ChatRequest, ChatResponse

log = logging.getLogger(__name__)

# genai.configure swaps the SDK's process-wide client; hold this from configure until the call returns
_genai_lock = threading.Lock()


class BackendError(Exception):
    """A backend call failed."""


class MissingCredentialError(BackendError):
    """The backend's API key is not configured."""


class BackendHTTPError(BackendError):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API Error: {status_code} - {body}")


class ChatBackend(Protocol):
    """Accepts a prompt, returns text-or-None plus the label of whoever answered."""

    model_id: str
    label: str

    async def invoke(self, request: ChatRequest) -> ChatResponse: ...


def _label_for(model_id: str, model_name: str, default_model_name: str) -> str:
    """Catalog label for the stock model; an overridden model reports its own name."""
    model = find_model(model_id, MODEL_CATALOG)
    if model is None or model_name != default_model_name:
        return model_name
    return model.label


def extract_gemini_text(response: Any) -> Optional[str]:
    """Join the text parts of the first Gemini candidate that has any."""
    candidates = getattr(response, "candidates", None) or []
    for candidate in candidates:
        content = getattr(candidate, "content", None)
        if not content:
            continue
        texts = [part.text for part in getattr(content, "parts", []) if getattr(part, "text", None)]
        if texts:
            return "".join(texts)
    return None


class GeminiBackend:
    model_id = GEMINI_MODEL_ID
    default_model_name = GEMINI_MODEL_ID

    def __init__(self, api_key: Optional[str], model_name: str = GEMINI_MODEL_ID):
        self.api_key = api_key
        self.model_name = model_name
        self.label = _label_for(self.model_id, model_name, self.default_model_name)

    async def generate_text(self, prompt: str) -> Optional[str]:
        """Send `prompt` to Gemini and return the plain text of the answer."""
        if not self.api_key:
            raise MissingCredentialError("Gemini API key is missing!")

        log.debug(f"Sending prompt to Gemini model {self.model_name}, length: {len(prompt)}")
        try:
            return await asyncio.to_thread(self._call_gemini, prompt)
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(f"Gemini request failed: {e}") from e

    def _call_gemini(self, prompt: str) -> Optional[str]:
        with _genai_lock:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.model_name)
            response = model.generate_content(prompt)
        return extract_gemini_text(response)

    async def invoke(self, request: ChatRequest) -> ChatResponse:
        answer = await self.generate_text(request.prompt)
        log.info(f"Received completion from Gemini, length: {len(answer or '')} characters")
        return ChatResponse(response=answer, model=self.label)


class DeepSeekBackend:
    model_id = DEEPSEEK_MODEL_ID
    default_model_name = "deepseek/deepseek-chat:free"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://openrouter.ai/api/v1",
        model_name: str = default_model_name,
        max_tokens: int = 10000,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.label = _label_for(self.model_id, model_name, self.default_model_name)
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
        }

    async def invoke(self, request: ChatRequest) -> ChatResponse:
        if not self.api_key:
            raise MissingCredentialError("DeepSeek API key is missing!")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        log.info(f"Sending prompt to OpenRouter with model: {self.model_name}")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=self.build_payload(request.prompt),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            log.error(f"OpenRouter request failed: {e}")
            raise BackendError(f"OpenRouter request failed: {e}") from e

        if not response.is_success:
            log.error(f"OpenRouter returned HTTP {response.status_code}")
            raise BackendHTTPError(response.status_code, response.text)

        try:
            completion = response.json()
        except ValueError as e:
            raise BackendError(f"Malformed response body from OpenRouter: {response.text[:200]}") from e

        content = self.extract_content(completion)
        log.info(f"Received completion from OpenRouter, length: {len(content or '')} characters")
        return ChatResponse(response=content, model=self.label)

    @staticmethod
    def extract_content(completion: Any) -> Optional[str]:
        """First choice's message content, or its reasoning text when content is empty.

        Some free-tier reasoning variants only fill `reasoning`; that text is returned
        as the answer, so callers may see the model's chain of thought.
        """
        if not isinstance(completion, dict):
            raise BackendError("Malformed response body from OpenRouter: expected a JSON object")
        choices = completion.get("choices")
        if choices is None:
            return None
        if not isinstance(choices, list):
            raise BackendError("Malformed response body from OpenRouter: `choices` is not a list")
        if not choices:
            return None
        if not isinstance(choices[0], dict):
            raise BackendError("Malformed response body from OpenRouter: first choice is not an object")
        message = choices[0].get("message")
        if message is None:
            return None
        if not isinstance(message, dict):
            raise BackendError("Malformed response body from OpenRouter: `message` is not an object")

        for field in ("content", "reasoning"):
            text = message.get(field)
            if text is not None and not isinstance(text, str):
                raise BackendError(f"Malformed response body from OpenRouter: `{field}` is not a string")
            if text:
                return text
        return None
