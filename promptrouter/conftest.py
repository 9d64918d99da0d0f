"""Fakes for the Gemini SDK, the OpenRouter HTTP endpoint, the classifier and the backends. Nothing here touches the network."""
import json
import time
from types import SimpleNamespace
from typing import Callable, List, Optional, Tuple, Union

import httpx
import pytest

from promptrouter.models.schemas import ChatResponse
from promptrouter.services import backends
from promptrouter.services.model_service import PROMPT_SEPARATOR, ModelRouter
from promptrouter.shared import Settings

GeminiAnswer = Union[str, None, Exception]


def gemini_response(text: Optional[str]) -> SimpleNamespace:
    parts = [SimpleNamespace(text=text)] if text is not None else []
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class FakeGenAI:
    """Stands in for the `google.generativeai` module.

    Prompts that carry the classification separator get `classification`,
    everything else gets `completion`. Exceptions are raised instead of returned.
    """

    def __init__(self, classification: GeminiAnswer = "gemini-2.0-flash", completion: GeminiAnswer = "Gemini answer"):
        self.classification = classification
        self.completion = completion
        self.api_keys: List[str] = []
        self.model_names: List[str] = []
        self.prompts: List[str] = []
        # (prompt, api key configured when the request went out)
        self.sent: List[Tuple[str, str]] = []
        self.delay = 0.0
        self._current_key: Optional[str] = None

    def configure(self, api_key: str) -> None:
        self.api_keys.append(api_key)
        self._current_key = api_key

    def GenerativeModel(self, model_name: str) -> SimpleNamespace:
        self.model_names.append(model_name)
        return SimpleNamespace(generate_content=self._generate_content)

    def _generate_content(self, prompt: str) -> SimpleNamespace:
        self.prompts.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        self.sent.append((prompt, self._current_key))
        answer = self.classification if PROMPT_SEPARATOR in prompt else self.completion
        if isinstance(answer, Exception):
            raise answer
        return gemini_response(answer)

    @property
    def classification_prompts(self) -> List[str]:
        return [p for p in self.prompts if PROMPT_SEPARATOR in p]

    @property
    def completion_prompts(self) -> List[str]:
        return [p for p in self.prompts if PROMPT_SEPARATOR not in p]


class FakeOpenRouter:
    """Records chat-completion requests and answers them with a canned response."""

    def __init__(self, status_code: int = 200, body: Union[dict, list, str, None] = None):
        self.status_code = status_code
        if body is None:
            body = {"choices": [{"message": {"role": "assistant", "content": "DeepSeek answer"}}]}
        self.body = body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_settings(**overrides) -> Settings:
    values = {"GEMINI_API": "gemini-test-key", "DEEPSEEK_API": "deepseek-test-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def fake_genai(monkeypatch) -> FakeGenAI:
    fake = FakeGenAI()
    monkeypatch.setattr(backends, "genai", fake)
    return fake


@pytest.fixture
def fake_openrouter(monkeypatch) -> FakeOpenRouter:
    """Routes every httpx.AsyncClient created by the backends to a FakeOpenRouter."""
    fake = FakeOpenRouter()
    real_client: Callable[..., httpx.AsyncClient] = httpx.AsyncClient

    def client_factory(**kwargs):
        kwargs["transport"] = fake.transport
        return real_client(**kwargs)

    monkeypatch.setattr(backends.httpx, "AsyncClient", client_factory)
    return fake


@pytest.fixture
def settings() -> Settings:
    return make_settings()


class StubClassifier:
    def __init__(self, answer=None, error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def classify(self, prompt, catalog):
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


class StubBackend:
    def __init__(self, model_id, label, error=None):
        self.model_id = model_id
        self.label = label
        self.error = error
        self.requests = []

    async def invoke(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return ChatResponse(response=f"answer from {self.model_id}", model=self.label)


def make_router(classifier, gemini_error=None, deepseek_error=None):
    gemini = StubBackend("gemini-2.0-flash", "Gemini 2.0 Flash", error=gemini_error)
    deepseek = StubBackend("deepseek-chat", "deepseek-chat", error=deepseek_error)
    router = ModelRouter(classifier, {"gemini-2.0-flash": gemini, "deepseek-chat": deepseek})
    return router, gemini, deepseek
