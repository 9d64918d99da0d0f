import logging
from typing import Optional

from promptrouter.models.catalog import DEEPSEEK_MODEL_ID, GEMINI_MODEL_ID
from promptrouter.models.schemas import ChatRequest, ChatResponse
from promptrouter.services.backends import DeepSeekBackend, GeminiBackend
from promptrouter.services.model_service import LLMPromptClassifier, ModelRouter
from promptrouter.shared import Settings

log = logging.getLogger(__name__)


def _current_settings(settings: Optional[Settings]) -> Settings:
    if settings is not None:
        return settings
    # Looked up at call time so the process-wide settings can be replaced after import
    from promptrouter import shared
    return shared.settings


def build_gemini_backend(settings: Settings) -> GeminiBackend:
    return GeminiBackend(
        api_key=settings.GEMINI_API.get_secret_value(),
        model_name=settings.GEMINI_MODEL_NAME,
    )


def build_deepseek_backend(settings: Settings) -> DeepSeekBackend:
    return DeepSeekBackend(
        api_key=settings.DEEPSEEK_API.get_secret_value(),
        base_url=settings.OPENROUTER_API_BASE_URL,
        model_name=settings.DEEPSEEK_MODEL_NAME,
        max_tokens=settings.DEEPSEEK_MAX_TOKENS,
        timeout=settings.OPENROUTER_TIMEOUT,
    )


def build_model_router(settings: Settings) -> ModelRouter:
    """Wire the Gemini classifier and both backends into a router."""
    gemini = build_gemini_backend(settings)
    deepseek = build_deepseek_backend(settings)
    return ModelRouter(
        classifier=LLMPromptClassifier(gemini),
        backends={GEMINI_MODEL_ID: gemini, DEEPSEEK_MODEL_ID: deepseek},
    )


async def ask_with_gemini(request: ChatRequest, settings: Optional[Settings] = None) -> ChatResponse:
    return await build_gemini_backend(_current_settings(settings)).invoke(request)


async def ask_with_deepseek(request: ChatRequest, settings: Optional[Settings] = None) -> ChatResponse:
    return await build_deepseek_backend(_current_settings(settings)).invoke(request)


async def generate_response(request: ChatRequest, settings: Optional[Settings] = None) -> ChatResponse:
    """
    Pick the best backend for the prompt and return its answer.
    Classification problems fall back to Gemini; errors from the chosen backend propagate.
    """
    router = build_model_router(_current_settings(settings))
    return await router.route(request)
