from fastapi import APIRouter, Depends, HTTPException
from promptrouter.models.schemas import ChatRequest, ChatResponse
from promptrouter.core.dependencies import get_deepseek_backend, get_gemini_backend, get_model_router
from promptrouter.services.backends import BackendError, ChatBackend, MissingCredentialError
import logging

router = APIRouter()
log = logging.getLogger(__name__)


def _to_http_exception(e: Exception) -> HTTPException:
    if isinstance(e, MissingCredentialError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, BackendError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=f"Failed to process request: {str(e)}")


async def _ask(backend: ChatBackend, request: ChatRequest) -> ChatResponse:
    log.info(f"Direct request to {backend.model_id}, prompt length: {len(request.prompt)}")
    try:
        return await backend.invoke(request)
    except Exception as e:
        log.error(f"Error calling {backend.model_id}: {e}")
        raise _to_http_exception(e)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, model_router=Depends(get_model_router)):
    """
    Lets Gemini pick the best model for the prompt, then answers with that model.
    The `model` field of the response names the model that actually answered.
    """
    log.info(f"Processing routed chat request with prompt length: {len(request.prompt)}")
    try:
        return await model_router.route(request)
    except Exception as e:
        log.error(f"Error in chat endpoint: {e}")
        raise _to_http_exception(e)


@router.post("/chat/gemini", response_model=ChatResponse)
async def chat_with_gemini(request: ChatRequest, backend=Depends(get_gemini_backend)):
    """Answers with Gemini 2.0 Flash, skipping model selection."""
    return await _ask(backend, request)


@router.post("/chat/deepseek", response_model=ChatResponse)
async def chat_with_deepseek(request: ChatRequest, backend=Depends(get_deepseek_backend)):
    """Answers with DeepSeek through OpenRouter, skipping model selection."""
    return await _ask(backend, request)
