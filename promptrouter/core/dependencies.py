from fastapi import HTTPException
from promptrouter.services.backends import DeepSeekBackend, GeminiBackend
from promptrouter.services.model_service import ModelRouter
import logging

log = logging.getLogger(__name__)

app_state = {}

def get_model_router() -> ModelRouter:
    router = app_state.get("model_router")
    if router is None:
        log.error("Model router requested but is not available (initialization failed?).")
        raise HTTPException(status_code=503, detail="Model routing service temporarily unavailable.")
    return router

def get_gemini_backend() -> GeminiBackend:
    backend = app_state.get("gemini_backend")
    if backend is None:
        log.error("Gemini backend requested but is not available (initialization failed?).")
        raise HTTPException(status_code=503, detail="Gemini service temporarily unavailable.")
    return backend

def get_deepseek_backend() -> DeepSeekBackend:
    backend = app_state.get("deepseek_backend")
    if backend is None:
        log.error("DeepSeek backend requested but is not available (initialization failed?).")
        raise HTTPException(status_code=503, detail="DeepSeek service temporarily unavailable.")
    return backend
