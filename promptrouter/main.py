# promptrouter/main.py
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promptrouter.api.endpoints import chat, classification
from promptrouter.core.dependencies import app_state
from promptrouter.services.chat_service import (
    build_deepseek_backend,
    build_gemini_backend,
    build_model_router,
)
from promptrouter.shared import settings

log = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles application startup and shutdown events."""
    log.info("Application startup: Initializing backends and model router...")

    try:
        app_state["gemini_backend"] = build_gemini_backend(settings)
        log.info("Gemini backend initialized.")
    except Exception as e:
        log.critical(f"CRITICAL: Failed to initialize Gemini backend: {e}")
        app_state["gemini_backend"] = None

    try:
        app_state["deepseek_backend"] = build_deepseek_backend(settings)
        log.info(f"DeepSeek backend initialized against {settings.OPENROUTER_API_BASE_URL}.")
    except Exception as e:
        log.critical(f"CRITICAL: Failed to initialize DeepSeek backend: {e}")
        app_state["deepseek_backend"] = None

    try:
        app_state["model_router"] = build_model_router(settings)
        log.info("Model router initialized.")
    except Exception as e:
        log.critical(f"CRITICAL: Failed to initialize model router: {e}")
        app_state["model_router"] = None

    log.info("Backend initialization process complete.")

    yield

    log.info("Application shutdown: Cleaning up resources...")
    app_state.clear()

app = FastAPI(
    title="Prompt Router API",
    description="Routes prompts to Gemini or DeepSeek, letting Gemini pick the better-suited model",
    version=settings.VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)
log.info(f"CORS middleware configured for origins: {settings.CORS_ORIGINS}")

app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(classification.router, prefix="/api", tags=["classification"])
