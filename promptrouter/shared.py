# promptrouter/shared.py
import logging
import os
import sys
from pathlib import Path
from typing import List

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
log = logging.getLogger(__name__) # Logger for this module

# --- Determine Project Root ---
# Assumes shared.py is in promptrouter/, so ../ goes up one level to the root
try:
    BASE_DIR = Path(__file__).resolve().parent.parent
except NameError:
    BASE_DIR = Path(".").resolve()


# --- Settings Model ---
class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    VERSION: str = "0.1.0"
    APP_NAME: str = "promptrouter"

    # Gemini (default backend, also used to classify prompts)
    GEMINI_API: SecretStr = Field(default=SecretStr(""), validation_alias='GEMINI_API')
    GEMINI_MODEL_NAME: str = "gemini-2.0-flash"

    # DeepSeek through OpenRouter
    DEEPSEEK_API: SecretStr = Field(default=SecretStr(""), validation_alias='DEEPSEEK_API')
    OPENROUTER_API_BASE_URL: str = "https://openrouter.ai/api/v1"
    DEEPSEEK_MODEL_NAME: str = "deepseek/deepseek-chat:free"
    DEEPSEEK_MAX_TOKENS: int = Field(default=10000, gt=0)
    OPENROUTER_TIMEOUT: float = Field(default=90.0, gt=0)

    # HTTP API
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Tell Pydantic to load from .env file IN THE PROJECT ROOT
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        populate_by_name=True,
    )


# --- Instantiate Settings (Single Source of Truth) ---
try:
    log.info("Loading configuration settings...")
    settings = Settings()
    log.info("Configuration loaded successfully.")
    log.info(f"Using Gemini model: {settings.GEMINI_MODEL_NAME}")
    log.info(f"Using OpenRouter Base URL: {settings.OPENROUTER_API_BASE_URL}")
    log.info(f"Using DeepSeek model: {settings.DEEPSEEK_MODEL_NAME}")
    # Credentials are optional at load time; the backends refuse to run without them
    if not settings.GEMINI_API.get_secret_value():
        log.warning("GEMINI_API is not set; Gemini calls and prompt classification will fail.")
    if not settings.DEEPSEEK_API.get_secret_value():
        log.warning("DEEPSEEK_API is not set; DeepSeek calls will fail.")
except Exception as e:
    log.critical(f"CRITICAL: Failed to load configuration settings: {e}")
    sys.exit(f"Configuration Error: {e}")


__all__ = [
    "Settings",
    "settings",
]

log.info("Shared module loaded.")
