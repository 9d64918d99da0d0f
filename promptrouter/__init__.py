"""
Prompt Router

Asks Gemini which hosted model suits a prompt best, then forwards the prompt to
that model (Gemini 2.0 Flash or DeepSeek via OpenRouter) and returns its answer.
"""

__version__ = "0.1.0"

from promptrouter.models.schemas import ChatRequest, ChatResponse
from promptrouter.services.chat_service import ask_with_deepseek, ask_with_gemini, generate_response

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ask_with_deepseek",
    "ask_with_gemini",
    "generate_response",
]
