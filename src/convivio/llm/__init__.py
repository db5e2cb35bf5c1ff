"""
Convivio LLM - Completion client, model routing, and prompt logging.
"""

from convivio.llm.client import CompletionClient, get_completion_client
from convivio.llm.model_router import get_max_tokens, get_model_config
from convivio.llm.prompt_logger import DebugLog, DebugLogEntry, enable_prompt_logging

__all__ = [
    "CompletionClient",
    "DebugLog",
    "DebugLogEntry",
    "enable_prompt_logging",
    "get_completion_client",
    "get_max_tokens",
    "get_model_config",
]
