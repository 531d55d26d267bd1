"""
Elowen - LLM Client.

Provides structured LLM calls via Instructor.
"""

from elowen.llm.client import call_llm, call_llm_vision, get_client
from elowen.llm.model_router import get_model

__all__ = [
    "get_client",
    "call_llm",
    "call_llm_vision",
    "get_model",
]
