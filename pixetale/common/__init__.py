"""
Common utilities shared across PixeTale modules.
"""

from .llm import ChatResult, CompletionCallable, call_chat_completion, strip_code_fence
from .log import setup_logger

__all__ = [
    "ChatResult",
    "CompletionCallable",
    "call_chat_completion",
    "setup_logger",
    "strip_code_fence",
]
