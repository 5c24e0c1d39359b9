"""LLM providers.

``OpenAIProvider`` imports the ``openai`` package only when instantiated.
"""

from .mock import ScriptedProvider, result_to_deltas, text_result, tool_result
from .openai import OpenAIProvider

__all__ = ["ScriptedProvider", "OpenAIProvider", "result_to_deltas", "text_result", "tool_result"]
