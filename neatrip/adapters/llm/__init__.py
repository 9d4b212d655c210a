"""
LLM Adapter - Chat completion access for the AI-assisted endpoints.

Usage:
    from neatrip.adapters.llm import LLMService

    llm = LLMService()
    data = await llm.complete_json("Plan 3 days in Kyoto", system_instruction="...")
"""

from .service import LLMResponse, LLMService, extract_json_object

__all__ = ["LLMService", "LLMResponse", "extract_json_object"]
