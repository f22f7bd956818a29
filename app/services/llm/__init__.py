"""LLM access"""
from .call_llm import LLMService, TextGenerator, get_llm_service

__all__ = ["LLMService", "TextGenerator", "get_llm_service"]
