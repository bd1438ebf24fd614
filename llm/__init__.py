"""LLM integration module for expense classification."""

from llm.factory import get_llm_provider

__all__ = ["get_llm_provider"]
