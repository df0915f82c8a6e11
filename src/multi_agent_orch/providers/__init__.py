"""Completion provider implementations

This package contains completion providers following a common interface.
"""

from .base import LLMProvider
from .openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "OpenAIProvider",
]
