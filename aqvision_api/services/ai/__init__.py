"""
AI Layer for air quality insights

Proxies synthesized prompts to a hosted chat-completion model.
"""

from .openai_adapter import OpenAIAdapter

__all__ = ["OpenAIAdapter"]
