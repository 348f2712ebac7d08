"""LLM provider adapters.

OpenAILLMProvider implements ILLMProvider (policy_advisor/interfaces/llm_provider.py)
over any OpenAI-compatible chat completions endpoint, OpenRouter by default.
main.py builds it from Settings and stores it on FastAPI's app.state.
"""

from policy_advisor.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider"]
