"""AI-backed collaborator implementations."""

from docsmith.strategies.ai.openai import (
    OpenAIChatClient,
    OpenAIRuleSuggester,
    OpenAITextGenerator,
    OpenAIVariableDetector,
)

__all__ = [
    "OpenAIChatClient",
    "OpenAIRuleSuggester",
    "OpenAITextGenerator",
    "OpenAIVariableDetector",
]
