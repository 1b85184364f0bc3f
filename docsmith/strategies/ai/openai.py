"""OpenAI-backed collaborators.

Talks to any OpenAI-compatible chat completions endpoint (OpenRouter by
default). Every failure is translated into ``CollaboratorError`` so the
core can fall back explicitly.
"""

import json
import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from docsmith.interfaces.collaborator import (
    BaseRuleSuggester,
    BaseTextGenerator,
    BaseVariableDetector,
    CollaboratorError,
)
from docsmith.models import Rule, Template

logger = logging.getLogger(__name__)


# =============================================================================
# Prompts
# =============================================================================

VARIABLE_DETECTION_PROMPT = """
You are an assistant specialized in document analysis. Identify every value
in the document that would change from one use of the document to the next.

For each variable return:
- name: lowercase with underscores
- required: true if the document needs the value
- dataType: one of text, number, date, boolean, select
- description: what the variable represents
- options: list of choices, only for select variables

Return valid JSON only: {"variables": [...]}
"""

TEXT_GENERATION_PROMPT = """
You are an assistant specialized in generating professional document text.
Use formal language appropriate for legal and business documents.
Return only the text that goes into the document, without explanations
or disclaimers.
"""

RULE_SUGGESTION_PROMPT = """
You are an assistant specialized in document automation and conditional logic.
Suggest rules that show or hide sections or insert text depending on variable values.

Each rule has this structure:
{
  "name": "string",
  "description": "string",
  "condition": {"type": "simple", "variable": "string", "operator": "string", "value": "string"},
  "action": "show | hide | insertText",
  "targetVariables": ["string"]
}

Valid operators: equals, notEquals, contains, startsWith, endsWith,
greaterThan, lessThan, isEmpty, isNotEmpty.

Return valid JSON only: {"rules": [...]}
"""


class OpenAIChatClient:
    """Thin wrapper around chat completions shared by the collaborators.

    Attributes:
        name: Collaborator name used in errors.
    """

    def __init__(
        self,
        name: str,
        api_key: str = "",
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4o",
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            name: Collaborator name used in errors and logs.
            api_key: OpenAI/OpenRouter API key.
            base_url: API base URL.
            model: Chat model identifier.
            timeout: Request timeout in seconds.
            client: Pre-built client, used instead of creating one.
        """
        self.name = name
        self._model = model
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
        )

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        json_mode: bool = False,
    ) -> str:
        """Run one chat completion and return the message text.

        Raises:
            CollaboratorError: If the request fails or the reply is empty.
        """
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug(f"Calling {self._model} for {self.name}")

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise CollaboratorError(self.name, f"API request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise CollaboratorError(self.name, "empty response")

        logger.info(f"{self.name} response received: {len(content)} chars")
        return content

    async def complete_json(self, system_prompt: str, user_prompt: str) -> Any:
        """Run a JSON-mode completion and decode the reply."""
        content = await self.complete(system_prompt, user_prompt, json_mode=True)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise CollaboratorError(self.name, f"invalid JSON response: {e}") from e


def _json_list(data: Any, key: str) -> list[Any] | None:
    """Accept either a bare array or an object wrapping one under key."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return None


class OpenAIVariableDetector(BaseVariableDetector):
    """Semantic variable detection through a chat model."""

    def __init__(self, chat: OpenAIChatClient) -> None:
        self._chat = chat

    async def detect(self, text: str) -> list[dict[str, Any]]:
        data = await self._chat.complete_json(
            VARIABLE_DETECTION_PROMPT,
            f"Identify the customizable variables in this document:\n\n{text}",
        )

        variables = _json_list(data, "variables")
        if variables is None:
            raise CollaboratorError(self._chat.name, "response has no variables array")

        logger.info(f"Semantic detector returned {len(variables)} candidate(s)")
        return variables


class OpenAITextGenerator(BaseTextGenerator):
    """Generates document text through a chat model."""

    def __init__(self, chat: OpenAIChatClient, temperature: float = 0.3) -> None:
        self._chat = chat
        self._temperature = temperature

    async def generate(self, prompt: str, document_context: str) -> str:
        context = document_context or "No document context provided"
        user_prompt = (
            f"Generate professional document text based on the following prompt:\n\n"
            f"{prompt}\n\n"
            f"Context for this text:\n{context}"
        )
        content = await self._chat.complete(
            TEXT_GENERATION_PROMPT, user_prompt, temperature=self._temperature
        )
        return content.strip()


class OpenAIRuleSuggester(BaseRuleSuggester):
    """Suggests conditional rules for a template through a chat model."""

    def __init__(self, chat: OpenAIChatClient, content_chars: int = 5000) -> None:
        self._chat = chat
        self._content_chars = content_chars

    async def suggest_rules(self, template: Template) -> list[Rule]:
        """Ask the model for rules and keep the ones that validate.

        Raises:
            CollaboratorError: If the request fails or no rule array is returned.
        """
        variables = [
            variable.model_dump(by_alias=True, mode="json", include={"name", "data_type"})
            for variable in template.variables
        ]
        user_prompt = (
            f"Suggest conditional rules for the following document template:\n\n"
            f"Template Name: {template.name or 'Unnamed template'}\n\n"
            f"Template Content:\n{template.content[: self._content_chars]}\n\n"
            f"Template Variables:\n{json.dumps(variables)}"
        )

        data = await self._chat.complete_json(RULE_SUGGESTION_PROMPT, user_prompt)
        raw_rules = _json_list(data, "rules")
        if raw_rules is None:
            raise CollaboratorError(self._chat.name, "response has no rules array")

        rules = []
        for item in raw_rules:
            if not isinstance(item, dict):
                continue
            try:
                rules.append(Rule.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping malformed suggested rule: {e.error_count()} error(s)")

        logger.info(f"Rule suggester returned {len(rules)}/{len(raw_rules)} valid rule(s)")
        return rules
