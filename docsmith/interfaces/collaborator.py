"""External collaborator interfaces.

The core consumes three opaque collaborators: a semantic variable detector,
a text generator and a rule suggester. Each may fail; implementations
signal failure by raising ``CollaboratorError`` and the core receives every
call outcome as a ``CollaboratorResult`` so that the fallback path is an
explicit branch.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CollaboratorError(Exception):
    """Raised by a collaborator when it cannot produce a usable result."""

    def __init__(self, collaborator: str, message: str) -> None:
        super().__init__(f"{collaborator}: {message}")
        self.collaborator = collaborator
        self.message = message


@dataclass(frozen=True)
class CollaboratorResult(Generic[T]):
    """Success value or failure of a single collaborator call.

    Attributes:
        value: The returned value when the call succeeded.
        error: The failure when it did not.
    """

    value: T | None = None
    error: CollaboratorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "CollaboratorResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CollaboratorError) -> "CollaboratorResult[T]":
        return cls(error=error)


async def capture(
    collaborator: str, func: Callable[..., Awaitable[T]], *args: Any
) -> CollaboratorResult[T]:
    """Call a collaborator and wrap its outcome.

    ``CollaboratorError`` is the designated failure signal. Any other
    exception is logged with its traceback and reported as a failure so a
    batch operation is never aborted by one external service.

    Args:
        collaborator: Name used in log messages and the error.
        func: The collaborator coroutine function.
        *args: Arguments passed to func.

    Returns:
        A CollaboratorResult holding either the value or the error.
    """
    try:
        return CollaboratorResult.success(await func(*args))
    except CollaboratorError as e:
        logger.warning(f"{collaborator} failed: {e.message}")
        return CollaboratorResult.failure(e)
    except Exception as e:
        logger.error(f"Unexpected {collaborator} error: {e}", exc_info=True)
        return CollaboratorResult.failure(CollaboratorError(collaborator, str(e)))


class BaseVariableDetector(ABC):
    """Abstract base class for semantic variable detection strategies.

    Example:
        ```python
        class KeywordDetector(BaseVariableDetector):
            async def detect(self, text: str) -> list[dict[str, Any]]:
                return [{"name": "employer_name", "dataType": "text"}]
        ```
    """

    @abstractmethod
    async def detect(self, text: str) -> list[dict[str, Any]]:
        """Identify customizable variables in document text.

        Args:
            text: Extracted plain text of the document.

        Returns:
            A list of ``{name, required, dataType, description, options?}``
            dictionaries.

        Raises:
            CollaboratorError: If detection fails.
        """
        ...


class BaseTextGenerator(ABC):
    """Abstract base class for text generation strategies."""

    @abstractmethod
    async def generate(self, prompt: str, document_context: str) -> str:
        """Generate replacement text for a document.

        Args:
            prompt: What the generated text should say.
            document_context: Leading part of the current document content.

        Returns:
            The generated text.

        Raises:
            CollaboratorError: If generation fails.
        """
        ...


class BaseRuleSuggester(ABC):
    """Abstract base class for conditional rule suggestion strategies."""

    @abstractmethod
    async def suggest_rules(self, template: Any) -> list[Any]:
        """Suggest conditional rules for a template.

        Args:
            template: The Template to analyze.

        Returns:
            A list of Rule objects.

        Raises:
            CollaboratorError: If suggestion fails.
        """
        ...
