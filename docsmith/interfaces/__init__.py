"""Abstract collaborator interfaces and caller-facing errors."""

from docsmith.interfaces.collaborator import (
    BaseRuleSuggester,
    BaseTextGenerator,
    BaseVariableDetector,
    CollaboratorError,
    CollaboratorResult,
    capture,
)
from docsmith.interfaces.errors import DocsmithError, InvalidInputError

__all__ = [
    "BaseRuleSuggester",
    "BaseTextGenerator",
    "BaseVariableDetector",
    "CollaboratorError",
    "CollaboratorResult",
    "DocsmithError",
    "InvalidInputError",
    "capture",
]
