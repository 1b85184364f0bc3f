"""Template, variable, binding and document models."""

import enum
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from docsmith.models.base import FrozenWireModel, WireModel
from docsmith.models.rules import Rule


class DataType(str, enum.Enum):
    """Value type of a template variable."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"


class VariableSource(str, enum.Enum):
    """Where an extracted variable came from."""

    PATTERN_MATCH = "pattern_match"
    SEMANTIC_DETECTED = "semantic_detected"


class Variable(WireModel):
    """A named fill-in point of a template."""

    name: str = Field(min_length=1, description="Placeholder name, unique within a template")
    raw_pattern: str = Field(default="", description="Placeholder text as it appears in content")
    data_type: DataType = DataType.TEXT
    required: bool = True
    options: list[str] = Field(default_factory=list, description="Choices for select variables")
    description: str = ""
    source: VariableSource = VariableSource.PATTERN_MATCH
    mappings: list[str] = Field(
        default_factory=list,
        description="Alternative profile field names consulted during auto-fill",
    )

    @field_validator("options", "mappings", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ConditionalSection(WireModel):
    """A named BEGIN/END region of a template and the rules that govern it."""

    name: str
    rules: list[Rule] = Field(default_factory=list)


class Template(WireModel):
    """A document with named placeholders and optional sections."""

    name: str = ""
    content: str = ""
    variables: list[Variable] = Field(default_factory=list)
    conditional_sections: list[ConditionalSection] = Field(default_factory=list)


class Binding(FrozenWireModel):
    """A variable bound to a concrete value within one document."""

    name: str
    value: str = ""
    original_pattern: str = ""


class CustomizationEntry(FrozenWireModel):
    """One entry of a document's append-only customization history."""

    action: str
    description: str = ""
    rule_name: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime | None = None


class Document(FrozenWireModel):
    """A template instance with its own content and bindings."""

    name: str = ""
    template_name: str = ""
    content: str = ""
    bindings: tuple[Binding, ...] = ()
    customization_history: tuple[CustomizationEntry, ...] = ()

    def binding_values(self) -> dict[str, str]:
        """Return the bindings as a name -> value mapping."""
        return {binding.name: binding.value for binding in self.bindings}

    def with_history(self, *entries: CustomizationEntry) -> "Document":
        """Return a copy with entries appended to the history."""
        return self.model_copy(
            update={"customization_history": self.customization_history + tuple(entries)}
        )
