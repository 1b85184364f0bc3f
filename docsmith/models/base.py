"""Shared pydantic configuration for docsmith models.

Callers (UI or API) exchange camelCase JSON; Python code uses snake_case
attribute names. Both spellings are accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model accepting camelCase or snake_case field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize using camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")


class FrozenWireModel(WireModel):
    """Immutable value object variant of WireModel."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
