"""User profile models: field snapshots and the frequently-used index."""

from datetime import datetime

from pydantic import Field, field_validator

from docsmith.models.base import FrozenWireModel


class ProfileSnapshot(FrozenWireModel):
    """One historical capture of a profile's field values."""

    fields: dict[str, str] = Field(default_factory=dict)
    category: str = "personal_info"
    timestamp: datetime | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def stringify_values(cls, v: object) -> object:
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        return v


class FrequentVariable(FrozenWireModel):
    """How often a field was stored for a profile, and its latest value."""

    name: str
    value: str
    frequency: int = Field(default=1, ge=0)


class UserProfile(FrozenWireModel):
    """Profile data owned by one user.

    ``snapshots`` is kept in chronological (insertion) order.
    """

    user_id: str = ""
    personal_info: dict[str, str] = Field(default_factory=dict)
    preferences: dict[str, str] = Field(default_factory=dict)
    snapshots: tuple[ProfileSnapshot, ...] = ()
    frequently_used_variables: tuple[FrequentVariable, ...] = ()
