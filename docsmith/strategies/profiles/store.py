"""Profile data management: storage, retrieval, auto-fill and deduplication.

``ProfileStore`` never mutates a profile; every operation returns a new
UserProfile. Persisting it is the caller's concern.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import FrequentVariable, MergeResult, ProfileSnapshot, UserProfile, Variable
from docsmith.strategies.profiles.deduplicator import Deduplicator

logger = logging.getLogger(__name__)

PERSONAL_INFO = "personal_info"
PREFERENCES = "preferences"

_CATEGORY_ALIASES = {
    "personal_info": PERSONAL_INFO,
    "personalInfo": PERSONAL_INFO,
    "preferences": PREFERENCES,
}


def _category_field(category: str) -> str:
    try:
        return _CATEGORY_ALIASES[category]
    except KeyError:
        raise InvalidInputError(
            f"Unknown profile category: {category}. "
            f"Valid options: 'personal_info', 'preferences'"
        ) from None


class ProfileStore:
    """Operations over UserProfile values."""

    def __init__(self, deduplicator: Deduplicator | None = None) -> None:
        self._deduplicator = deduplicator or Deduplicator()

    def store(
        self,
        profile: UserProfile,
        data: Mapping[str, Any],
        category: str = PERSONAL_INFO,
        timestamp: datetime | None = None,
    ) -> UserProfile:
        """Store field values on a profile.

        Args:
            profile: The profile to update.
            data: Field name -> value.
            category: ``personal_info`` or ``preferences``.
            timestamp: Recorded on the snapshot when given.

        Returns:
            The updated profile with the data merged into the category, a
            new snapshot appended and, for personal info, the frequency
            index updated.

        Raises:
            InvalidInputError: If data is empty or the category is unknown.
        """
        if not data:
            raise InvalidInputError("No data provided")

        field_name = _category_field(category)
        fields = {str(k): "" if v is None else str(v) for k, v in data.items()}

        merged = {**getattr(profile, field_name), **fields}
        snapshot = ProfileSnapshot(fields=fields, category=field_name, timestamp=timestamp)
        update: dict[str, Any] = {
            field_name: merged,
            "snapshots": profile.snapshots + (snapshot,),
        }

        if field_name == PERSONAL_INFO:
            update["frequently_used_variables"] = self._count_usage(
                profile.frequently_used_variables, fields
            )

        logger.info(f"Stored {len(fields)} field(s) in {field_name} for '{profile.user_id}'")
        return profile.model_copy(update=update)

    def retrieve(
        self,
        profile: UserProfile | None,
        category: str = PERSONAL_INFO,
        fields: Iterable[str] | None = None,
    ) -> dict[str, str]:
        """Return a category's data, optionally limited to some fields."""
        if profile is None:
            return {}

        data = dict(getattr(profile, _category_field(category)))
        if fields is None:
            return data

        wanted = set(fields)
        return {key: value for key, value in data.items() if key in wanted}

    def autofill(
        self, profile: UserProfile | None, variables: Iterable[Variable]
    ) -> dict[str, str]:
        """Find a value for each variable from the profile.

        Lookup order: personal info, preferences, snapshots (most recent
        first), the frequently-used index, then the variable's mappings
        against personal info. Variables without a value are omitted.
        """
        if profile is None or variables is None:
            return {}

        frequent = {item.name: item.value for item in profile.frequently_used_variables}
        filled: dict[str, str] = {}

        for variable in variables:
            value = self._lookup(profile, variable, frequent)
            if value:
                filled[variable.name] = value

        logger.debug(f"Auto-filled {len(filled)} variable(s)")
        return filled

    def frequent_variables(
        self, profile: UserProfile, limit: int | None = None
    ) -> list[FrequentVariable]:
        """Frequently used variables, most frequent first."""
        ranked = sorted(
            profile.frequently_used_variables,
            key=lambda item: item.frequency,
            reverse=True,
        )
        return ranked if limit is None else ranked[:limit]

    def deduplicate(self, profile: UserProfile) -> tuple[UserProfile, MergeResult]:
        """Merge near-duplicate snapshot values into personal info.

        The profile is returned unchanged when no duplicate was found.
        """
        if profile is None:
            raise InvalidInputError("Profile is required")

        result = self._deduplicator.merge(profile.snapshots)
        if result.duplicate_count == 0:
            return profile, result

        personal_info = {**profile.personal_info, **result.merged_fields}
        return profile.model_copy(update={"personal_info": personal_info}), result

    @staticmethod
    def _lookup(
        profile: UserProfile, variable: Variable, frequent: dict[str, str]
    ) -> str | None:
        name = variable.name

        if profile.personal_info.get(name):
            return profile.personal_info[name]
        if profile.preferences.get(name):
            return profile.preferences[name]

        for snapshot in reversed(profile.snapshots):
            if snapshot.fields.get(name):
                return snapshot.fields[name]

        if frequent.get(name):
            return frequent[name]

        for mapping in variable.mappings:
            if profile.personal_info.get(mapping):
                return profile.personal_info[mapping]

        return None

    @staticmethod
    def _count_usage(
        index: tuple[FrequentVariable, ...], fields: dict[str, str]
    ) -> tuple[FrequentVariable, ...]:
        """Increment frequencies; counts never decrease."""
        updated = list(index)
        positions = {item.name: i for i, item in enumerate(updated)}

        for name, value in fields.items():
            if not value:
                continue
            if name in positions:
                current = updated[positions[name]]
                updated[positions[name]] = current.model_copy(
                    update={"frequency": current.frequency + 1, "value": value}
                )
            else:
                positions[name] = len(updated)
                updated.append(FrequentVariable(name=name, value=value, frequency=1))

        return tuple(updated)
