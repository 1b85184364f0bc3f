"""Document creation from supplied values or profile data."""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import Binding, CustomizationEntry, Document, Template, UserProfile
from docsmith.strategies.rules.actions import substitution_pattern, to_pattern_string

logger = logging.getLogger(__name__)


class DocumentPersonalizer:
    """Creates document instances from a template plus profile or supplied values."""

    def personalize(
        self,
        template: Template,
        profile: UserProfile,
        timestamp: datetime | None = None,
    ) -> Document:
        """Fill template variables from the profile.

        Each variable is looked up in personal info, then preferences, then
        under its mapped alternative names. Every literal occurrence of a
        filled variable's placeholder is replaced, and a Binding records the
        value together with the placeholder's delimited pattern string.

        Args:
            template: The source template.
            profile: Profile supplying values.
            timestamp: Stamped on the history entry when given.

        Returns:
            The new Document with a ``personalization`` history entry.

        Raises:
            InvalidInputError: If template or profile is None.
        """
        if template is None:
            raise InvalidInputError("Template is required")
        if profile is None:
            raise InvalidInputError("Profile is required")

        content = template.content
        bindings: list[Binding] = []

        for variable in template.variables:
            value = self._find_value(profile, variable.name, variable.mappings)
            if not value:
                continue

            if variable.raw_pattern:
                content = content.replace(variable.raw_pattern, value)
            bindings.append(
                Binding(
                    name=variable.name,
                    value=value,
                    original_pattern=(
                        to_pattern_string(variable.raw_pattern) if variable.raw_pattern else ""
                    ),
                )
            )

        display_name = profile.personal_info.get("name") or "User"
        logger.info(
            f"Personalized template '{template.name}': "
            f"{len(bindings)}/{len(template.variables)} variables filled"
        )

        return Document(
            name=f"{template.name} - Personalized for {display_name}",
            template_name=template.name,
            content=content,
            bindings=tuple(bindings),
            customization_history=(
                CustomizationEntry(
                    action="personalization",
                    description="Document personalized based on user profile",
                    details={"filled": [binding.name for binding in bindings]},
                    timestamp=timestamp,
                ),
            ),
        )

    def create(
        self,
        template: Template,
        filled_values: Mapping[str, Any] | Iterable[Mapping[str, Any]] | None,
        name: str,
    ) -> Document:
        """Create a document from caller-supplied variable values.

        ``filled_values`` is either a name -> value mapping or a list of
        ``{"name": ..., "value": ...}`` entries. Values for names the template
        does not declare are ignored, as are repeated names after the first.
        Each accepted value replaces every match of the variable's pattern
        string and is recorded as a Binding carrying that pattern string.

        Args:
            template: The source template.
            filled_values: Values to fill in.
            name: Name of the new document.

        Returns:
            The new Document, with an empty customization history.

        Raises:
            InvalidInputError: If template is None or name is empty.
        """
        if template is None:
            raise InvalidInputError("Template is required")
        if not name:
            raise InvalidInputError("Document name is required")

        declared = {}
        for variable in template.variables:
            declared.setdefault(variable.name, variable)

        content = template.content
        bindings: list[Binding] = []
        seen: set[str] = set()

        for var_name, value in self._filled_pairs(filled_values):
            variable = declared.get(var_name)
            if variable is None or var_name in seen:
                logger.debug(f"Filled value for '{var_name}' ignored")
                continue
            seen.add(var_name)

            text = "" if value is None else str(value)
            pattern_string = to_pattern_string(variable.raw_pattern) if variable.raw_pattern else ""
            pattern = substitution_pattern(pattern_string)
            if pattern is not None:
                content = pattern.sub(lambda _: text, content)
            bindings.append(Binding(name=var_name, value=text, original_pattern=pattern_string))

        logger.info(
            f"Created document '{name}' from template '{template.name}': "
            f"{len(bindings)}/{len(template.variables)} variables filled"
        )

        return Document(
            name=name,
            template_name=template.name,
            content=content,
            bindings=tuple(bindings),
        )

    @staticmethod
    def _filled_pairs(
        filled_values: Mapping[str, Any] | Iterable[Mapping[str, Any]] | None,
    ) -> list[tuple[str, Any]]:
        if filled_values is None:
            return []
        if isinstance(filled_values, Mapping):
            return [(str(key), value) for key, value in filled_values.items()]

        pairs = []
        for entry in filled_values:
            if isinstance(entry, Mapping) and isinstance(entry.get("name"), str):
                pairs.append((entry["name"], entry.get("value")))
            else:
                logger.warning(f"Malformed filled variable dropped: {entry!r}")
        return pairs

    @staticmethod
    def _find_value(profile: UserProfile, name: str, mappings: list[str]) -> str | None:
        if profile.personal_info.get(name):
            return profile.personal_info[name]
        if profile.preferences.get(name):
            return profile.preferences[name]
        for mapping in mappings:
            if profile.personal_info.get(mapping):
                return profile.personal_info[mapping]
        return None
