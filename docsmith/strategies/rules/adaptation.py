"""Convert context-adaptation payloads into rules."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from docsmith.models import Rule

logger = logging.getLogger(__name__)

DEFAULT_ADAPTATION_DESCRIPTION = "Document adapted based on context analysis"


def rules_from_adaptations(adaptations: Iterable[Mapping[str, Any]]) -> list[Rule]:
    """Build rules from ``{name?, description?, condition, action, targetVariables}``.

    Unnamed adaptations are called ``Adaptation_<index>``. Malformed
    adaptations are dropped.
    """
    rules: list[Rule] = []
    for index, adaptation in enumerate(adaptations):
        if not isinstance(adaptation, Mapping):
            logger.warning(f"Adaptation {index} is not an object; dropped")
            continue

        data = dict(adaptation)
        data["name"] = data.get("name") or f"Adaptation_{index}"
        data["description"] = data.get("description") or DEFAULT_ADAPTATION_DESCRIPTION
        try:
            rules.append(Rule.model_validate(data))
        except ValidationError as e:
            logger.warning(f"Adaptation {data['name']!r} dropped: {e.error_count()} error(s)")

    return rules
