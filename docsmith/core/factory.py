"""Component Factory for strategy instantiation.

Builds the extractor, rule engine, profile store and their collaborators
from Settings, so strategies can be swapped through configuration without
modifying core code.
"""

import logging
from typing import Any

from docsmith.core.config import Settings, get_settings
from docsmith.interfaces.collaborator import (
    BaseRuleSuggester,
    BaseTextGenerator,
    BaseVariableDetector,
)
from docsmith.strategies.ai import (
    OpenAIChatClient,
    OpenAIRuleSuggester,
    OpenAITextGenerator,
    OpenAIVariableDetector,
)
from docsmith.strategies.documents import DocumentPersonalizer
from docsmith.strategies.extraction import VariableExtractor
from docsmith.strategies.profiles import DataValidator, Deduplicator, ProfileStore
from docsmith.strategies.rules import ActionApplier, ConditionEvaluator, RuleEngine

logger = logging.getLogger(__name__)

# Distinguishes "not built yet" from a collaborator deliberately built as None.
_UNSET: Any = object()


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Collaborators are optional: a ``none`` strategy, or an ``openai``
    strategy without an API key, yields None and the core runs without it.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        extractor = factory.get_variable_extractor()
        engine = factory.get_rule_engine()
        store = factory.get_profile_store()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Settings to build from. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._detector_cache: BaseVariableDetector | None = _UNSET
        self._generator_cache: BaseTextGenerator | None = _UNSET
        self._suggester_cache: BaseRuleSuggester | None = _UNSET
        self._extractor_cache: VariableExtractor | None = None
        self._engine_cache: RuleEngine | None = None
        self._deduplicator_cache: Deduplicator | None = None
        self._profile_store_cache: ProfileStore | None = None
        self._personalizer_cache: DocumentPersonalizer | None = None
        self._validator_cache: DataValidator | None = None

    def _chat_client(self, name: str) -> OpenAIChatClient | None:
        if not self._settings.openai_api_key:
            logger.warning(f"OPENAI_API_KEY is not set; {name} disabled")
            return None
        return OpenAIChatClient(
            name=name,
            api_key=self._settings.openai_api_key,
            base_url=self._settings.openai_base_url,
            model=self._settings.openai_model,
            timeout=self._settings.openai_timeout,
        )

    def get_variable_detector(
        self, detector_type: str | None = None
    ) -> BaseVariableDetector | None:
        """Get the semantic variable detector.

        Args:
            detector_type: The detector type to instantiate. If None, uses settings.

        Returns:
            A BaseVariableDetector, or None when detection is disabled.

        Raises:
            ValueError: If the detector type is unknown.
        """
        if self._detector_cache is _UNSET or detector_type is not None:
            detector_type = detector_type or self._settings.detector_type

            logger.info(f"Instantiating variable detector: {detector_type}")

            match detector_type:
                case "openai":
                    chat = self._chat_client("semantic detector")
                    self._detector_cache = OpenAIVariableDetector(chat) if chat else None
                case "none":
                    self._detector_cache = None
                case _:
                    raise ValueError(
                        f"Unknown detector type: {detector_type}. "
                        f"Valid options: 'openai', 'none'"
                    )

        return self._detector_cache

    def get_text_generator(
        self, generator_type: str | None = None
    ) -> BaseTextGenerator | None:
        """Get the text generator used by ``generateText`` actions.

        Raises:
            ValueError: If the generator type is unknown.
        """
        if self._generator_cache is _UNSET or generator_type is not None:
            generator_type = generator_type or self._settings.generator_type

            logger.info(f"Instantiating text generator: {generator_type}")

            match generator_type:
                case "openai":
                    chat = self._chat_client("text generator")
                    self._generator_cache = (
                        OpenAITextGenerator(
                            chat, temperature=self._settings.generation_temperature
                        )
                        if chat
                        else None
                    )
                case "none":
                    self._generator_cache = None
                case _:
                    raise ValueError(
                        f"Unknown generator type: {generator_type}. "
                        f"Valid options: 'openai', 'none'"
                    )

        return self._generator_cache

    def get_rule_suggester(
        self, suggester_type: str | None = None
    ) -> BaseRuleSuggester | None:
        """Get the conditional rule suggester.

        Raises:
            ValueError: If the suggester type is unknown.
        """
        if self._suggester_cache is _UNSET or suggester_type is not None:
            suggester_type = suggester_type or self._settings.rule_suggester_type

            logger.info(f"Instantiating rule suggester: {suggester_type}")

            match suggester_type:
                case "openai":
                    chat = self._chat_client("rule suggester")
                    self._suggester_cache = OpenAIRuleSuggester(chat) if chat else None
                case "none":
                    self._suggester_cache = None
                case _:
                    raise ValueError(
                        f"Unknown rule suggester type: {suggester_type}. "
                        f"Valid options: 'openai', 'none'"
                    )

        return self._suggester_cache

    def get_variable_extractor(self) -> VariableExtractor:
        """Get the variable extractor wired to the configured detector."""
        if self._extractor_cache is None:
            self._extractor_cache = VariableExtractor(
                detector=self.get_variable_detector(),
                detector_max_chars=self._settings.detector_max_chars,
            )
        return self._extractor_cache

    def get_rule_engine(self) -> RuleEngine:
        """Get the rule engine wired to the configured text generator."""
        if self._engine_cache is None:
            self._engine_cache = RuleEngine(
                evaluator=ConditionEvaluator(),
                applier=ActionApplier(
                    generator=self.get_text_generator(),
                    context_chars=self._settings.generator_context_chars,
                ),
            )
        return self._engine_cache

    def get_deduplicator(self) -> Deduplicator:
        if self._deduplicator_cache is None:
            self._deduplicator_cache = Deduplicator(
                threshold=self._settings.similarity_threshold
            )
        return self._deduplicator_cache

    def get_profile_store(self) -> ProfileStore:
        if self._profile_store_cache is None:
            self._profile_store_cache = ProfileStore(deduplicator=self.get_deduplicator())
        return self._profile_store_cache

    def get_personalizer(self) -> DocumentPersonalizer:
        if self._personalizer_cache is None:
            self._personalizer_cache = DocumentPersonalizer()
        return self._personalizer_cache

    def get_data_validator(self) -> DataValidator:
        if self._validator_cache is None:
            self._validator_cache = DataValidator()
        return self._validator_cache

    def clear_cache(self) -> None:
        """Clear all cached instances."""
        self._detector_cache = _UNSET
        self._generator_cache = _UNSET
        self._suggester_cache = _UNSET
        self._extractor_cache = None
        self._engine_cache = None
        self._deduplicator_cache = None
        self._profile_store_cache = None
        self._personalizer_cache = None
        self._validator_cache = None
        logger.debug("Component factory cache cleared")
