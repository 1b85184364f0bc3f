"""Unit tests for Settings, logging setup and ComponentFactory."""

import logging
from contextlib import contextmanager

import pytest
from pydantic import ValidationError

from docsmith.core import ComponentFactory, Settings, setup_logging
from docsmith.strategies.ai import OpenAIRuleSuggester, OpenAITextGenerator, OpenAIVariableDetector
from docsmith.strategies.extraction import VariableExtractor
from docsmith.strategies.profiles import ProfileStore
from docsmith.strategies.rules import RuleEngine


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{"openai_api_key": "", **overrides})


@contextmanager
def preserved_root_logger():
    """Restore the root logger's handlers and level on exit."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        yield root
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            if handler not in handlers:
                handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self):
        """Defaults point at OpenRouter with gpt-4o."""
        settings = make_settings()

        assert settings.openai_base_url == "https://openrouter.ai/api/v1"
        assert settings.openai_model == "openai/gpt-4o"
        assert settings.similarity_threshold == 0.8
        assert settings.detector_max_chars == 10000
        assert settings.log_dir is None

    def test_log_level_normalized(self):
        """Log levels are upper-cased."""
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_strategy_type_normalized(self):
        """Strategy types are trimmed and lower-cased."""
        assert make_settings(detector_type=" None ").detector_type == "none"

    @pytest.mark.parametrize("threshold", [-0.5, 1.2])
    def test_similarity_threshold_bounds(self, threshold):
        """Thresholds outside [0, 1] fail validation."""
        with pytest.raises(ValidationError):
            make_settings(similarity_threshold=threshold)

    def test_reads_environment(self, monkeypatch):
        """Settings are read from environment variables."""
        monkeypatch.setenv("SIMILARITY_THRESHOLD", "0.9")
        monkeypatch.setenv("GENERATOR_TYPE", "none")

        settings = Settings(_env_file=None)

        assert settings.similarity_threshold == 0.9
        assert settings.generator_type == "none"


# =============================================================================
# Logging Tests
# =============================================================================


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_console_only_by_default(self):
        """Without a log directory only the console handler is installed."""
        with preserved_root_logger():
            root = setup_logging(make_settings(log_level="warning"))

            assert root.level == logging.WARNING
            assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)

    def test_file_handlers_with_log_dir(self, tmp_path):
        """Info and error logs are split into separate files."""
        log_dir = tmp_path / "logs"

        with preserved_root_logger():
            root = setup_logging(make_settings(log_dir=log_dir))
            logging.getLogger("docsmith.test").info("template stored")
            logging.getLogger("docsmith.test").error("something failed")
            for handler in root.handlers:
                handler.flush()

        info_log = (log_dir / "info.log").read_text(encoding="utf-8")
        error_log = (log_dir / "error.log").read_text(encoding="utf-8")
        assert "template stored" in info_log
        assert "something failed" in info_log
        assert "something failed" in error_log
        assert "template stored" not in error_log


# =============================================================================
# Component Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    def test_collaborators_absent_without_api_key(self):
        """No API key means no OpenAI collaborators."""
        factory = ComponentFactory(make_settings())

        assert factory.get_variable_detector() is None
        assert factory.get_text_generator() is None
        assert factory.get_rule_suggester() is None

    def test_openai_collaborators_with_api_key(self):
        """An API key enables every OpenAI collaborator."""
        factory = ComponentFactory(make_settings(openai_api_key="sk-test"))

        assert isinstance(factory.get_variable_detector(), OpenAIVariableDetector)
        assert isinstance(factory.get_text_generator(), OpenAITextGenerator)
        assert isinstance(factory.get_rule_suggester(), OpenAIRuleSuggester)

    def test_none_strategy(self):
        """The none strategy disables a collaborator."""
        factory = ComponentFactory(make_settings(openai_api_key="sk-test", detector_type="none"))
        assert factory.get_variable_detector() is None

    def test_explicit_type_overrides_settings(self):
        """An explicit type wins over settings."""
        factory = ComponentFactory(make_settings(openai_api_key="sk-test"))
        assert factory.get_text_generator("none") is None

    @pytest.mark.parametrize(
        "method", ["get_variable_detector", "get_text_generator", "get_rule_suggester"]
    )
    def test_unknown_type(self, method):
        """Unknown strategy types raise ValueError."""
        factory = ComponentFactory(make_settings())

        with pytest.raises(ValueError, match="Unknown"):
            getattr(factory, method)("anthropic")

    def test_core_components_are_cached(self):
        """Core components are built once."""
        factory = ComponentFactory(make_settings())

        extractor = factory.get_variable_extractor()
        engine = factory.get_rule_engine()
        store = factory.get_profile_store()

        assert isinstance(extractor, VariableExtractor)
        assert isinstance(engine, RuleEngine)
        assert isinstance(store, ProfileStore)
        assert factory.get_variable_extractor() is extractor
        assert factory.get_rule_engine() is engine
        assert factory.get_profile_store() is store
        assert factory.get_personalizer() is factory.get_personalizer()

    def test_clear_cache(self):
        """Clearing the cache rebuilds components."""
        factory = ComponentFactory(make_settings())
        engine = factory.get_rule_engine()

        factory.clear_cache()

        assert factory.get_rule_engine() is not engine

    def test_deduplicator_uses_threshold(self):
        """The deduplicator gets the configured threshold."""
        factory = ComponentFactory(make_settings(similarity_threshold=0.5))
        deduplicator = factory.get_deduplicator()

        assert deduplicator.is_duplicate("acme ltd", "acne lts") is True
