"""Tests for utility modules.

Tests for config, logging, exceptions and text helpers.
"""

import os
import tempfile
from unittest.mock import patch

import pytest
import structlog

from advisor.utils.config import (
    AgentLLMOverride,
    AppConfig,
    AppSettings,
    Environment,
    LLMConfig,
    LogFormat,
    LoggingConfig,
    TurnStoreConfig,
    get_config,
    init_config,
    reset_config,
)
from advisor.utils.exceptions import (
    AdvisorError,
    AgentAlreadyExistsError,
    APIError,
    ConfigurationError,
    EmergencyError,
    ExternalServiceError,
    NotFoundError,
    ProviderError,
    ProviderTimeoutError,
    RoutingError,
    ServiceUnavailableError,
    TemplateLoadError,
    ToolError,
)
from advisor.utils.logging import (
    LoggerAdapter,
    clear_correlation_id,
    get_agent_logger,
    get_correlation_id,
    get_logger,
    get_provider_logger,
    set_correlation_id,
    setup_logging,
)
from advisor.utils.text import (
    contains_any,
    contains_phrase,
    normalize,
    slugify,
    word_count,
)

# ============================================================================
# Config Tests
# ============================================================================


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_default_values(self):
        settings = AppSettings()
        assert settings.env == Environment.DEVELOPMENT
        assert settings.debug is False
        assert settings.assistant_name == "the virtual advisor"

    def test_invalid_port(self):
        with pytest.raises(ValueError):
            AppSettings(port=0)
        with pytest.raises(ValueError):
            AppSettings(port=70000)


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_default_values(self):
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == LogFormat.JSON

    def test_level_is_uppercased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="INVALID")


class TestLLMConfig:
    """Tests for LLMConfig model."""

    def test_default_values(self):
        config = LLMConfig()
        assert config.enabled is True
        assert config.default_provider == "ollama"
        assert config.ollama.base_url == "http://localhost:11434"
        assert config.vllm.enabled is True
        assert config.anthropic.api_key == ""

    def test_temperature_validation(self):
        LLMConfig(temperature=0.0)
        LLMConfig(temperature=2.0)
        with pytest.raises(ValueError):
            LLMConfig(temperature=-0.1)
        with pytest.raises(ValueError):
            LLMConfig(temperature=2.1)

    def test_timeout_and_tokens_must_be_positive(self):
        with pytest.raises(ValueError):
            LLMConfig(timeout=0)
        with pytest.raises(ValueError):
            LLMConfig(max_tokens=0)

    def test_agent_override_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            AgentLLMOverride(provider="vllm", colour="blue")

    def test_turn_store_bound(self):
        with pytest.raises(ValueError):
            TurnStoreConfig(max_turns_per_session=0)


class TestAppConfig:
    """Tests for AppConfig loading."""

    def test_from_yaml(self):
        yaml_content = """
app:
  env: production
  port: 9000
  assistant_name: Ada
logging:
  level: WARNING
  format: console
llm:
  default_provider: vllm
  default_model: llama-3-8b-instruct
  vllm:
    base_url: http://gpu-box:8000
  agents:
    legal:
      enabled: false
turn_store:
  max_turns_per_session: 10
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            yaml_path = os.path.join(tmpdir, "app.yaml")
            with open(yaml_path, "w") as f:
                f.write(yaml_content)
            config = AppConfig.from_yaml(yaml_path)

        assert config.app.env == Environment.PRODUCTION
        assert config.app.assistant_name == "Ada"
        assert config.logging.format == LogFormat.CONSOLE
        assert config.llm.default_provider == "vllm"
        assert config.llm.vllm.base_url == "http://gpu-box:8000"
        assert config.llm.agents["legal"].enabled is False
        assert config.turn_store.max_turns_per_session == 10

    def test_from_yaml_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml("/nonexistent/path.yaml")

    def test_from_yaml_requires_mapping(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yaml_path = os.path.join(tmpdir, "app.yaml")
            with open(yaml_path, "w") as f:
                f.write("- just\n- a list\n")
            with pytest.raises(ValueError):
                AppConfig.from_yaml(yaml_path)

    def test_from_env(self):
        with patch.dict(
            os.environ,
            {
                "APP_ENV": "staging",
                "APP_PORT": "5000",
                "LOG_LEVEL": "DEBUG",
                "LLM_ENABLED": "false",
                "LLM_DEFAULT_PROVIDER": "vllm",
                "OLLAMA_MODELS": "llama3, mistral",
                "ANTHROPIC_API_KEY": "test-key",
                "TURN_STORE_MAX_TURNS": "7",
            },
        ):
            config = AppConfig.from_env()

        assert config.app.env == Environment.STAGING
        assert config.app.port == 5000
        assert config.logging.level == "DEBUG"
        assert config.llm.enabled is False
        assert config.llm.default_provider == "vllm"
        assert config.llm.ollama.models == ["llama3", "mistral"]
        assert config.llm.anthropic.api_key == "test-key"
        assert config.turn_store.max_turns_per_session == 7


class TestGlobalConfig:
    """Tests for global config functions."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_get_config_not_initialized(self):
        with pytest.raises(RuntimeError):
            get_config()

    def test_init_config(self):
        config = init_config()
        assert get_config() is config

    def test_reset_config(self):
        init_config()
        reset_config()
        with pytest.raises(RuntimeError):
            get_config()


# ============================================================================
# Logging Tests
# ============================================================================


class TestLogging:
    """Tests for logging module."""

    def test_setup_logging_json(self):
        setup_logging(level="DEBUG", json_format=True)
        assert get_logger("test") is not None

    def test_setup_logging_console(self):
        setup_logging(level="INFO", json_format=False)
        assert get_logger("test") is not None

    def test_correlation_id(self):
        clear_correlation_id()
        assert get_correlation_id() is None
        cid = set_correlation_id()
        assert get_correlation_id() == cid
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_specific_correlation_id(self):
        assert set_correlation_id("req-1") == "req-1"
        assert get_correlation_id() == "req-1"
        clear_correlation_id()

    def test_correlation_id_is_merged_into_events(self):
        set_correlation_id("req-2")
        try:
            assert structlog.contextvars.get_contextvars()["correlation_id"] == "req-2"
        finally:
            clear_correlation_id()
        assert "correlation_id" not in structlog.contextvars.get_contextvars()


class TestLoggerAdapter:
    """Tests for LoggerAdapter class."""

    def setup_method(self):
        setup_logging(level="DEBUG", json_format=True)

    def test_bind_context(self):
        adapter = LoggerAdapter("test", user_id="123")
        bound = adapter.bind(session_id="xyz")
        assert bound.context == {"user_id": "123", "session_id": "xyz"}
        assert adapter.context == {"user_id": "123"}

    def test_agent_logger_context(self):
        logger = get_agent_logger("investment", "Investment Advisor")
        assert logger.context == {"agent_id": "investment", "agent_name": "Investment Advisor"}

    def test_provider_logger_context(self):
        assert get_provider_logger("ollama").context == {"provider": "ollama"}

    def test_adapter_logs_without_error(self):
        adapter = LoggerAdapter("test", component="unit")
        adapter.info("Something happened", count=1)
        adapter.warning("Something odd")

    def test_call_fields_override_identity(self):
        with structlog.testing.capture_logs() as events:
            LoggerAdapter("test", component="unit").info("Moved", component="api")

        assert events[0]["component"] == "api"
        assert events[0]["event"] == "Moved"


# ============================================================================
# Exception Tests
# ============================================================================


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_to_dict(self):
        error = AdvisorError("boom", details={"key": "value"}, cause=ValueError("inner"))
        data = error.to_dict()
        assert data == {
            "error": "AdvisorError",
            "message": "boom",
            "details": {"key": "value"},
            "cause": "inner",
        }

    def test_configuration_errors(self):
        assert isinstance(AgentAlreadyExistsError("a"), ConfigurationError)
        assert isinstance(RoutingError("no agents"), ConfigurationError)
        error = TemplateLoadError("bad file", "/tmp/x.yaml")
        assert isinstance(error, ConfigurationError)

    def test_api_errors_carry_status(self):
        assert NotFoundError("Agent", "x").status_code == 404
        unavailable = ServiceUnavailableError("orchestrator")
        assert unavailable.status_code == 503
        assert isinstance(unavailable, APIError)

    def test_provider_error(self):
        error = ProviderError("failed", provider="vllm", status_code=500, model="m")
        assert isinstance(error, ExternalServiceError)
        assert error.details == {"provider": "vllm", "status_code": 500, "model": "m"}

    def test_provider_timeout(self):
        error = ProviderTimeoutError(30.0, provider="ollama")
        assert isinstance(error, ProviderError)
        assert error.status_code is None
        assert error.details["timeout_seconds"] == 30.0

    def test_emergency_error_wraps_cause(self):
        cause = RuntimeError("kaboom")
        error = EmergencyError("investment", cause)
        assert error.cause is cause
        assert "kaboom" in error.message

    def test_tool_error(self):
        error = ToolError("runway-calculator", "bad input")
        assert error.details == {"tool_id": "runway-calculator"}


# ============================================================================
# Text Helper Tests
# ============================================================================


class TestTextHelpers:
    """Tests for text matching helpers."""

    def test_normalize(self):
        assert normalize("  Hello   THERE \n") == "hello there"

    def test_word_count(self):
        assert word_count("") == 0
        assert word_count("one two  three") == 3

    def test_whole_word_matching(self):
        assert contains_phrase("hi there", "hi")
        assert not contains_phrase("this is it", "hi")
        assert contains_phrase("what is your   go-to-market plan", "go-to-market")

    def test_multi_word_phrase(self):
        assert contains_phrase("i need a term  sheet", "term sheet")

    def test_prefix_matching(self):
        assert contains_any("our investors", ["invest"], prefix=True)
        assert not contains_any("our investors", ["invest"])

    def test_slugify(self):
        assert slugify("How can I get started?") == "how_can_i_get_started"
