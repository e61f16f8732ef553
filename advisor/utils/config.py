"""Application configuration management.

This module provides configuration loading from environment variables and YAML files.
LLM settings live in one process-wide LLMConfig; agents receive their resolved
provider/model at construction instead of hardcoding them.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    """Log output format types."""

    JSON = "json"
    CONSOLE = "console"


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class AppSettings(BaseModel):
    """Application settings."""

    env: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    name: str = Field(default="Virtual Advisor", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    assistant_name: str = Field(
        default="the virtual advisor",
        description="How the assistant refers to itself in canned replies",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default=LogFormat.JSON, description="Log format")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


class OllamaConfig(BaseModel):
    """Generate-style local inference server (Ollama)."""

    enabled: bool = Field(default=True, description="Register the Ollama provider")
    base_url: str = Field(
        default="http://localhost:11434", description="Ollama server base URL"
    )
    models: list[str] = Field(
        default_factory=lambda: ["qwen2.5:latest", "llama3"],
        description="Models served by this backend, preferred first",
    )


class VLLMConfig(BaseModel):
    """OpenAI-compatible local inference server (vLLM)."""

    enabled: bool = Field(default=True, description="Register the vLLM provider")
    base_url: str = Field(
        default="http://localhost:8000", description="vLLM server base URL"
    )
    models: list[str] = Field(
        default_factory=lambda: ["llama-3-8b-instruct"],
        description="Models served by this backend, preferred first",
    )
    api_key: str = Field(default="", description="Optional bearer token")


class AnthropicConfig(BaseModel):
    """Anthropic API configuration (registered only with an API key)."""

    api_key: str = Field(default="", description="Anthropic API key")
    models: list[str] = Field(
        default_factory=lambda: ["claude-haiku-4-5-20251001"],
        description="Models to expose",
    )


class OpenAIConfig(BaseModel):
    """OpenAI API configuration (registered only with an API key)."""

    api_key: str = Field(default="", description="OpenAI API key")
    base_url: str | None = Field(default=None, description="Optional base URL")
    models: list[str] = Field(
        default_factory=lambda: ["gpt-4o-mini"], description="Models to expose"
    )


class AgentLLMOverride(BaseModel):
    """Per-agent LLM preferences overriding the global defaults."""

    provider: str | None = Field(default=None, description="Preferred provider id")
    model: str | None = Field(default=None, description="Preferred model id")
    enabled: bool | None = Field(default=None, description="Enable LLM mode")

    model_config = {"extra": "forbid"}


class LLMConfig(BaseModel):
    """Process-wide LLM configuration."""

    enabled: bool = Field(default=True, description="Enable LLM-first answers")
    default_provider: str = Field(default="ollama", description="Preferred provider")
    default_model: str = Field(default="qwen2.5:latest", description="Preferred model")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    max_tokens: int = Field(default=1000, description="Default max tokens")
    temperature: float = Field(default=0.7, description="Default temperature")
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    vllm: VLLMConfig = Field(default_factory=VLLMConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    agents: dict[str, AgentLLMOverride] = Field(
        default_factory=dict, description="Per-agent overrides keyed by agent id"
    )

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_tokens must be positive")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class TurnStoreConfig(BaseModel):
    """Best-effort conversation turn store."""

    enabled: bool = Field(default=True, description="Record turns in memory")
    max_turns_per_session: int = Field(
        default=50, ge=1, description="Oldest turns are dropped past this bound"
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    turn_store: TurnStoreConfig = Field(default_factory=TurnStoreConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "AppConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            AppConfig instance populated from environment
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(cls())

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            AppConfig instance populated from YAML

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML content is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError("YAML content must be a dictionary")

        return cls._from_yaml_dict(data)

    @classmethod
    def _from_yaml_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Create config from parsed YAML dictionary."""
        config_data: dict[str, Any] = {}

        if "app" in data:
            config_data["app"] = AppSettings(**data["app"])

        if "logging" in data:
            config_data["logging"] = LoggingConfig(**data["logging"])

        if "llm" in data:
            config_data["llm"] = LLMConfig(**data["llm"])

        if "turn_store" in data:
            config_data["turn_store"] = TurnStoreConfig(**data["turn_store"])

        return cls(**config_data)

    @classmethod
    def load(
        cls,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = None,
    ) -> "AppConfig":
        """Load configuration with YAML as base and environment overrides.

        Environment variables take precedence over YAML settings.

        Args:
            yaml_path: Optional path to YAML configuration file
            env_file: Optional path to .env file

        Returns:
            AppConfig instance with merged configuration
        """
        if yaml_path:
            config = cls.from_yaml(yaml_path)
        else:
            config = cls()

        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "AppConfig") -> "AppConfig":
        """Apply environment variable overrides to existing config."""
        data = config.model_dump(mode="json")

        # App settings
        if os.getenv("APP_ENV"):
            data["app"]["env"] = os.getenv("APP_ENV")
        if os.getenv("APP_DEBUG"):
            data["app"]["debug"] = os.getenv("APP_DEBUG", "").lower() == "true"
        if os.getenv("APP_HOST"):
            data["app"]["host"] = os.getenv("APP_HOST")
        if os.getenv("APP_PORT"):
            data["app"]["port"] = int(os.getenv("APP_PORT", "8000"))

        # Logging
        if os.getenv("LOG_LEVEL"):
            data["logging"]["level"] = os.getenv("LOG_LEVEL", "INFO")
        if os.getenv("LOG_FORMAT"):
            data["logging"]["format"] = os.getenv("LOG_FORMAT", "json")

        # LLM defaults
        llm = data["llm"]
        if os.getenv("LLM_ENABLED"):
            llm["enabled"] = os.getenv("LLM_ENABLED", "").lower() == "true"
        if os.getenv("LLM_DEFAULT_PROVIDER"):
            llm["default_provider"] = os.getenv("LLM_DEFAULT_PROVIDER")
        if os.getenv("LLM_DEFAULT_MODEL"):
            llm["default_model"] = os.getenv("LLM_DEFAULT_MODEL")
        if os.getenv("LLM_TIMEOUT"):
            llm["timeout"] = float(os.getenv("LLM_TIMEOUT", "30"))
        if os.getenv("LLM_MAX_TOKENS"):
            llm["max_tokens"] = int(os.getenv("LLM_MAX_TOKENS", "1000"))
        if os.getenv("LLM_TEMPERATURE"):
            llm["temperature"] = float(os.getenv("LLM_TEMPERATURE", "0.7"))

        # Backends
        if os.getenv("OLLAMA_BASE_URL"):
            llm["ollama"]["base_url"] = os.getenv("OLLAMA_BASE_URL")
        if os.getenv("OLLAMA_MODELS"):
            llm["ollama"]["models"] = _split_list(os.getenv("OLLAMA_MODELS", ""))
        if os.getenv("VLLM_BASE_URL"):
            llm["vllm"]["base_url"] = os.getenv("VLLM_BASE_URL")
        if os.getenv("VLLM_MODELS"):
            llm["vllm"]["models"] = _split_list(os.getenv("VLLM_MODELS", ""))
        if os.getenv("VLLM_API_KEY"):
            llm["vllm"]["api_key"] = os.getenv("VLLM_API_KEY")
        if os.getenv("ANTHROPIC_API_KEY"):
            llm["anthropic"]["api_key"] = os.getenv("ANTHROPIC_API_KEY")
        if os.getenv("OPENAI_API_KEY"):
            llm["openai"]["api_key"] = os.getenv("OPENAI_API_KEY")
        if os.getenv("OPENAI_BASE_URL"):
            llm["openai"]["base_url"] = os.getenv("OPENAI_BASE_URL")

        # Turn store
        if os.getenv("TURN_STORE_ENABLED"):
            data["turn_store"]["enabled"] = (
                os.getenv("TURN_STORE_ENABLED", "").lower() == "true"
            )
        if os.getenv("TURN_STORE_MAX_TURNS"):
            data["turn_store"]["max_turns_per_session"] = int(
                os.getenv("TURN_STORE_MAX_TURNS", "50")
            )

        return cls._from_yaml_dict(data)


# Global configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance.

    Returns:
        The global AppConfig instance

    Raises:
        RuntimeError: If configuration has not been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call init_config() first.")
    return _config


def init_config(
    yaml_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> AppConfig:
    """Initialize the global configuration.

    Args:
        yaml_path: Optional path to YAML configuration file
        env_file: Optional path to .env file

    Returns:
        The initialized AppConfig instance
    """
    global _config
    _config = AppConfig.load(yaml_path=yaml_path, env_file=env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
