"""Utility modules for the virtual advisor.

This package provides utility functions and classes for:
- Configuration management
- Structured logging
- Exception handling
"""

from .config import (
    AgentLLMOverride,
    AnthropicConfig,
    AppConfig,
    AppSettings,
    Environment,
    LLMConfig,
    LogFormat,
    LoggingConfig,
    OllamaConfig,
    OpenAIConfig,
    TurnStoreConfig,
    VLLMConfig,
    get_config,
    init_config,
    reset_config,
)
from .error_handlers import (
    create_error_response,
    register_error_handlers,
)
from .exceptions import (
    AdvisorError,
    AgentAlreadyExistsError,
    APIError,
    ClassificationError,
    ConfigurationError,
    EmergencyError,
    ExternalServiceError,
    InvalidConfigurationError,
    NotFoundError,
    ProviderError,
    ProviderTimeoutError,
    RoutingError,
    ServiceUnavailableError,
    TemplateLoadError,
    ToolError,
)
from .logging import (
    LoggerAdapter,
    clear_correlation_id,
    get_agent_logger,
    get_api_logger,
    get_correlation_id,
    get_logger,
    get_provider_logger,
    set_correlation_id,
    setup_logging,
)

__all__ = [
    # Config
    "AppConfig",
    "AppSettings",
    "LoggingConfig",
    "LLMConfig",
    "OllamaConfig",
    "VLLMConfig",
    "AnthropicConfig",
    "OpenAIConfig",
    "AgentLLMOverride",
    "TurnStoreConfig",
    "Environment",
    "LogFormat",
    "get_config",
    "init_config",
    "reset_config",
    # Logging
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "get_agent_logger",
    "get_provider_logger",
    "get_api_logger",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    # Error Handlers
    "register_error_handlers",
    "create_error_response",
    # Exceptions
    "AdvisorError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "AgentAlreadyExistsError",
    "RoutingError",
    "TemplateLoadError",
    "APIError",
    "NotFoundError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "ProviderError",
    "ProviderTimeoutError",
    "ClassificationError",
    "EmergencyError",
    "ToolError",
]
