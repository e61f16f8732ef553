"""Custom exception classes for the virtual advisor.

This module provides a unified exception hierarchy for the application.
Provider, routing and classification failures all derive from AdvisorError
so the API layer can render them with a single envelope.
"""

from typing import Any


class AdvisorError(Exception):
    """Base exception for all advisor errors.

    All custom exceptions in this system should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            cause: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(AdvisorError):
    """Raised when there's a configuration error."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, config_key: str, value: Any, message: str | None = None):
        self.config_key = config_key
        self.value = value
        msg = message or f"Invalid configuration value for {config_key}: {value}"
        super().__init__(msg, details={"config_key": config_key, "value": str(value)})


class AgentAlreadyExistsError(ConfigurationError):
    """Raised when trying to register an agent id twice."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(
            f"Agent already exists: {agent_id}", details={"agent_id": agent_id}
        )


class RoutingError(ConfigurationError):
    """Raised when no agent can be resolved for a message.

    Only reachable when the router is empty, which is a startup
    misconfiguration rather than a per-message failure.
    """

    pass


class TemplateLoadError(ConfigurationError):
    """Raised when an agent's fallback template file is missing or invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        details = {"path": path} if path else None
        super().__init__(
            f"{message}" + (f" (path: {path})" if path else ""), details=details
        )


# ============================================================================
# API Errors
# ============================================================================


class APIError(AdvisorError):
    """Base class for API-related errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, details, cause)
        self.status_code = status_code


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        msg = message or f"{resource_type} not found: {resource_id}"
        super().__init__(
            msg,
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ServiceUnavailableError(APIError):
    """Raised when a service is unavailable (503)."""

    def __init__(
        self,
        service_name: str,
        message: str | None = None,
    ):
        msg = message or f"Service unavailable: {service_name}"
        super().__init__(msg, status_code=503, details={"service": service_name})
        self.service_name = service_name


# ============================================================================
# LLM/External Service Errors
# ============================================================================


class ExternalServiceError(AdvisorError):
    """Base class for external service errors."""

    pass


class ProviderError(ExternalServiceError):
    """Raised for any failure talking to an LLM backend.

    Network errors, non-2xx statuses and malformed replies all collapse
    into this one shape so callers have a single failure to branch on.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        model: str | None = None,
        cause: Exception | None = None,
    ):
        details: dict[str, Any] = {"provider": provider}
        if status_code is not None:
            details["status_code"] = status_code
        if model:
            details["model"] = model
        super().__init__(message, details=details, cause=cause)
        self.provider = provider
        self.status_code = status_code
        self.model = model


class ProviderTimeoutError(ProviderError):
    """Raised when an LLM backend does not answer within the timeout."""

    def __init__(
        self,
        timeout_seconds: float,
        provider: str,
        model: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            f"LLM provider call timed out after {timeout_seconds}s",
            provider=provider,
            model=model,
            cause=cause,
        )
        self.timeout_seconds = timeout_seconds
        self.details["timeout_seconds"] = timeout_seconds


# ============================================================================
# Pipeline Errors
# ============================================================================


class ClassificationError(AdvisorError):
    """Raised when message context cannot be classified (malformed input)."""

    pass


class EmergencyError(AdvisorError):
    """Wraps an unexpected failure inside the response pipeline.

    Never escapes an agent: it is converted into the fixed emergency reply.
    """

    def __init__(self, agent_id: str, cause: Exception):
        self.agent_id = agent_id
        super().__init__(
            f"Agent {agent_id} failed unexpectedly: {cause}",
            details={"agent_id": agent_id},
            cause=cause,
        )


class ToolError(AdvisorError):
    """Raised when a tool is unknown or its execution fails."""

    def __init__(self, tool_id: str, message: str, cause: Exception | None = None):
        self.tool_id = tool_id
        super().__init__(message, details={"tool_id": tool_id}, cause=cause)
