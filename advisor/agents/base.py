"""Base Agent - Abstract base class for all advisor agents.

Every agent answers through the same pipeline: classify the turn, try the
LLM, substitute a template when the LLM cannot answer, shape the result and
wrap it in an immutable AgentMessage. ``process`` never raises.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from advisor.agents.templates import AgentTemplates, IntentTemplate, get_template_loader
from advisor.core.response_controller import ResponseContext, ResponseController
from advisor.llm.base import LLMResponse
from advisor.llm.registry import CompletionResult, ProviderRegistry
from advisor.models import (
    AgentCapabilities,
    AgentContext,
    AgentInfo,
    AgentMessage,
    AgentResponse,
    LLMSettings,
)
from advisor.tools import ToolRegistry, find_tool_call
from advisor.utils.exceptions import (
    ClassificationError,
    EmergencyError,
    ProviderError,
    ToolError,
)
from advisor.utils.logging import get_agent_logger
from advisor.utils.text import normalize

EMERGENCY_MESSAGE = (
    "I'm having trouble answering right now. Please try again in a moment, "
    "or reach out to our team through the contact page."
)
EMERGENCY_CONFIDENCE = 0.7

INPUT_TOO_LONG_MESSAGE = (
    "Your message is longer than I can handle in one go. Could you summarize "
    "your question in under {limit} characters?"
)
INPUT_NOT_TEXT_MESSAGE = "I can only read text messages. Could you type your question?"

# Confidence rules for LLM answers and template fallbacks
LLM_MIN_CONFIDENCE = 0.7
LLM_MAX_CONFIDENCE = 1.0
LONG_ANSWER_CHARS = 500
LONG_ANSWER_BONUS = 0.05
CUT_OFF_PENALTY = 0.05
FALLBACK_PENALTY = 0.1
FALLBACK_MIN_CONFIDENCE = 0.6

SIMPLE_QUERY_PREFIXES = ("about", "what is", "tell me about")
SIMPLE_QUERY_MIN_CHARS = 50


def is_simple_query(message: str, min_chars: int = SIMPLE_QUERY_MIN_CHARS) -> bool:
    """Short or introductory questions that specialists leave to the general agent."""
    text = normalize(message)
    return len(text) < min_chars or text.startswith(SIMPLE_QUERY_PREFIXES)


RESPONSE_GUIDANCE: dict[str, str] = {
    "greeting": "Reply with one or two friendly sentences.",
    "about": "Answer in a short paragraph.",
    "simple_question": "Answer directly in two or three sentences.",
    "follow_up": "Build on the previous answer in a short paragraph.",
    "research_request": "Give a structured, detailed answer with bullet points.",
}


class BaseAgent(ABC):
    """Abstract base class for all agents.

    Subclasses declare ``capabilities`` and ``system_prompt`` and implement
    ``can_handle``. Everything else is shared.

    Attributes:
        capabilities: Static descriptor used for routing and listings.
        system_prompt: Role prompt sent with every LLM request.
        is_default: True for the catch-all agent.
    """

    capabilities: ClassVar[AgentCapabilities]
    system_prompt: ClassVar[str] = ""
    is_default: ClassVar[bool] = False

    MAX_MESSAGE_LENGTH = 2000
    HISTORY_LIMIT = 6

    def __init__(
        self,
        providers: ProviderRegistry | None = None,
        tools: ToolRegistry | None = None,
        llm_settings: LLMSettings | None = None,
        templates: AgentTemplates | None = None,
        controller: ResponseController | None = None,
        assistant_name: str = "the virtual advisor",
    ) -> None:
        """Initialize the agent.

        Args:
            providers: Registry used for LLM completions. None disables the LLM.
            tools: Registry of tools this agent may call.
            llm_settings: Resolved LLM preferences.
            templates: Fallback templates. Loaded from the packaged YAML when omitted.
            controller: Response controller (stateless).
            assistant_name: Name substituted into prompts and templates.

        Raises:
            TemplateLoadError: If the agent's template file is missing or invalid.
        """
        self._providers = providers
        self._tools = tools
        self._llm_settings = llm_settings or LLMSettings()
        self._templates = templates or get_template_loader().load(self.agent_id)
        self._controller = controller or ResponseController()
        self._assistant_name = assistant_name
        self.logger = get_agent_logger(self.agent_id, self.capabilities.name)

    @property
    def agent_id(self) -> str:
        return self.capabilities.id

    @property
    def priority(self) -> int:
        return self.capabilities.priority

    @property
    def llm_settings(self) -> LLMSettings:
        return self._llm_settings

    @property
    def templates(self) -> AgentTemplates:
        return self._templates

    @abstractmethod
    def can_handle(self, message: str) -> bool:
        """Routing predicate. Must be a pure function of the message."""
        pass

    def info(self) -> AgentInfo:
        return AgentInfo.from_capabilities(
            self.capabilities, self._llm_settings, is_default=self.is_default
        )

    def configure_llm(
        self,
        enabled: bool | None = None,
        preferred_provider: str | None = None,
        preferred_model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMSettings:
        """Update LLM preferences. Arguments left as None keep their value.

        Returns:
            The new settings.
        """
        update: dict[str, Any] = {
            key: value
            for key, value in {
                "enabled": enabled,
                "preferred_provider": preferred_provider,
                "preferred_model": preferred_model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }.items()
            if value is not None
        }
        self._llm_settings = LLMSettings.model_validate(
            {**self._llm_settings.model_dump(), **update}
        )
        self.logger.info("LLM settings updated", **update)
        return self._llm_settings

    def validate_input(self, message: Any) -> list[str]:
        """Check a message before processing.

        Returns:
            List of problems (empty if valid).
        """
        if not isinstance(message, str):
            return ["Message must be a string"]
        if len(message) > self.MAX_MESSAGE_LENGTH:
            return [f"Message exceeds {self.MAX_MESSAGE_LENGTH} characters"]
        return []

    # =========================================================================
    # Pipeline
    # =========================================================================

    async def process(
        self,
        message: str,
        context: AgentContext | None = None,
    ) -> AgentMessage:
        """Answer one message.

        Args:
            message: The user message.
            context: Per-message context. A fresh one is used when omitted.

        Returns:
            Exactly one AgentMessage. Unexpected failures produce the fixed
            emergency answer instead of an exception.
        """
        start = time.perf_counter()
        try:
            context = context or AgentContext()
            response_context = self.classify(message, context)

            problems = self.validate_input(message)
            if problems:
                self.logger.warning("Input rejected", problems=problems)
                response = self.invalid_input_response(message)
            else:
                response = await self.respond(message, context, response_context)

            return self.finalize(response, response_context, start, problems)

        except Exception as e:
            error = EmergencyError(self.agent_id, e)
            self.logger.exception("Agent pipeline failed", error=error.message)
            return self.emergency_message(error, start)

    def classify(self, message: Any, context: AgentContext) -> ResponseContext:
        """Classify the turn, falling back to the conservative context."""
        try:
            return self._controller.analyze_message_context(
                message, context.recent_history(self.HISTORY_LIMIT)
            )
        except ClassificationError as e:
            self.logger.warning("Classification failed", error=e.message)
            return ResponseContext.conservative()

    def should_use_llm(self, response_context: ResponseContext) -> bool:
        """Whether to try the LLM for this turn."""
        return self._llm_settings.enabled

    async def respond(
        self,
        message: str,
        context: AgentContext,
        response_context: ResponseContext,
    ) -> AgentResponse:
        """LLM answer first, template fallback second."""
        if not self.should_use_llm(response_context):
            return self.template_response(message)

        result = await self.generate_llm_response(message, context, response_context)
        if result.ok and result.response is not None and result.response.text.strip():
            return await self.llm_response(message, result.response, result.provider, result.model)

        error = result.error.message if result.error else "Empty completion"
        self.logger.warning(
            "LLM unavailable, using template fallback",
            error=error,
            attempts=result.attempts,
        )
        return self.fallback_response(message)

    async def generate_llm_response(
        self,
        message: str,
        context: AgentContext,
        response_context: ResponseContext,
    ) -> CompletionResult:
        """Request a completion for the message.

        Returns:
            CompletionResult carrying the response or the ProviderError.
        """
        if self._providers is None:
            return CompletionResult.failure(
                ProviderError("No LLM provider configured", provider="none"), []
            )

        return await self._providers.complete(
            messages=self.build_messages(message, context),
            system_prompt=self.build_system_prompt(response_context),
            preferred_provider=self._llm_settings.preferred_provider,
            preferred_model=self._llm_settings.preferred_model,
            max_tokens=self._llm_settings.max_tokens,
            temperature=self._llm_settings.temperature,
        )

    def build_system_prompt(self, response_context: ResponseContext) -> str:
        parts = [
            self.system_prompt.replace("{assistant_name}", self._assistant_name).strip(),
            RESPONSE_GUIDANCE[response_context.message_type.value],
        ]
        if self._tools is not None and self.capabilities.tools:
            tool_section = self._tools.describe(self.capabilities.tools)
            if tool_section:
                parts.append(tool_section)
        return "\n\n".join(part for part in parts if part)

    def build_messages(self, message: str, context: AgentContext) -> list[dict[str, str]]:
        """Recent history followed by the new user message."""
        messages = [
            {"role": turn.role.value, "content": turn.content}
            for turn in context.recent_history(self.HISTORY_LIMIT)
        ]
        messages.append({"role": "user", "content": message})
        return messages

    async def llm_response(
        self,
        message: str,
        response: LLMResponse,
        provider: str | None = None,
        model: str | None = None,
    ) -> AgentResponse:
        """Turn a successful completion into an AgentResponse."""
        intent, template = self.select_template(message)
        content, tools_used = await self.resolve_tool_call(response.text.strip())

        return AgentResponse(
            content=content,
            confidence=self.llm_confidence(template, response),
            attachments=list(template.attachments),
            quick_actions=list(template.quick_actions),
            intent=intent,
            tools_used=tools_used,
            model=model or response.model or None,
            provider=provider,
        )

    async def resolve_tool_call(self, text: str) -> tuple[str, list[str]]:
        """Execute the first tool marker in ``text`` and splice in its result.

        Only tools listed in the agent's capabilities are allowed. A failing
        tool is replaced by a short failure note.
        """
        call = find_tool_call(text)
        if call is None or self._tools is None:
            return text, []

        try:
            if call.tool_id not in self.capabilities.tools:
                raise ToolError(call.tool_id, f"Tool not available to {self.agent_id}")
            result = await self._tools.execute(call.tool_id, call.arguments())
            replacement = result.summary
        except ToolError as e:
            self.logger.warning("Tool call failed", tool_id=call.tool_id, error=e.message)
            replacement = f"(The {call.tool_id} tool could not run: {e.message})"

        return text.replace(call.marker, replacement, 1).strip(), [call.tool_id]

    def select_template(self, message: str) -> tuple[str, IntentTemplate]:
        return self._templates.select(message)

    def template_response(self, message: str) -> AgentResponse:
        """Answer from templates by design, at the template's own confidence."""
        intent, template = self.select_template(message)
        return self._from_template(intent, template, template.confidence, fallback=False)

    def fallback_response(self, message: str) -> AgentResponse:
        """Answer from templates because the LLM could not."""
        intent, template = self.select_template(message)
        return self._from_template(
            intent, template, self.fallback_confidence(template), fallback=True
        )

    def invalid_input_response(self, message: Any = None) -> AgentResponse:
        """Fixed reply for input that failed validation."""
        if isinstance(message, str):
            content = INPUT_TOO_LONG_MESSAGE.format(limit=self.MAX_MESSAGE_LENGTH)
        else:
            content = INPUT_NOT_TEXT_MESSAGE
        template = self._templates.general
        response = self._from_template(
            "general", template, self.fallback_confidence(template), fallback=True
        )
        return response.model_copy(
            update={
                "content": content,
                "quick_actions": [],
            }
        )

    def _from_template(
        self,
        intent: str,
        template: IntentTemplate,
        confidence: float,
        fallback: bool,
    ) -> AgentResponse:
        return AgentResponse(
            content=template.content.replace("{assistant_name}", self._assistant_name),
            confidence=confidence,
            attachments=list(template.attachments),
            quick_actions=list(template.quick_actions),
            fallback=fallback,
            intent=intent,
        )

    @staticmethod
    def llm_confidence(template: IntentTemplate, response: LLMResponse) -> float:
        """Confidence of an LLM answer, anchored on the intent's template."""
        confidence = template.confidence
        if len(response.text) > LONG_ANSWER_CHARS:
            confidence += LONG_ANSWER_BONUS
        if response.finish_reason == "length":
            confidence -= CUT_OFF_PENALTY
        return round(min(max(confidence, LLM_MIN_CONFIDENCE), LLM_MAX_CONFIDENCE), 3)

    @staticmethod
    def fallback_confidence(template: IntentTemplate) -> float:
        """Always strictly below the LLM confidence for the same intent."""
        return round(max(template.confidence - FALLBACK_PENALTY, FALLBACK_MIN_CONFIDENCE), 3)

    def finalize(
        self,
        response: AgentResponse,
        response_context: ResponseContext,
        start: float,
        problems: list[str] | None = None,
    ) -> AgentMessage:
        """Shape the response and wrap it as an AgentMessage."""
        controlled = self._controller.control_response(
            response.content,
            response_context,
            attachments=response.attachments,
            quick_actions=response.quick_actions,
        )

        metadata: dict[str, Any] = {
            "confidence": response.confidence,
            "fallback": response.fallback,
            "intent": response.intent,
            "truncated": controlled.truncated,
            "processing_time_ms": round((time.perf_counter() - start) * 1000, 2),
            **response_context.to_dict(),
        }
        if response.provider:
            metadata["provider"] = response.provider
            metadata["model"] = response.model
        if response.tools_used:
            metadata["tools_used"] = list(response.tools_used)
        if problems:
            metadata["validation_errors"] = list(problems)

        return AgentMessage(
            agent_id=self.agent_id,
            content=controlled.content,
            attachments=tuple(controlled.attachments),
            quick_actions=tuple(controlled.quick_actions),
            metadata=metadata,
        )

    def emergency_message(self, error: EmergencyError, start: float) -> AgentMessage:
        return AgentMessage(
            agent_id=self.agent_id,
            content=EMERGENCY_MESSAGE,
            metadata={
                "confidence": EMERGENCY_CONFIDENCE,
                "fallback": True,
                "emergency": True,
                "error": str(error.cause or error),
                "processing_time_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )

    async def health_check(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "name": self.capabilities.name,
            "llm_enabled": self._llm_settings.enabled,
            "intents": list(self._templates.intents),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.agent_id}, priority={self.priority})"

