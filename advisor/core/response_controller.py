"""Response Controller - context classification and answer shaping.

Classification is a deterministic rules engine: the same (message, history)
pair always yields the same ResponseContext. Shaping bounds the answer to the
classified type so short questions never receive a wall of template text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from advisor.models import Attachment, AttachmentType, ConversationTurn, QuickAction, TurnRole
from advisor.utils.exceptions import ClassificationError
from advisor.utils.text import contains_any, normalize, slugify, word_count


class MessageType(str, Enum):
    """Classified shape of an incoming message."""

    GREETING = "greeting"
    ABOUT = "about"
    SIMPLE_QUESTION = "simple_question"
    FOLLOW_UP = "follow_up"
    RESEARCH_REQUEST = "research_request"


class Complexity(str, Enum):
    """How much content the answer should carry."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    DEEP = "deep"


class UserIntent(str, Enum):
    """Coarse user goal used to rank attachments."""

    INFORMATION = "information"
    ACTION = "action"
    SUPPORT = "support"
    INVESTMENT = "investment"
    RESEARCH = "research"


@dataclass(frozen=True)
class ResponseContext:
    """Classification result for one turn."""

    message_type: MessageType
    complexity: Complexity
    user_intent: UserIntent = UserIntent.INFORMATION
    conversation_length: int = 0
    previous_topics: tuple[str, ...] = ()
    word_count: int = 0

    @classmethod
    def conservative(cls) -> "ResponseContext":
        """Context used when the inputs cannot be classified."""
        return cls(
            message_type=MessageType.SIMPLE_QUESTION,
            complexity=Complexity.MINIMAL,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_type": self.message_type.value,
            "complexity": self.complexity.value,
            "user_intent": self.user_intent.value,
            "conversation_length": self.conversation_length,
            "previous_topics": list(self.previous_topics),
        }


@dataclass(frozen=True)
class ResponseLimits:
    """Size contract for one message type."""

    max_chars: int
    max_attachments: int


@dataclass
class ControlledResponse:
    """Shaped answer ready to be wrapped in an AgentMessage."""

    content: str
    attachments: list[Attachment] = field(default_factory=list)
    quick_actions: list[QuickAction] = field(default_factory=list)
    truncated: bool = False


MORE_DETAILS_PROMPT = "Would you like more details on any specific aspect?"

GREETING_WORDS = (
    "hello", "hi", "hey", "greetings", "howdy",
    "good morning", "good afternoon", "good evening",
)
ABOUT_INDICATORS = (
    "about", "what is", "tell me about", "who are", "who is",
    "company", "what do you do", "your team",
)
RESEARCH_INDICATORS = (
    "analysis", "analyze", "research", "detailed", "comprehensive",
    "market sizing", "competitive landscape", "investment thesis",
    "due diligence", "strategy", "trends", "report", "deep dive",
)
FOLLOW_UP_INDICATORS = (
    "more about", "tell me more", "elaborate", "details", "explain further",
    "go on", "what else", "expand on",
)
TOPIC_WORDS = (
    "investment", "research", "funding", "portfolio", "analysis",
    "market", "valuation", "legal", "marketing",
)

# Stems matched as word prefixes, checked in order
INTENT_RULES: tuple[tuple[UserIntent, tuple[str, ...]], ...] = (
    (UserIntent.INVESTMENT, ("invest", "funding", "capital", "valuation", "fundrais")),
    (UserIntent.RESEARCH, ("research", "analys", "market")),
    (UserIntent.SUPPORT, ("help", "support", "problem", "issue")),
    (UserIntent.ACTION, ("apply", "contact", "schedule", "book")),
)

DEEP_WORD_THRESHOLD = 15
COLD_START_SHORT_CHARS = 20

_LIST_ITEM = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$", re.MULTILINE)
_MARKDOWN = re.compile(r"[*_`#]+")
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")
_CLAUSE_END = re.compile(r"[,;:](?=\s|$)")


class ResponseController:
    """Classifies turns and shapes answers.

    Stateless; all methods are pure functions of their arguments.
    """

    RESPONSE_LIMITS: dict[MessageType, ResponseLimits] = {
        MessageType.GREETING: ResponseLimits(max_chars=150, max_attachments=1),
        MessageType.ABOUT: ResponseLimits(max_chars=300, max_attachments=3),
        MessageType.SIMPLE_QUESTION: ResponseLimits(max_chars=200, max_attachments=2),
        MessageType.FOLLOW_UP: ResponseLimits(max_chars=250, max_attachments=2),
        MessageType.RESEARCH_REQUEST: ResponseLimits(max_chars=600, max_attachments=4),
    }
    DEEP_MAX_ATTACHMENTS = 4
    MAX_QUICK_ACTIONS = 3

    CONTEXTUAL_ACTIONS: dict[MessageType, tuple[QuickAction, ...]] = {
        MessageType.ABOUT: (
            QuickAction(label="View Portfolio", action="portfolio"),
            QuickAction(label="Our Services", action="services"),
            QuickAction(label="Contact Us", action="contact"),
        ),
        MessageType.SIMPLE_QUESTION: (
            QuickAction(label="Tell me more", action="more_details"),
            QuickAction(label="How can I get started?", action="get_started"),
        ),
    }

    # =========================================================================
    # Classification
    # =========================================================================

    @classmethod
    def analyze_message_context(
        cls,
        message: str,
        history: Sequence[ConversationTurn | dict[str, Any]] | None = None,
    ) -> ResponseContext:
        """Classify a message using the conversation history.

        Args:
            message: The incoming user message.
            history: Prior turns, oldest first. None is treated as empty.

        Returns:
            The ResponseContext for this turn.

        Raises:
            ClassificationError: If the message is not a string or a history
                entry lacks a role/content pair.
        """
        if not isinstance(message, str):
            raise ClassificationError(
                "Message must be a string",
                details={"type": type(message).__name__},
            )

        turns = cls._coerce_history(history)
        text = normalize(message)
        words = word_count(text)
        previous_topics = cls.extract_previous_topics(turns)
        conversation_length = len(turns)

        if conversation_length == 0:
            # Cold start: only greeting or about
            if cls.is_greeting(text) or len(text) < COLD_START_SHORT_CHARS:
                message_type = MessageType.GREETING
            else:
                message_type = MessageType.ABOUT
        elif cls.is_research_request(text, words):
            message_type = MessageType.RESEARCH_REQUEST
        elif cls.is_follow_up(text, previous_topics):
            message_type = MessageType.FOLLOW_UP
        elif cls.is_greeting(text):
            message_type = MessageType.GREETING
        elif cls.is_about_query(text):
            message_type = MessageType.ABOUT
        else:
            message_type = MessageType.SIMPLE_QUESTION

        if message_type == MessageType.GREETING:
            complexity = Complexity.MINIMAL
        elif cls.is_research_request(text, words):
            complexity = Complexity.DEEP
        else:
            complexity = Complexity.STANDARD

        return ResponseContext(
            message_type=message_type,
            complexity=complexity,
            user_intent=cls.detect_user_intent(text),
            conversation_length=conversation_length,
            previous_topics=previous_topics,
            word_count=words,
        )

    @staticmethod
    def _coerce_history(
        history: Sequence[ConversationTurn | dict[str, Any]] | None,
    ) -> list[tuple[str, str]]:
        if history is None:
            return []
        if isinstance(history, (str, bytes)) or not isinstance(history, Sequence):
            raise ClassificationError("History must be a sequence of turns")

        turns: list[tuple[str, str]] = []
        for index, turn in enumerate(history):
            if isinstance(turn, ConversationTurn):
                turns.append((turn.role.value, turn.content))
                continue
            if isinstance(turn, dict):
                role = turn.get("role", turn.get("sender"))
                content = turn.get("content")
                if isinstance(role, str) and isinstance(content, str):
                    turns.append((role, content))
                    continue
            raise ClassificationError(
                "Malformed history entry", details={"index": index}
            )
        return turns

    @staticmethod
    def is_greeting(text: str) -> bool:
        return contains_any(text, GREETING_WORDS)

    @staticmethod
    def is_about_query(text: str) -> bool:
        return contains_any(text, ABOUT_INDICATORS)

    @staticmethod
    def is_research_request(text: str, words: int) -> bool:
        return contains_any(text, RESEARCH_INDICATORS) or words > DEEP_WORD_THRESHOLD

    @staticmethod
    def is_follow_up(text: str, previous_topics: Sequence[str]) -> bool:
        return contains_any(text, FOLLOW_UP_INDICATORS) or contains_any(
            text, previous_topics
        )

    @staticmethod
    def detect_user_intent(text: str) -> UserIntent:
        for intent, stems in INTENT_RULES:
            if contains_any(text, stems, prefix=True):
                return intent
        return UserIntent.INFORMATION

    @staticmethod
    def extract_previous_topics(turns: Sequence[tuple[str, str]]) -> tuple[str, ...]:
        """Topic words mentioned in earlier user turns, in first-seen order."""
        topics: dict[str, None] = {}
        for role, content in turns:
            if role != TurnRole.USER.value:
                continue
            text = normalize(content)
            for topic in TOPIC_WORDS:
                if contains_any(text, (topic,)):
                    topics.setdefault(topic, None)
        return tuple(topics)

    # =========================================================================
    # Shaping
    # =========================================================================

    @classmethod
    def limits_for(cls, context: ResponseContext) -> tuple[int | None, int]:
        """Character and attachment limits for a context.

        Deep requests keep their full content.
        """
        limits = cls.RESPONSE_LIMITS[context.message_type]
        if context.complexity == Complexity.DEEP:
            return None, max(limits.max_attachments, cls.DEEP_MAX_ATTACHMENTS)
        return limits.max_chars, limits.max_attachments

    @classmethod
    def control_response(
        cls,
        text: str,
        context: ResponseContext,
        attachments: Sequence[Attachment] | None = None,
        quick_actions: Sequence[QuickAction] | None = None,
    ) -> ControlledResponse:
        """Bound an answer to its classified context.

        Args:
            text: Candidate answer.
            context: Classification for this turn.
            attachments: Candidate attachments.
            quick_actions: Quick actions supplied by the agent, kept first.

        Returns:
            ControlledResponse with truncated content, selected attachments
            and quick actions.
        """
        max_chars, max_attachments = cls.limits_for(context)

        content = text.strip()
        truncated = False
        if max_chars is not None and len(content) > max_chars:
            content = f"{cls.intelligent_truncate(content, max_chars)}\n\n{MORE_DETAILS_PROMPT}"
            truncated = True

        return ControlledResponse(
            content=content,
            attachments=cls.filter_attachments(attachments or [], max_attachments, context),
            quick_actions=cls.generate_quick_actions(text, context, quick_actions or []),
            truncated=truncated,
        )

    @staticmethod
    def intelligent_truncate(content: str, max_chars: int) -> str:
        """Cut at a sentence boundary, else at the last whole clause or word.

        A word-boundary cut that leaves a trailing partial clause is shortened
        to the last comma, semicolon or colon and closed with a period.
        """
        if len(content) <= max_chars:
            return content

        truncated = ""
        for sentence in _SENTENCE_END.split(content):
            candidate = f"{truncated} {sentence}".strip() if truncated else sentence
            if len(candidate) > max_chars:
                break
            truncated = candidate

        if len(truncated) < max_chars * 0.5:
            truncated = ""
            for word in content.split():
                candidate = f"{truncated} {word}" if truncated else word
                if len(candidate) > max_chars:
                    break
                truncated = candidate

            clause_ends = [m.start() for m in _CLAUSE_END.finditer(truncated)]
            if clause_ends and clause_ends[-1] >= max_chars * 0.5:
                truncated = truncated[: clause_ends[-1]].rstrip() + "."

        if not truncated:
            truncated = content[:max_chars]

        return truncated.rstrip()

    @classmethod
    def filter_attachments(
        cls,
        attachments: Sequence[Attachment],
        max_attachments: int,
        context: ResponseContext,
    ) -> list[Attachment]:
        """Keep at most ``max_attachments``, most relevant first."""
        if len(attachments) <= max_attachments:
            return list(attachments)
        # sorted() is stable, so equal scores keep their authored order
        ranked = sorted(
            attachments,
            key=lambda a: cls.attachment_score(a, context),
            reverse=True,
        )
        return ranked[:max_attachments]

    @staticmethod
    def attachment_score(attachment: Attachment, context: ResponseContext) -> int:
        title = attachment.title.lower()
        score = 0
        if context.user_intent == UserIntent.INVESTMENT and (
            "invest" in title or "funding" in title
        ):
            score += 10
        if context.user_intent == UserIntent.ACTION and (
            "apply" in title or "contact" in title
        ):
            score += 10
        if context.user_intent == UserIntent.RESEARCH and (
            "research" in title or "market" in title or "report" in title
        ):
            score += 10
        if attachment.type in (AttachmentType.CHECKLIST, AttachmentType.CALCULATOR):
            score += 5
        return score

    @classmethod
    def generate_quick_actions(
        cls,
        text: str,
        context: ResponseContext,
        existing: Sequence[QuickAction],
    ) -> list[QuickAction]:
        """Derive quick actions from list items in the content.

        Minimal contexts get none. Contexts whose content has no list fall
        back to per-type defaults.
        """
        if context.complexity == Complexity.MINIMAL:
            return []

        actions: dict[str, QuickAction] = {}
        for action in existing:
            actions.setdefault(action.action, action)

        for match in _LIST_ITEM.finditer(text):
            label = _MARKDOWN.sub("", match.group(1)).split(":")[0].strip()
            if not label or len(label) > 60:
                continue
            if len(label) > 40:
                label = label[:37].rstrip() + "..."
            action_id = slugify(label)
            if action_id:
                actions.setdefault(
                    action_id, QuickAction(label=label, action=action_id)
                )
            if len(actions) >= cls.MAX_QUICK_ACTIONS:
                break

        if not actions:
            for action in cls.CONTEXTUAL_ACTIONS.get(context.message_type, ()):
                actions.setdefault(action.action, action)

        return list(actions.values())[: cls.MAX_QUICK_ACTIONS]
