"""Core modules: routing, orchestration, response control and turn storage."""

from advisor.core.orchestrator import Orchestrator
from advisor.core.response_controller import (
    Complexity,
    ControlledResponse,
    MessageType,
    ResponseContext,
    ResponseController,
    ResponseLimits,
    UserIntent,
)
from advisor.core.router import AgentRouter
from advisor.core.turn_store import TurnRecord, TurnStore

__all__ = [
    "AgentRouter",
    "Complexity",
    "ControlledResponse",
    "MessageType",
    "Orchestrator",
    "ResponseContext",
    "ResponseController",
    "ResponseLimits",
    "TurnRecord",
    "TurnStore",
    "UserIntent",
]
