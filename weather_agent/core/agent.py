"""
Weather Agent - tool-calling conversation loop
Drives send -> dispatch -> resend until the model answers in prose
"""

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
from dataclasses import dataclass

from ..config import BEHAVIOR_INSTRUCTION, GREETING, Settings, get_settings
from .conversation import ConversationStore, Message, Role
from .errors import ConfigurationError
from .function_registry import FunctionRegistry, get_registry
from .gateway import ModelGateway, PendingCalls, ToolResult

if TYPE_CHECKING:
    from ..tools.navigation_tools import Navigator, ToolDispatcher


logger = logging.getLogger(__name__)


APOLOGY_TEXT = "Sorry, I encountered an error. Please try again."
ROUND_LIMIT_TEXT = "I couldn't complete that request. Please try a simpler request."
CANCELLED_TEXT = "Request cancelled."
EMPTY_ANSWER_TEXT = "I've processed your request."


class AgentState(Enum):
    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING = "dispatching"


class ResponseStatus(str, Enum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"
    ROUND_LIMIT = "round_limit"
    CANCELLED = "cancelled"


@dataclass
class AgentResponse:
    """Outcome of one submission"""
    status: ResponseStatus
    content: str = ""
    tool_calls_made: int = 0
    rounds: int = 0
    duration_seconds: float = 0


class ConversationSession:
    """
    One user-visible conversation: its messages, its model handle and
    its busy flag. A session without a gateway is inert.
    """

    def __init__(self, gateway: Optional[ModelGateway], greeting: Optional[str] = None):
        self.store = ConversationStore()
        self.gateway = gateway
        self.cancel_requested = False
        self._busy = False
        self._busy_listeners: List[Callable[[bool], None]] = []

        if greeting:
            self.store.append(Message(role=Role.AGENT, text=greeting))

    @property
    def available(self) -> bool:
        return self.gateway is not None

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        if busy == self._busy:
            return
        self._busy = busy
        for listener in list(self._busy_listeners):
            try:
                listener(busy)
            except Exception:
                logger.exception("Busy listener %r failed", listener)

    def subscribe_busy(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        """Register a busy/idle listener; returns a callable that removes it"""
        self._busy_listeners.append(listener)

        def unsubscribe():
            if listener in self._busy_listeners:
                self._busy_listeners.remove(listener)

        return unsubscribe


class AgentLoop:
    """
    Loop controller for a single conversation session.

    Only one turn runs at a time. Every turn ends with exactly one agent
    message, and the busy flag is released on every exit path.
    """

    def __init__(
        self,
        session: ConversationSession,
        dispatcher: "ToolDispatcher",
        max_rounds: Optional[int] = None,
    ):
        self.session = session
        self.dispatcher = dispatcher
        self.max_rounds = max_rounds or get_settings().max_rounds
        self.state = AgentState.IDLE

        # Stats
        self.total_turns = 0
        self.total_rounds = 0
        self.total_tool_calls = 0

    async def submit(self, text: str) -> AgentResponse:
        """
        Process a user message and return the outcome.

        Args:
            text: The user's input

        Returns:
            AgentResponse describing how the turn ended
        """
        session = self.session

        if not session.available:
            logger.warning("Agent is not configured; ignoring submission")
            return AgentResponse(status=ResponseStatus.REJECTED)

        if session.busy or not text or not text.strip():
            return AgentResponse(status=ResponseStatus.REJECTED)

        start_time = time.time()
        gateway = session.gateway
        rounds = 0
        tool_calls_made = 0

        session.store.append(Message(role=Role.USER, text=text))
        session.cancel_requested = False
        session.set_busy(True)
        self.total_turns += 1

        try:
            self.state = AgentState.AWAITING_MODEL
            result = await gateway.send_user_text(text)
            rounds += 1

            while isinstance(result, PendingCalls):
                if session.cancel_requested:
                    gateway.discard_turn()
                    return self._finish(
                        ResponseStatus.CANCELLED, CANCELLED_TEXT,
                        tool_calls_made, rounds, start_time,
                    )

                if rounds >= self.max_rounds:
                    logger.warning("Model still requesting tools after %d rounds", rounds)
                    gateway.discard_turn()
                    return self._finish(
                        ResponseStatus.ROUND_LIMIT, ROUND_LIMIT_TEXT,
                        tool_calls_made, rounds, start_time,
                    )

                self.state = AgentState.DISPATCHING
                results = [
                    ToolResult(
                        id=call.id,
                        name=call.name,
                        result_text=self.dispatcher.execute(call.name, call.arguments),
                    )
                    for call in result.calls
                ]
                tool_calls_made += len(results)

                self.state = AgentState.AWAITING_MODEL
                result = await gateway.send_tool_results(results)
                rounds += 1

            return self._finish(
                ResponseStatus.COMPLETED, result.text or EMPTY_ANSWER_TEXT,
                tool_calls_made, rounds, start_time,
            )

        except Exception:
            logger.exception("Agent turn failed after %d round(s)", rounds)
            gateway.discard_turn()
            return self._finish(
                ResponseStatus.FAILED, APOLOGY_TEXT,
                tool_calls_made, rounds, start_time,
            )

        finally:
            self.state = AgentState.IDLE
            session.cancel_requested = False
            session.set_busy(False)

    def cancel(self) -> bool:
        """Ask the running turn to stop before it dispatches any more tool calls"""
        if not self.session.busy:
            return False
        self.session.cancel_requested = True
        return True

    def _finish(
        self,
        status: ResponseStatus,
        content: str,
        tool_calls_made: int,
        rounds: int,
        start_time: float,
    ) -> AgentResponse:
        self.session.store.append(Message(role=Role.AGENT, text=content))

        self.total_rounds += rounds
        self.total_tool_calls += tool_calls_made

        return AgentResponse(
            status=status,
            content=content,
            tool_calls_made=tool_calls_made,
            rounds=rounds,
            duration_seconds=time.time() - start_time,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get agent statistics"""
        gateway = self.session.gateway

        return {
            "model": gateway.model if gateway else None,
            "available": self.session.available,
            "max_rounds": self.max_rounds,
            "total_turns": self.total_turns,
            "total_rounds": self.total_rounds,
            "total_tool_calls": self.total_tool_calls,
            "tokens_used": gateway.tokens_used if gateway else 0,
            "conversation": self.session.store.get_stats(),
        }


def create_agent(
    navigator: "Navigator",
    settings: Optional[Settings] = None,
    client: Any = None,
    registry: Optional[FunctionRegistry] = None,
    greeting: Optional[str] = GREETING,
) -> AgentLoop:
    """
    Build a session, its gateway and its dispatcher.

    A missing or unusable model configuration yields an inert agent that
    rejects every submission instead of raising.
    """
    from ..tools.navigation_tools import ToolDispatcher

    settings = settings or get_settings()
    registry = registry or get_registry()

    try:
        gateway: Optional[ModelGateway] = ModelGateway(
            tools=registry.describe(),
            behavior_instruction=BEHAVIOR_INSTRUCTION,
            settings=settings,
            client=client,
        )
    except ConfigurationError as e:
        logger.warning("Weather agent disabled: %s", e)
        gateway = None

    session = ConversationSession(gateway, greeting=greeting)
    dispatcher = ToolDispatcher(navigator, registry=registry)
    return AgentLoop(session, dispatcher, max_rounds=settings.max_rounds)
