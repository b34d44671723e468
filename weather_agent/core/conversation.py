"""
Conversation Store
Ordered, append-only message history shown to the user
"""

import logging
import time
import uuid
from enum import Enum
from typing import Callable, List, Tuple
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Who authored a message"""
    USER = "user"
    AGENT = "agent"


@dataclass(frozen=True)
class Message:
    """Represents a conversation message"""
    role: Role
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self):
        return {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp,
        }


MessageListener = Callable[[Tuple[Message, ...]], None]


class ConversationStore:
    """
    Append-only message history for one conversation.

    Listeners registered with ``subscribe`` are called with a fresh
    snapshot after every append. A listener that raises is logged and
    skipped; the message stays stored. The store does no rendering itself.
    """

    def __init__(self):
        self._messages: List[Message] = []
        self._listeners: List[MessageListener] = []

    def append(self, message: Message) -> None:
        """Add a message to the tail of the history"""
        self._messages.append(message)
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Conversation listener %r failed", listener)

    def snapshot(self) -> Tuple[Message, ...]:
        """Get the messages in display order"""
        return tuple(self._messages)

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._messages)

    def get_stats(self):
        """Get conversation statistics"""
        user_messages = sum(1 for m in self._messages if m.role is Role.USER)
        agent_messages = sum(1 for m in self._messages if m.role is Role.AGENT)

        return {
            "total_messages": len(self._messages),
            "user_messages": user_messages,
            "agent_messages": agent_messages,
            "total_characters": sum(len(m.text) for m in self._messages),
        }
