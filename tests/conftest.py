"""
Shared fixtures: fake OpenAI responses, a scripted gateway and a recording navigator.
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_agent.config import Settings
from weather_agent.core.agent import AgentLoop, ConversationSession
from weather_agent.core.gateway import PendingCalls, ToolCall
from weather_agent.tools.navigation_tools import InMemoryNavigator, ToolDispatcher


def make_completion(content=None, tool_calls=None, total_tokens=12):
    """Build an object shaped like an OpenAI chat completion."""
    calls = None
    if tool_calls:
        calls = [
            SimpleNamespace(
                id=call_id,
                type="function",
                function=SimpleNamespace(
                    name=name,
                    arguments=args if isinstance(args, str) else json.dumps(args),
                ),
            )
            for call_id, name, args in tool_calls
        ]
    message = SimpleNamespace(content=content, tool_calls=calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


def make_client(*responses):
    """A fake AsyncOpenAI client returning (or raising) the given items in order."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(responses))
    return client


def calls(*items):
    return PendingCalls(calls=tuple(ToolCall(id=i, name=n, arguments=a) for i, n, a in items))


class ScriptedGateway:
    """Gateway stand-in that replays a script of round results or exceptions."""

    model = "scripted"

    def __init__(self, *script):
        self.script = list(script)
        self.user_texts = []
        self.sent_results = []
        self.discarded = 0
        self.tokens_used = 0
        self.release = None

    async def _next(self):
        if self.release is not None:
            await self.release.wait()
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def send_user_text(self, text):
        self.user_texts.append(text)
        return await self._next()

    async def send_tool_results(self, results):
        self.sent_results.append(list(results))
        return await self._next()

    def discard_turn(self):
        self.discarded += 1


@pytest.fixture
def settings():
    return Settings(OPENAI_API_KEY="test-key", OPENAI_MODEL="test-model", MAX_ROUNDS=8)


@pytest.fixture
def navigator():
    return InMemoryNavigator()


@pytest.fixture
def dispatcher(navigator):
    return ToolDispatcher(navigator)


@pytest.fixture
def make_agent(dispatcher):
    def _make(*script, max_rounds=8):
        gateway = ScriptedGateway(*script)
        session = ConversationSession(gateway)
        return AgentLoop(session, dispatcher, max_rounds=max_rounds), gateway
    return _make

