"""
Model Gateway - OpenAI chat completions with function calling
Holds the remote transcript for one conversation session
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings
from .errors import ConfigurationError, ProtocolError, TransportError
from .function_registry import ToolDefinition


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model"""
    id: str
    name: str
    arguments: Dict[str, Any]


@dataclass(frozen=True)
class ToolResult:
    """The outcome of one tool call, sent back to the model"""
    id: str
    name: str
    result_text: str


@dataclass(frozen=True)
class FinalText:
    """Terminal round: the model answered in prose"""
    text: str


@dataclass(frozen=True)
class PendingCalls:
    """Non-terminal round: the model wants tools executed"""
    calls: Tuple[ToolCall, ...]


RoundResult = Union[FinalText, PendingCalls]


def _parse_arguments(tool_name: str, raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}

    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Undecodable arguments for %s: %r", tool_name, raw)
        return {}

    if not isinstance(arguments, dict):
        logger.warning("Arguments for %s are not an object: %r", tool_name, raw)
        return {}

    return arguments


class ModelGateway:
    """
    Stateful conversation with a language model.

    The tool table and behavior instruction are fixed at construction.
    Neither operation retries: every failure is raised to the caller as an
    ``AgentError`` subclass.
    """

    def __init__(
        self,
        tools: Sequence[ToolDefinition],
        behavior_instruction: str,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings or get_settings()
        self.model = self.settings.openai_model

        if client is None:
            if not self.settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY is not set")
            client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                timeout=self.settings.request_timeout,
                max_retries=0,
            )
        self.client = client

        self._tools = [tool.to_openai_schema() for tool in tools]
        self._transcript: List[Dict[str, Any]] = [
            {"role": "system", "content": behavior_instruction},
        ]
        self._turn_start = len(self._transcript)
        self._pending_ids: Tuple[str, ...] = ()
        self.tokens_used = 0

    @property
    def transcript(self) -> Tuple[Dict[str, Any], ...]:
        return tuple(self._transcript)

    async def send_user_text(self, text: str) -> RoundResult:
        """Start a new user turn"""
        if self._pending_ids:
            raise ProtocolError("Previous turn still has unanswered tool calls")

        self._turn_start = len(self._transcript)
        self._transcript.append({"role": "user", "content": text})
        return await self._complete()

    async def send_tool_results(self, results: Sequence[ToolResult]) -> RoundResult:
        """Answer every pending tool call of the current round"""
        result_ids = [result.id for result in results]
        if sorted(result_ids) != sorted(self._pending_ids):
            raise ProtocolError(
                f"Tool results {result_ids} do not match pending calls {list(self._pending_ids)}"
            )

        for result in results:
            self._transcript.append({
                "role": "tool",
                "tool_call_id": result.id,
                "name": result.name,
                "content": result.result_text,
            })
        self._pending_ids = ()

        return await self._complete()

    def discard_turn(self) -> None:
        """Drop everything recorded since the current user turn began"""
        del self._transcript[self._turn_start:]
        self._pending_ids = ()

    async def _complete(self) -> RoundResult:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=list(self._transcript),
                tools=self._tools,
                tool_choice="auto",
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except openai.AuthenticationError as e:
            raise ConfigurationError(f"Model service rejected credentials: {e}") from e
        except openai.APITimeoutError as e:
            raise TransportError(f"Model service timed out: {e}") from e
        except openai.APIError as e:
            raise TransportError(f"Model service error: {e}") from e

        if getattr(response, "usage", None):
            self.tokens_used += response.usage.total_tokens

        if not response.choices:
            raise ProtocolError("Model response has no choices")

        message = response.choices[0].message

        if message.tool_calls:
            calls = tuple(
                ToolCall(
                    id=tc.id,
                    name=tc.function.name,
                    arguments=_parse_arguments(tc.function.name, tc.function.arguments),
                )
                for tc in message.tool_calls
            )

            self._transcript.append({
                "role": "assistant",
                "content": message.content or "",
                "tool_calls": [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {
                            "name": tc.function.name,
                            "arguments": tc.function.arguments,
                        },
                    }
                    for tc in message.tool_calls
                ],
            })
            self._pending_ids = tuple(call.id for call in calls)
            return PendingCalls(calls=calls)

        content = message.content or ""
        self._transcript.append({"role": "assistant", "content": content})
        return FinalText(text=content)
