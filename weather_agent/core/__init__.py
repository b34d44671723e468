"""
Core modules for the Weather Agent
"""

from .errors import (
    AgentError,
    ConfigurationError,
    TransportError,
    ProtocolError,
    ToolExecutionError,
)

from .conversation import (
    Role,
    Message,
    ConversationStore,
)

from .function_registry import (
    ToolParameter,
    ToolDefinition,
    FunctionRegistry,
    Navigate,
    SearchCity,
    CompareCities,
    get_registry,
)

from .gateway import (
    ToolCall,
    ToolResult,
    FinalText,
    PendingCalls,
    ModelGateway,
)

from .agent import (
    AgentState,
    ResponseStatus,
    AgentResponse,
    ConversationSession,
    AgentLoop,
    create_agent,
)

__all__ = [
    # Errors
    "AgentError",
    "ConfigurationError",
    "TransportError",
    "ProtocolError",
    "ToolExecutionError",
    # Conversation
    "Role",
    "Message",
    "ConversationStore",
    # Function Registry
    "ToolParameter",
    "ToolDefinition",
    "FunctionRegistry",
    "Navigate",
    "SearchCity",
    "CompareCities",
    "get_registry",
    # Gateway
    "ToolCall",
    "ToolResult",
    "FinalText",
    "PendingCalls",
    "ModelGateway",
    # Agent
    "AgentState",
    "ResponseStatus",
    "AgentResponse",
    "ConversationSession",
    "AgentLoop",
    "create_agent",
]
