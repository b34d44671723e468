"""
Error taxonomy for the agent loop
"""


class AgentError(Exception):
    """Base class for failures inside the agent loop"""
    pass


class ConfigurationError(AgentError):
    """Raised when the model service is not configured or rejects our credentials"""
    pass


class TransportError(AgentError):
    """Raised when a round-trip to the model service fails or times out"""
    pass


class ProtocolError(AgentError):
    """Raised when a round result or a tool result set is malformed"""
    pass


class ToolExecutionError(AgentError):
    """Raised when a dispatched action fails against the host application"""

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"{tool_name}: {message}")
        self.tool_name = tool_name
