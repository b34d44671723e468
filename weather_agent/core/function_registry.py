"""
Function Registry - Tool definitions for OpenAI function calling
Defines the capabilities exposed to the model and the argument
models used to parse the model's tool calls
"""

from typing import Any, Dict, List, Optional, Tuple, Type
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


PAGES = ("home", "search", "compare")


class ToolArguments(BaseModel):
    """Base for the parsed, typed arguments of one tool call"""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


def _clean_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class Navigate(ToolArguments):
    page: str

    @field_validator("page")
    @classmethod
    def _normalize_page(cls, value: str) -> str:
        return _clean_text(value).lower()


class SearchCity(ToolArguments):
    city: str

    @field_validator("city")
    @classmethod
    def _normalize_city(cls, value: str) -> str:
        return _clean_text(value)


class CompareCities(ToolArguments):
    city_a: str = Field(alias="cityA")
    city_b: str = Field(alias="cityB")

    @field_validator("city_a", "city_b")
    @classmethod
    def _normalize_city(cls, value: str) -> str:
        return _clean_text(value)


@dataclass(frozen=True)
class ToolParameter:
    """Definition of a tool parameter"""
    name: str
    type: str  # "string", "integer", "boolean", "array", "object"
    description: str
    required: bool = True
    enum: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ToolDefinition:
    """Complete definition of a tool"""
    name: str
    description: str
    parameters: Tuple[ToolParameter, ...]
    arguments_model: Type[ToolArguments]

    def to_openai_schema(self) -> Dict[str, Any]:
        """Convert to OpenAI function schema"""
        properties = {}
        required = []

        for param in self.parameters:
            prop = {
                "type": param.type,
                "description": param.description,
            }

            if param.enum:
                prop["enum"] = list(param.enum)

            properties[param.name] = prop

            if param.required:
                required.append(param.name)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": required,
                },
            },
        }

    def parse_arguments(self, arguments: Dict[str, Any]) -> ToolArguments:
        """
        Validate raw arguments from the model into this tool's variant.

        Raises:
            pydantic.ValidationError: If the arguments do not fit the schema
        """
        return self.arguments_model.model_validate(arguments)


TOOL_DEFINITIONS: Tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="navigate_to_page",
        description="Navigate to a specific page in the application.",
        parameters=(
            ToolParameter(
                name="page",
                type="string",
                description='The page to navigate to. Options: "home", "search", "compare".',
                enum=PAGES,
            ),
        ),
        arguments_model=Navigate,
    ),
    ToolDefinition(
        name="search_weather",
        description="Search for the weather of a specific city.",
        parameters=(
            ToolParameter(
                name="city",
                type="string",
                description="The name of the city to search for.",
            ),
        ),
        arguments_model=SearchCity,
    ),
    ToolDefinition(
        name="compare_weather",
        description="Compare the weather of two cities.",
        parameters=(
            ToolParameter(
                name="cityA",
                type="string",
                description="The first city name.",
            ),
            ToolParameter(
                name="cityB",
                type="string",
                description="The second city name.",
            ),
        ),
        arguments_model=CompareCities,
    ),
)


class FunctionRegistry:
    """
    Registry of the tools the agent may call.
    The table is fixed at import time and never changes.
    """

    def __init__(self, definitions: Tuple[ToolDefinition, ...] = TOOL_DEFINITIONS):
        self._tools: Dict[str, ToolDefinition] = {tool.name: tool for tool in definitions}

    def describe(self) -> Tuple[ToolDefinition, ...]:
        """Get the full tool table"""
        return tuple(self._tools.values())

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool by name"""
        return self._tools.get(name)

    def to_openai_schemas(self) -> List[Dict[str, Any]]:
        """Get OpenAI schemas for all tools"""
        return [tool.to_openai_schema() for tool in self._tools.values()]

    def list_tools(self) -> List[str]:
        """List all available tool names"""
        return list(self._tools.keys())


# Singleton instance
_registry: Optional[FunctionRegistry] = None


def get_registry() -> FunctionRegistry:
    """Get or create the function registry"""
    global _registry
    if _registry is None:
        _registry = FunctionRegistry()
    return _registry
