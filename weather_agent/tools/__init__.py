"""
Tool modules for the Weather Agent
"""

from .navigation_tools import (
    ROUTE_PATHS,
    Navigator,
    InMemoryNavigator,
    ToolDispatcher,
    route_to_url,
)

__all__ = [
    "ROUTE_PATHS",
    "Navigator",
    "InMemoryNavigator",
    "ToolDispatcher",
    "route_to_url",
]
