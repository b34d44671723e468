"""
Navigation Tools - execute the model's tool calls against the host app
Every valid call turns into exactly one navigation
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple
from urllib.parse import urlencode

from pydantic import ValidationError

from ..core.errors import ToolExecutionError
from ..core.function_registry import (
    PAGES,
    CompareCities,
    FunctionRegistry,
    Navigate,
    SearchCity,
    get_registry,
)


logger = logging.getLogger(__name__)


ROUTE_PATHS = {
    "home": "/",
    "search": "/search",
    "compare": "/compare",
}


class Navigator(Protocol):
    """Host-application router the dispatcher drives"""

    def go_to(self, route: str, params: Mapping[str, str]) -> None:
        ...


def route_to_url(route: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Render a route and its query params the way the app's router shows them"""
    path = ROUTE_PATHS.get(route, "/")
    if params:
        return f"{path}?{urlencode(dict(params))}"
    return path


class InMemoryNavigator:
    """
    Navigator that records where the app has been sent.
    Used by the terminal host and by tests.
    """

    def __init__(self, on_navigate: Optional[Callable[[str, Dict[str, str]], None]] = None):
        self.route = "home"
        self.params: Dict[str, str] = {}
        self.history: List[Tuple[str, Dict[str, str]]] = []
        self._on_navigate = on_navigate

    def go_to(self, route: str, params: Mapping[str, str]) -> None:
        if route not in ROUTE_PATHS:
            raise ValueError(f"Unknown route: {route}")

        self.route = route
        self.params = dict(params)
        self.history.append((route, dict(params)))

        if self._on_navigate:
            self._on_navigate(route, dict(params))

    @property
    def current_url(self) -> str:
        return route_to_url(self.route, self.params)


class ToolDispatcher:
    """
    Executes tool calls requested by the model.

    ``execute`` never raises: unknown tools, invalid arguments and failed
    navigations all come back as result text for the model.
    """

    def __init__(self, navigator: Navigator, registry: Optional[FunctionRegistry] = None):
        self.navigator = navigator
        self.registry = registry or get_registry()
        self._handlers: Dict[type, Callable[[Any], str]] = {
            Navigate: self._navigate,
            SearchCity: self._search_city,
            CompareCities: self._compare_cities,
        }

    def execute(self, name: str, arguments: Mapping[str, Any]) -> str:
        """
        Run one tool call.

        Args:
            name: Tool name from the model
            arguments: Untyped arguments from the model

        Returns:
            Short text describing what happened
        """
        tool = self.registry.get_tool(name)
        if tool is None:
            logger.warning("Model requested unknown tool %r", name)
            return f"Function not found: {name}."

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            logger.warning("Arguments for %s are not a mapping: %r", name, arguments)
            return f"Invalid arguments for {name}: expected an object of named arguments."

        try:
            parsed = tool.parse_arguments(dict(arguments))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            logger.warning("Invalid arguments for %s: %s", name, problems)
            return f"Invalid arguments for {name}: {problems}."

        logger.debug("Executing tool %s with %r", name, parsed)

        try:
            return self._handlers[type(parsed)](parsed)
        except ToolExecutionError as e:
            logger.error("Tool %s failed: %s", name, e)
            return f"Tool {name} failed: {e}"

    def _navigate(self, args: Navigate) -> str:
        if args.page not in PAGES:
            # Unknown pages leave the app where it is
            logger.warning("navigate_to_page ignored unknown page %r", args.page)
            return f"Unknown page {args.page!r}; stayed on the current page."

        self._go_to("navigate_to_page", args.page, {})
        return f"Navigated to {args.page} page."

    def _search_city(self, args: SearchCity) -> str:
        self._go_to("search_weather", "search", {"city": args.city})
        return f"Performed search for {args.city}."

    def _compare_cities(self, args: CompareCities) -> str:
        self._go_to("compare_weather", "compare", {"cityA": args.city_a, "cityB": args.city_b})
        return f"Opened comparison for {args.city_a} vs {args.city_b}."

    def _go_to(self, tool_name: str, route: str, params: Dict[str, str]) -> None:
        try:
            self.navigator.go_to(route, params)
        except Exception as e:
            raise ToolExecutionError(tool_name, str(e)) from e
