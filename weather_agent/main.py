#!/usr/bin/env python3
"""
Weather Agent - terminal host
Runs one conversation session against an in-memory app router
"""

import sys
import asyncio
import argparse
from typing import Dict, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.markdown import Markdown
from rich.prompt import Prompt
from rich.table import Table
from rich import box

from dotenv import load_dotenv

from .config import APP_NAME, APP_VERSION, APP_DESCRIPTION, get_settings
from .core.agent import AgentLoop, create_agent
from .core.conversation import Message, Role
from .core.function_registry import get_registry
from .tools.navigation_tools import InMemoryNavigator, route_to_url
from .utils.logging import configure_logging


# Initialize console
console = Console()


def print_banner():
    """Print the application banner"""
    banner_text = Text()
    banner_text.append(f"🌦  {APP_NAME}", style="bold white")
    banner_text.append(f"  v{APP_VERSION}\n", style="dim cyan")
    banner_text.append(APP_DESCRIPTION, style="dim white")

    console.print(Panel(banner_text, border_style="cyan", box=box.ROUNDED))
    console.print()


def print_help_info():
    """Print quick help"""
    help_text = """[dim]Quick Commands:
  • Ask in natural language, e.g. "compare Bangkok and Osaka"
  • [cyan]/help[/cyan]     - Show all commands
  • [cyan]/route[/cyan]    - Show the current page
  • [cyan]/history[/cyan]  - Show pages visited
  • [cyan]/stats[/cyan]    - Show statistics
  • [cyan]/exit[/cyan]     - Exit the assistant
[/dim]"""
    console.print(help_text)


def announce_navigation(route: str, params: Dict[str, str]):
    console.print(f"[magenta]🧭 {route_to_url(route, params)}[/magenta]")


def render_new_agent_messages(messages: Tuple[Message, ...]):
    """Presentation listener: print agent turns as they are stored"""
    latest = messages[-1]
    if latest.role is Role.AGENT:
        console.print()
        console.print("[bold green]Agent[/bold green]")
        console.print(Markdown(latest.text))


def render_busy(busy: bool):
    if busy:
        console.print("[yellow]🤔 Thinking...[/yellow]")


def build_agent() -> Tuple[AgentLoop, InMemoryNavigator]:
    navigator = InMemoryNavigator(on_navigate=announce_navigation)
    agent = create_agent(navigator)
    agent.session.store.subscribe(render_new_agent_messages)
    agent.session.subscribe_busy(render_busy)
    return agent, navigator


def handle_special_command(command: str, agent: AgentLoop, navigator: InMemoryNavigator) -> bool:
    """
    Handle special commands starting with /

    Returns:
        True if command was handled, False otherwise
    """
    command = command.strip().lower()

    if command == "/help":
        help_table = Table(title="Available Commands", box=box.ROUNDED)
        help_table.add_column("Command", style="cyan")
        help_table.add_column("Description")

        help_table.add_row("/help", "Show this help message")
        help_table.add_row("/route", "Show the page the app is on")
        help_table.add_row("/history", "Show every page the agent opened")
        help_table.add_row("/stats", "Show agent statistics")
        help_table.add_row("/exit or /quit", "Exit the assistant")

        console.print(help_table)
        return True

    elif command == "/route":
        console.print(f"📍 [bold]Current page:[/bold] [cyan]{navigator.current_url}[/cyan]")
        return True

    elif command == "/history":
        if not navigator.history:
            console.print("  [dim](no navigation yet)[/dim]")
        for i, (route, params) in enumerate(navigator.history, 1):
            console.print(f"  {i}. [cyan]{route_to_url(route, params)}[/cyan]")
        return True

    elif command == "/stats":
        stats = agent.get_stats()

        stats_table = Table(title="Agent Statistics", box=box.ROUNDED)
        stats_table.add_column("Metric", style="cyan")
        stats_table.add_column("Value", style="green")

        stats_table.add_row("Model", str(stats["model"]))
        stats_table.add_row("Turns", str(stats["total_turns"]))
        stats_table.add_row("Model Rounds", str(stats["total_rounds"]))
        stats_table.add_row("Tool Calls Made", str(stats["total_tool_calls"]))
        stats_table.add_row("Tokens Used", str(stats["tokens_used"]))
        stats_table.add_row("Messages", str(stats["conversation"]["total_messages"]))

        console.print(stats_table)
        return True

    elif command in ["/exit", "/quit", "/q"]:
        console.print("\n[yellow]Goodbye! 👋[/yellow]")
        sys.exit(0)

    return False


def print_configuration_error():
    console.print(Panel(
        "[red bold]Error: OPENAI_API_KEY not found![/red bold]\n\n"
        "Please set your OpenAI API key:\n"
        "1. Create a [cyan].env[/cyan] file in the working directory\n"
        "2. Add: [green]OPENAI_API_KEY=your_key_here[/green]",
        title="Configuration Error",
        border_style="red"
    ))


async def run_interactive():
    """Run the interactive chat loop"""
    agent, navigator = build_agent()

    if not agent.session.available:
        print_configuration_error()
        sys.exit(1)

    print_banner()
    print_help_info()

    # Greeting was stored before the listener was attached
    for message in agent.session.store.snapshot():
        console.print(Markdown(message.text))

    while True:
        try:
            console.print()
            user_input = await asyncio.to_thread(Prompt.ask, "[bold cyan]You[/bold cyan]")

            if not user_input.strip():
                continue

            if user_input.startswith("/"):
                if handle_special_command(user_input, agent, navigator):
                    continue

            await agent.submit(user_input)

        except EOFError:
            console.print("\n[yellow]Goodbye! 👋[/yellow]")
            break


async def run_single_message(message: str):
    """Run a single message and exit"""
    agent, navigator = build_agent()

    if not agent.session.available:
        print_configuration_error()
        sys.exit(1)

    await agent.submit(message)
    console.print(f"\n📍 [bold]Current page:[/bold] [cyan]{navigator.current_url}[/cyan]")


def run_tools_list():
    """List available tools"""
    registry = get_registry()

    tools_table = Table(title="Available Tools", box=box.ROUNDED)
    tools_table.add_column("Tool", style="cyan")
    tools_table.add_column("Parameters", style="green")
    tools_table.add_column("Description")

    for tool in registry.describe():
        params = ", ".join(
            f"{p.name}: {'|'.join(p.enum) if p.enum else p.type}" for p in tool.parameters
        )
        tools_table.add_row(tool.name, params, tool.description)

    console.print(tools_table)


def run_version():
    """Show version information"""
    settings = get_settings()
    console.print(f"[bold]{APP_NAME}[/bold] v{APP_VERSION}")
    console.print(f"Model: {settings.openai_model}")


def main():
    """Main entry point"""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} - {APP_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  weather-agent                              # Start interactive mode
  weather-agent chat "Weather in Tokyo?"     # Send a single message
  weather-agent tools                        # List available tools
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    chat_parser = subparsers.add_parser("chat", help="Send a message to the agent")
    chat_parser.add_argument("message", nargs="?", help="Message to send (interactive if omitted)")

    subparsers.add_parser("tools", help="List available tools")
    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args()

    configure_logging(get_settings().log_level)

    try:
        if args.command is None or (args.command == "chat" and not args.message):
            asyncio.run(run_interactive())
        elif args.command == "chat":
            asyncio.run(run_single_message(args.message))
        elif args.command == "tools":
            run_tools_list()
        elif args.command == "version":
            run_version()
        else:
            parser.print_help()
    except KeyboardInterrupt:
        console.print("\n[yellow]Goodbye! 👋[/yellow]")


if __name__ == "__main__":
    main()
