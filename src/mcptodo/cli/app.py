"""Main CLI application using Typer."""
import asyncio
import contextlib

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..chat import ChatCallback, ChatMessage, ChatSession, LogLevel, SuggestionGenerator
from ..llm import OpenAIResponseClient
from ..tools import McpToolRegistration
from .providers import get_mcp_tool, get_response_client, get_settings

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="mcptodo",
    help="Chat with a language model that manages your to-do list over MCP",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

EXIT_COMMANDS = ("exit", "quit", "q")
RESET_COMMAND = "/reset"


class ConsoleCallback(ChatCallback):
    """Prints the streaming reply and suggestions to the console."""

    def __init__(self, console: Console, verbose: bool = False):
        self.console = console
        self.verbose = verbose

    def on_response_started(self, message: ChatMessage) -> None:
        self.console.print("[bold green]Assistant:[/bold green] ", end="")

    def on_message_changed(self, message: ChatMessage) -> None:
        self.console.print(message.content[-1], end="", markup=False, highlight=False)

    def on_response_cancelled(self, message: ChatMessage) -> None:
        self.console.print("\n[dim](response cancelled)[/dim]")

    def on_suggestions_changed(self, suggestions: list[str]) -> None:
        if not suggestions:
            return
        self.console.print("[dim]Suggestions:[/dim]")
        for number, suggestion in enumerate(suggestions, start=1):
            self.console.print(f"  [cyan]{number}.[/cyan] {suggestion}", highlight=False)

    def on_error(self, error: BaseException) -> None:
        self.console.print(f"[yellow]Warning: {error}[/yellow]")

    def log(self, level: LogLevel, component: str, message: str) -> None:
        if self.verbose or level >= LogLevel.WARNING:
            self.console.print(f"[dim]\\[{component}] {message}[/dim]")


def _mask(secret: str | None, visible: int = 4) -> str:
    if not secret:
        return "[dim]not set[/dim]"
    if len(secret) <= visible:
        return "****"
    return f"{secret[:visible]}****"


def _load_components() -> tuple[OpenAIResponseClient, McpToolRegistration]:
    settings = get_settings(console)
    tool = get_mcp_tool(settings, console)
    client = get_response_client(settings, console)
    return client, tool


@app.command()
def chat(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print session trace logs"
    )
):
    """Interactive console chat with the to-do list assistant."""
    client, tool = _load_components()

    async def _chat():
        callback = ConsoleCallback(console, verbose=verbose)
        session = ChatSession(
            client,
            tools=[tool],
            suggestions=SuggestionGenerator(client),
            callback=callback,
        )

        console.print("[bold cyan]MCP To-Do Chat[/bold cyan]")
        console.print(f"[dim]Model: {client.model} | Tool: {tool.server_label}[/dim]")
        console.print(
            "[dim]Type 'exit', 'quit', or 'q' to leave, "
            f"'{RESET_COMMAND}' to start over, or a number to pick a suggestion[/dim]\n"
        )

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ").strip()
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input:
                    continue

                if user_input.lower() in EXIT_COMMANDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                if user_input.lower() == RESET_COMMAND:
                    session.reset()
                    console.print("[dim]Conversation reset.[/dim]\n")
                    continue

                suggestions = session.suggestions
                if user_input.isdigit() and 1 <= int(user_input) <= len(suggestions):
                    choice = suggestions[int(user_input) - 1]
                    console.print(f"[dim]> {choice}[/dim]")
                    turn = session.select_suggestion(choice)
                else:
                    turn = session.submit(user_input)

                try:
                    await turn
                except Exception as e:
                    console.print(f"\n[red]Error: {e}[/red]\n")
                    continue

                console.print()
                pending = session.suggestion_generator.pending
                if pending is not None:
                    with contextlib.suppress(asyncio.CancelledError):
                        await pending
                console.print()
        finally:
            session.dispose()
            await client.close()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    client, tool = _load_components()

    async def _tui():
        from ..ui import run_textual_tui

        try:
            await run_textual_tui(
                client=client,
                tools=[tool],
                log_level=log_level,
            )
        finally:
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def check():
    """Validate configuration and show the resolved settings."""
    settings = get_settings(console)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=22)
    table.add_column("Value")

    openai_settings = settings.openai
    table.add_row("Connection string", _mask(openai_settings.connection_string, visible=0))
    table.add_row("Endpoint", openai_settings.endpoint or "[dim]not set[/dim]")
    table.add_row("API key", _mask(openai_settings.api_key))
    table.add_row("Deployment", openai_settings.deployment_name)
    table.add_row("Environment", "Development" if openai_settings.development else "Production")
    table.add_row("MCP server URL", settings.mcp.url or "[dim]not set[/dim]")
    table.add_row("MCP server token", _mask(settings.mcp.token))
    table.add_row("MCP server label", settings.mcp.label)
    console.print(table)

    client = get_response_client(settings, console)
    tool = get_mcp_tool(settings, console)

    console.print(f"[green]+[/green] Response client: {client.model} @ {client.base_url}")
    console.print(f"[green]+[/green] MCP tool: {tool.server_label} @ {tool.server_url}")

    asyncio.run(client.close())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
