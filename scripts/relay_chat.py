#!/usr/bin/env python3
"""
Chat Relay Interactive Client

A command-line client for a running relay: registers you, then sends
every line you type to /chat and prints the AI reply.
"""

import argparse
import os

import httpx
from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

# Load environment variables
load_dotenv()

console = Console()


# -----------------------------
# Display Functions
# -----------------------------


def show_header(base_url: str):
    """Display the application header."""
    header = Text()
    header.append("Chat Relay", style="bold bright_cyan")
    header.append(f" - {base_url}", style="dim")

    console.print()
    console.print(Panel(header, box=box.DOUBLE, border_style="bright_blue", padding=(0, 2)))
    console.print()


def show_help():
    """Display help information."""
    help_text = Text()
    help_text.append("Available Commands:\n", style="bold cyan")
    help_text.append("  history  ", style="green")
    help_text.append("- Show your stored messages and replies\n")
    help_text.append("  help     ", style="green")
    help_text.append("- Show this help message\n")
    help_text.append("  exit     ", style="green")
    help_text.append("- Exit the application\n")

    console.print(Panel(help_text, title="[bold]Help[/bold]", border_style="dim"))


def show_error(title: str, message: str):
    """Display an error message."""
    console.print(Panel(f"[red]{message}[/red]", title=f"[bold red]{title}[/bold red]", border_style="red"))


def show_history(messages: list[dict]):
    """Display stored exchanges as a table."""
    if not messages:
        console.print("[dim]No messages yet.[/dim]")
        return

    table = Table(box=box.ROUNDED, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("You", style="green")
    table.add_column("AI", style="cyan")
    for i, exchange in enumerate(messages, 1):
        table.add_row(str(i), exchange["message"], exchange["reply"])
    console.print(table)


# -----------------------------
# API calls
# -----------------------------


def post(client: httpx.Client, path: str, payload: dict) -> dict:
    """POST a JSON body and return the JSON response, raising on error status."""
    response = client.post(path, json=payload)
    body = response.json()
    if response.status_code != 200:
        raise RuntimeError(f"{response.status_code}: {body.get('error', body)}")
    return body


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Chat with the relay from a terminal")
    parser.add_argument(
        "--url",
        default=f"http://127.0.0.1:{os.getenv('PORT', '5000')}",
        help="Base URL of the relay",
    )
    parser.add_argument("--timeout", type=float, default=90.0, help="Request timeout in seconds")
    args = parser.parse_args()

    show_header(args.url)

    with httpx.Client(base_url=args.url, timeout=args.timeout) as client:
        try:
            name = Prompt.ask("[bold]Name[/bold]")
            email = Prompt.ask("[bold]Email[/bold]")
            user = post(client, "/register-user", {"name": name, "email": email})
        except (httpx.HTTPError, RuntimeError) as e:
            show_error("Registration Error", str(e))
            raise SystemExit(1)

        user_id = user["userId"]
        console.print(f"[green]✓[/green] Registered as [cyan]{user_id}[/cyan]")
        console.print("[dim]Type 'help' for available commands.[/dim]\n")

        while True:
            try:
                message = Prompt.ask("[bold magenta]You[/bold magenta]").strip()

                if not message:
                    continue

                if message.lower() in ("exit", "quit", "q"):
                    console.print("\n[dim]Goodbye![/dim]\n")
                    break

                if message.lower() == "help":
                    show_help()
                    continue

                if message.lower() == "history":
                    body = post(client, "/chat-history", {"userId": user_id})
                    show_history(body["messages"])
                    continue

                with console.status("[bold cyan]Waiting for the AI...[/bold cyan]", spinner="dots"):
                    body = post(client, "/chat", {"message": message, "userId": user_id})
                console.print(Panel(body["reply"], title="[bold cyan]AI[/bold cyan]", border_style="cyan"))

            except KeyboardInterrupt:
                console.print("\n[dim]Goodbye![/dim]\n")
                break
            except (httpx.HTTPError, RuntimeError) as e:
                show_error("Request Error", str(e))


if __name__ == "__main__":
    main()
