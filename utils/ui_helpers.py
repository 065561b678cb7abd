import json
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from book import Book
from user import User

# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODES = ("plain", "json", "rich")

_console = Console()


def normalize_mode(mode: str) -> str:
    mode = (mode or "").lower().strip()
    if mode not in OUTPUT_MODES:
        raise ValueError(f"Unknown output mode '{mode}'. Use one of: {', '.join(OUTPUT_MODES)}.")
    return mode


def _status(book: Book) -> str:
    return "Available" if book.available else "Issued"


def print_books(books: List[Book], mode: str, empty_message: str = "No books in library.", title: str = "📚 Books") -> None:
    """Print books in the requested output mode.
    - plain: '<id> - <title> by <author> [Available|Issued]' lines, or the empty message
    - json: JSON array of book objects
    - rich: Rich table
    """
    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(empty_message)
        return

    if mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True, justify="right")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status")
        for b in books:
            status = "[green]Available[/]" if b.available else "[yellow]Issued[/]"
            table.add_row(str(b.id), escape(b.title), escape(b.author), status)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} [{_status(b)}]")


def print_users(users: List[User], mode: str) -> None:
    if mode == "json":
        print(json.dumps([u.to_dict() for u in users], ensure_ascii=False))
        return

    if not users:
        print("No users registered.")
        return

    if mode == "rich":
        table = Table(title="👤 Users", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True, justify="right")
        table.add_column("Name", style="white")
        table.add_column("Borrowed", style="white")
        for u in users:
            borrowed = ", ".join(str(i) for i in sorted(u.borrowed)) or "-"
            table.add_row(str(u.id), escape(u.name), borrowed)
        _console.print(table)
    else:
        for u in users:
            borrowed = ", ".join(str(i) for i in sorted(u.borrowed)) or "none"
            print(f"{u.id} - {u.name} (borrowed: {borrowed})")


def print_stats(stats: Dict[str, Any], mode: str) -> None:
    """Print catalog statistics.
    - plain: one 'Label: value' line per metric
    - json: JSON object
    - rich: Panel with the main metrics
    """
    total = stats.get("total_books", 0)
    available = stats.get("available_books", 0)
    issued = stats.get("issued_books", 0)
    users = stats.get("total_users", 0)

    if mode == "json":
        print(json.dumps(
            {"total_books": total, "available_books": available, "issued_books": issued, "total_users": users},
            ensure_ascii=False,
        ))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {total}\n"
            f"[bold]Available:[/] {available}\n"
            f"[bold]Issued:[/] {issued}\n"
            f"[bold]Users:[/] {users}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {total}")
        print(f"Available: {available}")
        print(f"Issued: {issued}")
        print(f"Users: {users}")


def print_confirmation(message: str, mode: str, **data: Any) -> None:
    if mode == "json":
        print(json.dumps({"message": message, **data}, ensure_ascii=False))
    elif mode == "rich":
        _console.print(f"[green]✅ {escape(message)}[/]")
    else:
        print(message)


def print_error(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
