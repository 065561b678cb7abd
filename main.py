import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from catalog import Catalog, CatalogError
from commands import (
    AddBook,
    AddUser,
    Command,
    IssueBook,
    ListAvailable,
    ListBooks,
    ListUsers,
    ReturnBook,
    ShowStats,
    execute,
)
from config import settings
from storage import CorruptSnapshot, SnapshotStore, SnapshotWriteError
from utils.ui_helpers import (
    normalize_mode,
    print_books,
    print_confirmation,
    print_error,
    print_stats,
    print_users,
)
from utils.validators import TextValidator

logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
logger = logging.getLogger(__name__)

APP_NAME = settings.app_name

# Process exit codes; Click already uses 2 for usage errors
EXIT_OK = 0
EXIT_CATALOG_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_STORAGE_ERROR = 3

console = Console()


@dataclass
class CliState:
    store: SnapshotStore
    output: str


# --- Typer CLI application ---
app = typer.Typer(help="Library catalog CLI: books, users, issue and return.")


@app.callback()
def _global_options(
    ctx: typer.Context,
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file",
        "-d",
        help="Snapshot file holding the catalog (default: LIBRARY_DATA_FILE or library.json)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options shared by every command."""
    try:
        mode = normalize_mode(output or settings.output_mode)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="'--output'")
    ctx.obj = CliState(store=SnapshotStore(data_file or settings.data_file), output=mode)


def _clean(value: str, field: str) -> str:
    try:
        return TextValidator.clean(value, field)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=field.upper())


def _run(state: CliState, command: Command) -> Any:
    """Load the catalog, run one command, persist if it changed anything."""
    try:
        catalog = state.store.load()
    except CorruptSnapshot as e:
        logger.error(f"Cannot load catalog: {e}")
        print_error(str(e))
        raise typer.Exit(EXIT_STORAGE_ERROR)

    try:
        result = execute(catalog, command)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(EXIT_CATALOG_ERROR)

    if command.mutates:
        try:
            state.store.save(catalog)
        except SnapshotWriteError as e:
            print_error(str(e))
            raise typer.Exit(EXIT_STORAGE_ERROR)
    return result


@app.command("add-book")
def cli_add_book(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Book author"),
):
    """Add a book to the catalog."""
    title = _clean(title, "title")
    author = _clean(author, "author")
    book_id = _run(ctx.obj, AddBook(title=title, author=author))
    print_confirmation(f"Added book {book_id}: {title} by {author}", ctx.obj.output, book_id=book_id)


@app.command("add-user")
def cli_add_user(ctx: typer.Context, name: str = typer.Argument(..., help="User name")):
    """Register a new user."""
    name = _clean(name, "name")
    user_id = _run(ctx.obj, AddUser(name=name))
    print_confirmation(f"Registered user {user_id}: {name}", ctx.obj.output, user_id=user_id)


@app.command("issue")
def cli_issue(
    ctx: typer.Context,
    book_id: int = typer.Argument(..., help="Id of the book to issue"),
    user_id: int = typer.Argument(..., help="Id of the borrowing user"),
):
    """Issue an available book to a user."""
    _run(ctx.obj, IssueBook(book_id=book_id, user_id=user_id))
    print_confirmation(f"Issued book {book_id} to user {user_id}", ctx.obj.output, book_id=book_id, user_id=user_id)


@app.command("return")
def cli_return(
    ctx: typer.Context,
    book_id: int = typer.Argument(..., help="Id of the book being returned"),
    user_id: int = typer.Argument(..., help="Id of the user returning it"),
):
    """Return a borrowed book."""
    _run(ctx.obj, ReturnBook(book_id=book_id, user_id=user_id))
    print_confirmation(f"Returned book {book_id} from user {user_id}", ctx.obj.output, book_id=book_id, user_id=user_id)


@app.command("list")
def cli_list(ctx: typer.Context):
    """List every book in the catalog."""
    books = _run(ctx.obj, ListBooks())
    print_books(books, ctx.obj.output)


@app.command("available")
def cli_available(ctx: typer.Context):
    """List books that can be issued right now."""
    books = _run(ctx.obj, ListAvailable())
    print_books(books, ctx.obj.output, empty_message="No available books.", title="📗 Available Books")


@app.command("users")
def cli_users(ctx: typer.Context):
    """List registered users and what they hold."""
    users = _run(ctx.obj, ListUsers())
    print_users(users, ctx.obj.output)


@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show catalog statistics."""
    stats = _run(ctx.obj, ShowStats())
    print_stats(stats, ctx.obj.output)


# --- Interactive menu ---
def _ask_id(label: str) -> int:
    raw = Prompt.ask(label).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"'{raw}' is not a valid id.")


def _menu_command(choice: str) -> Optional[Command]:
    """Ask for the inputs a menu choice needs and build its command."""
    if choice == "1":
        title = TextValidator.clean(Prompt.ask("Book title"), "title")
        author = TextValidator.clean(Prompt.ask("Book author"), "author")
        return AddBook(title=title, author=author)
    if choice == "2":
        return AddUser(name=TextValidator.clean(Prompt.ask("User name"), "name"))
    if choice == "3":
        return IssueBook(book_id=_ask_id("Book id to issue"), user_id=_ask_id("User id"))
    if choice == "4":
        return ReturnBook(book_id=_ask_id("Book id to return"), user_id=_ask_id("User id"))
    if choice == "5":
        return ListBooks()
    if choice == "6":
        return ListAvailable()
    if choice == "7":
        return ListUsers()
    if choice == "8":
        return ShowStats()
    return None


def _show_result(command: Command, result: Any, mode: str) -> None:
    if isinstance(command, AddBook):
        print_confirmation(f"Added book {result}: {command.title} by {command.author}", mode)
    elif isinstance(command, AddUser):
        print_confirmation(f"Registered user {result}: {command.name}", mode)
    elif isinstance(command, IssueBook):
        print_confirmation(f"Issued book {command.book_id} to user {command.user_id}", mode)
    elif isinstance(command, ReturnBook):
        print_confirmation(f"Returned book {command.book_id} from user {command.user_id}", mode)
    elif isinstance(command, ListBooks):
        print_books(result, mode)
    elif isinstance(command, ListAvailable):
        print_books(result, mode, empty_message="No available books.", title="📗 Available Books")
    elif isinstance(command, ListUsers):
        print_users(result, mode)
    elif isinstance(command, ShowStats):
        print_stats(result, mode)


def render_menu() -> None:
    menu_items = [
        ("1", "Add book", "➕"),
        ("2", "Register user", "👤"),
        ("3", "Issue book", "📤"),
        ("4", "Return book", "📥"),
        ("5", "List all books", "📚"),
        ("6", "List available books", "📗"),
        ("7", "List users", "👥"),
        ("8", "Show statistics", "📊"),
        ("0", "Exit", "🚪"),
    ]

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in menu_items:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

    console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))


def run_menu(store: Optional[SnapshotStore] = None, output: str = "rich") -> int:
    """Interactive menu; loads once and saves after every successful change."""
    store = store or SnapshotStore(settings.data_file)
    try:
        catalog: Catalog = store.load()
    except CorruptSnapshot as e:
        console.print(f"[bold red]Cannot load catalog:[/] {escape(str(e))}")
        return EXIT_STORAGE_ERROR

    console.print(f"[dim]Catalog loaded with {len(catalog.books)} books and {len(catalog.users)} users[/]")

    try:
        return _menu_loop(store, catalog, output)
    except (EOFError, KeyboardInterrupt):
        console.print()
        console.print("[green]Goodbye![/]")
        return EXIT_OK


def _menu_loop(store: SnapshotStore, catalog: Catalog, output: str) -> int:
    while True:
        render_menu()
        choice = Prompt.ask(
            "Choose an option", choices=["1", "2", "3", "4", "5", "6", "7", "8", "0"], default="5"
        ).strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            return EXIT_OK

        try:
            command = _menu_command(choice)
        except ValueError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
            continue
        if command is None:
            console.print("[yellow]Invalid choice. Please try again.[/]")
            continue

        try:
            result = execute(catalog, command)
        except CatalogError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
            continue

        if command.mutates:
            try:
                store.save(catalog)
            except SnapshotWriteError as e:
                console.print(f"[bold red]Changes not saved:[/] {escape(str(e))}")
        _show_result(command, result, output)
        console.print()


def cli() -> None:
    """Console entry point: subcommands when arguments are given, the menu otherwise."""
    if len(sys.argv) > 1:
        app()
    else:
        sys.exit(run_menu())


if __name__ == "__main__":
    cli()
