"""Command variants understood by the catalog CLI.

Each CLI invocation is decoded once into one of the dataclasses below and
handed to :func:`execute`, which performs exactly one catalog call.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from catalog import Catalog


@dataclass(frozen=True)
class AddBook:
    title: str
    author: str
    mutates: ClassVar[bool] = True


@dataclass(frozen=True)
class AddUser:
    name: str
    mutates: ClassVar[bool] = True


@dataclass(frozen=True)
class IssueBook:
    book_id: int
    user_id: int
    mutates: ClassVar[bool] = True


@dataclass(frozen=True)
class ReturnBook:
    book_id: int
    user_id: int
    mutates: ClassVar[bool] = True


@dataclass(frozen=True)
class ListBooks:
    mutates: ClassVar[bool] = False


@dataclass(frozen=True)
class ListAvailable:
    mutates: ClassVar[bool] = False


@dataclass(frozen=True)
class ListUsers:
    mutates: ClassVar[bool] = False


@dataclass(frozen=True)
class ShowStats:
    mutates: ClassVar[bool] = False


Command = Union[AddBook, AddUser, IssueBook, ReturnBook, ListBooks, ListAvailable, ListUsers, ShowStats]


def execute(catalog: Catalog, command: Command) -> Any:
    """Run a single command against the catalog and return the catalog's result.

    Catalog errors propagate unchanged; the catalog is left untouched when
    one is raised.
    """
    if isinstance(command, AddBook):
        return catalog.add_book(command.title, command.author)
    if isinstance(command, AddUser):
        return catalog.add_user(command.name)
    if isinstance(command, IssueBook):
        return catalog.issue_book(command.book_id, command.user_id)
    if isinstance(command, ReturnBook):
        return catalog.return_book(command.book_id, command.user_id)
    if isinstance(command, ListBooks):
        return catalog.list_books()
    if isinstance(command, ListAvailable):
        return catalog.list_available()
    if isinstance(command, ListUsers):
        return catalog.list_users()
    if isinstance(command, ShowStats):
        return catalog.statistics()
    raise TypeError(f"Unsupported command: {command!r}")
