import dataclasses

import pytest

from catalog import Unavailable
from commands import (
    AddBook,
    AddUser,
    IssueBook,
    ListAvailable,
    ListBooks,
    ListUsers,
    ReturnBook,
    ShowStats,
    execute,
)


def test_add_commands_return_new_ids(catalog):
    assert execute(catalog, AddBook(title="Dune", author="Herbert")) == 1
    assert execute(catalog, AddUser(name="Alice")) == 1
    assert catalog.get_book(1).title == "Dune"


def test_issue_and_return(stocked):
    assert execute(stocked, IssueBook(book_id=1, user_id=2)) is None
    assert [b.id for b in execute(stocked, ListAvailable())] == [2]
    execute(stocked, ReturnBook(book_id=1, user_id=2))
    assert len(execute(stocked, ListAvailable())) == 2


def test_read_only_commands(stocked):
    assert [b.title for b in execute(stocked, ListBooks())] == ["Dune", "Emma"]
    assert [u.name for u in execute(stocked, ListUsers())] == ["Alice", "Bob"]
    assert execute(stocked, ShowStats())["total_users"] == 2


def test_catalog_errors_propagate(stocked):
    execute(stocked, IssueBook(1, 1))
    with pytest.raises(Unavailable):
        execute(stocked, IssueBook(1, 2))


@pytest.mark.parametrize(
    "command, mutates",
    [
        (AddBook("t", "a"), True),
        (AddUser("n"), True),
        (IssueBook(1, 1), True),
        (ReturnBook(1, 1), True),
        (ListBooks(), False),
        (ListAvailable(), False),
        (ListUsers(), False),
        (ShowStats(), False),
    ],
)
def test_mutates_flag(command, mutates):
    assert command.mutates is mutates


def test_commands_are_immutable():
    command = IssueBook(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        command.book_id = 3


def test_unknown_command_rejected(catalog):
    with pytest.raises(TypeError):
        execute(catalog, "list")
