import json

import pytest

from book import Book
from user import User
from utils.ui_helpers import (
    normalize_mode,
    print_books,
    print_confirmation,
    print_stats,
    print_users,
)

BOOKS = [Book(1, "Dune", "Frank Herbert"), Book(2, "Emma", "Jane Austen", available=False)]
USERS = [User(1, "Alice", borrowed=[2]), User(2, "Bob")]


def test_normalize_mode():
    assert normalize_mode(" JSON ") == "json"
    with pytest.raises(ValueError, match="Unknown output mode"):
        normalize_mode("xml")


def test_plain_books(capsys):
    print_books(BOOKS, "plain")
    out = capsys.readouterr().out.splitlines()
    assert out == ["1 - Dune by Frank Herbert [Available]", "2 - Emma by Jane Austen [Issued]"]


def test_plain_empty_books(capsys):
    print_books([], "plain", empty_message="No available books.")
    assert capsys.readouterr().out.strip() == "No available books."


def test_json_books(capsys):
    print_books(BOOKS, "json")
    payload = json.loads(capsys.readouterr().out)
    assert payload[1] == {"id": 2, "title": "Emma", "author": "Jane Austen", "available": False}


def test_json_empty_books_is_empty_array(capsys):
    print_books([], "json")
    assert json.loads(capsys.readouterr().out) == []


def test_rich_books(capsys):
    print_books(BOOKS, "rich")
    out = capsys.readouterr().out
    assert "Dune" in out
    assert "Issued" in out


def test_plain_users(capsys):
    print_users(USERS, "plain")
    out = capsys.readouterr().out.splitlines()
    assert out == ["1 - Alice (borrowed: 2)", "2 - Bob (borrowed: none)"]


def test_plain_stats(capsys):
    print_stats({"total_books": 2, "available_books": 1, "issued_books": 1, "total_users": 2}, "plain")
    out = capsys.readouterr().out
    assert "Total Books: 2" in out
    assert "Issued: 1" in out


def test_json_confirmation(capsys):
    print_confirmation("Added book 1: Dune by Herbert", "json", book_id=1)
    assert json.loads(capsys.readouterr().out) == {"message": "Added book 1: Dune by Herbert", "book_id": 1}
