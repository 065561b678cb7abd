import logging
from typing import Any, Dict, List, Optional

from book import Book
from user import User

logger = logging.getLogger(__name__)


class Catalog:
    """Holds every book and user record and enforces the issue/return rules."""

    def __init__(
        self,
        books: Optional[List[Book]] = None,
        users: Optional[List[User]] = None,
        next_book_id: int = 1,
        next_user_id: int = 1,
    ) -> None:
        self.books: Dict[int, Book] = {}
        self.users: Dict[int, User] = {}
        for book in books or []:
            if book.id in self.books:
                raise ValueError(f"Duplicate book id {book.id}.")
            self.books[book.id] = book
        for user in users or []:
            if user.id in self.users:
                raise ValueError(f"Duplicate user id {user.id}.")
            self.users[user.id] = user
        # Counters only move forward so ids are never handed out twice
        self.next_book_id = max([next_book_id, *(i + 1 for i in self.books)])
        self.next_user_id = max([next_user_id, *(i + 1 for i in self.users)])

    # ------------------------- Core operations ------------------------- #
    def add_book(self, title: str, author: str) -> int:
        """Add a new, available book and return its id."""
        book_id = self.next_book_id
        self.next_book_id += 1
        book = Book(id=book_id, title=title, author=author)
        self.books[book_id] = book
        logger.info(f"Book added: id={book_id}, title={book.title!r}")
        return book_id

    def add_user(self, name: str) -> int:
        """Register a new user with nothing borrowed and return their id."""
        user_id = self.next_user_id
        self.next_user_id += 1
        user = User(id=user_id, name=name)
        self.users[user_id] = user
        logger.info(f"User registered: id={user_id}, name={user.name!r}")
        return user_id

    def issue_book(self, book_id: int, user_id: int) -> None:
        book = self.get_book(book_id)
        user = self.get_user(user_id)
        if not book.available:
            raise Unavailable(f"Book {book_id} ('{book.title}') is already issued.")
        book.available = False
        user.borrowed.add(book_id)
        logger.info(f"Book {book_id} issued to user {user_id}")

    def return_book(self, book_id: int, user_id: int) -> None:
        book = self.get_book(book_id)
        user = self.get_user(user_id)
        if book_id not in user.borrowed:
            raise NotBorrowed(f"User {user_id} ('{user.name}') has not borrowed book {book_id}.")
        user.borrowed.discard(book_id)
        book.available = True
        logger.info(f"Book {book_id} returned by user {user_id}")

    def list_books(self) -> List[Book]:
        return list(self.books.values())

    def list_available(self) -> List[Book]:
        return [book for book in self.books.values() if book.available]

    # ------------------------- Lookups ------------------------- #
    def get_book(self, book_id: int) -> Book:
        book = self.books.get(book_id)
        if book is None:
            raise NotFound("book", book_id)
        return book

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    def list_users(self) -> List[User]:
        return list(self.users.values())

    def borrower_of(self, book_id: int) -> Optional[User]:
        """Return the user currently holding the book, or None if it is on the shelf."""
        self.get_book(book_id)
        for user in self.users.values():
            if book_id in user.borrowed:
                return user
        return None

    def statistics(self) -> Dict[str, Any]:
        available = len(self.list_available())
        return {
            "total_books": len(self.books),
            "available_books": available,
            "issued_books": len(self.books) - available,
            "total_users": len(self.users),
        }

    # ------------------------- Integrity ------------------------- #
    def check_consistency(self) -> None:
        """Raise ValueError describing the first broken book/user invariant.

        Every borrowed id must name an existing, unavailable book held by
        exactly one user, and every unavailable book must be held by someone.
        """
        holders: Dict[int, int] = {}
        for user in self.users.values():
            for book_id in sorted(user.borrowed):
                book = self.books.get(book_id)
                if book is None:
                    raise ValueError(f"User {user.id} has borrowed unknown book {book_id}.")
                if book.available:
                    raise ValueError(f"Book {book_id} is borrowed by user {user.id} but marked available.")
                if book_id in holders:
                    raise ValueError(
                        f"Book {book_id} is borrowed by both user {holders[book_id]} and user {user.id}."
                    )
                holders[book_id] = user.id
        for book in self.books.values():
            if not book.available and book.id not in holders:
                raise ValueError(f"Book {book.id} is marked issued but no user holds it.")


class CatalogError(Exception):
    """Base class for rule violations reported by the catalog."""


class NotFound(CatalogError, LookupError):
    def __init__(self, kind: str, ident: int) -> None:
        self.kind = kind
        self.ident = ident
        super().__init__(f"No {kind} found with id {ident}.")


class Unavailable(CatalogError):
    pass


class NotBorrowed(CatalogError):
    pass
