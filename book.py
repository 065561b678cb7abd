from __future__ import annotations


class Book:
    """Represents a single book item in the catalog."""

    def __init__(self, id: int, title: str, author: str, available: bool = True) -> None:
        self.id = id
        self.title = title.strip()
        self.author = author.strip()
        self.available = available

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        status = "Available" if self.available else "Issued"
        return f"{self.title} by {self.author} (ID: {self.id}, {status})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, available={self.available!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author, "available": self.available}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Older snapshots stored the inverse flag as "is_issued"
        if "available" in data:
            available = data["available"]
        else:
            available = not data.get("is_issued", False)
        return Book(id=data["id"], title=data["title"], author=data["author"], available=available)
