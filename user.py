from __future__ import annotations

from typing import Iterable, Optional, Set


class User:
    """A registered library member and the books they currently hold."""

    def __init__(self, id: int, name: str, borrowed: Optional[Iterable[int]] = None) -> None:
        self.id = id
        self.name = name.strip()
        self.borrowed: Set[int] = set(borrowed or ())

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} (ID: {self.id}, borrowed: {len(self.borrowed)})"

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, borrowed={sorted(self.borrowed)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        # Sorted so that the same state always serializes the same way
        return {"id": self.id, "name": self.name, "borrowed": sorted(self.borrowed)}

    @staticmethod
    def from_dict(data: dict) -> "User":
        borrowed = data.get("borrowed", data.get("borrowed_books", []))
        return User(id=data["id"], name=data["name"], borrowed=borrowed)
