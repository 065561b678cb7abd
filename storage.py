import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, PositiveInt, ValidationError, model_validator

from book import Book
from catalog import Catalog
from user import User

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class CorruptSnapshot(Exception):
    """The snapshot file exists but does not hold a usable catalog."""


class SnapshotWriteError(OSError):
    """The snapshot could not be written; the previous file is left in place."""


# ------------------------- Snapshot schema ------------------------- #
class BookRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    id: PositiveInt
    title: str
    author: str
    available: Optional[bool] = None
    # Earlier releases stored the inverse flag
    is_issued: Optional[bool] = None

    @model_validator(mode="after")
    def _has_status(self) -> "BookRecord":
        if self.available is None and self.is_issued is None:
            raise ValueError("book record needs 'available'")
        return self


class UserRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    id: PositiveInt
    name: str
    borrowed: Optional[List[PositiveInt]] = None
    borrowed_books: Optional[List[PositiveInt]] = None


class SnapshotModel(BaseModel):
    model_config = ConfigDict(strict=True)

    version: int = SNAPSHOT_VERSION
    next_book_id: Optional[PositiveInt] = None
    next_user_id: Optional[PositiveInt] = None
    books: List[BookRecord]
    users: List[UserRecord]


class SnapshotStore:
    """Loads and saves the whole catalog as a single JSON document."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> Catalog:
        """Read the snapshot, or return an empty catalog when none exists yet."""
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}; starting with an empty catalog")
            return Catalog()

        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise CorruptSnapshot(f"Could not read {self.path}: {exc}") from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptSnapshot(f"{self.path} is not UTF-8 text: {exc}") from exc

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise CorruptSnapshot(f"{self.path} is not valid JSON: {exc}") from exc

        catalog = self.from_document(data)
        logger.info(f"Loaded {len(catalog.books)} books and {len(catalog.users)} users from {self.path}")
        return catalog

    def save(self, catalog: Catalog) -> None:
        """Replace the snapshot atomically with the catalog's current state."""
        payload = self.dumps(catalog)
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.warning(f"Could not remove temporary file {tmp_name}")
            logger.error(f"Failed to write snapshot {self.path}: {exc}")
            raise SnapshotWriteError(f"Could not write {self.path}: {exc}") from exc
        logger.info(f"Saved snapshot to {self.path}")

    # ------------------------- Serialization ------------------------- #
    @staticmethod
    def to_document(catalog: Catalog) -> dict:
        return {
            "version": SNAPSHOT_VERSION,
            "next_book_id": catalog.next_book_id,
            "next_user_id": catalog.next_user_id,
            "books": [book.to_dict() for book in catalog.list_books()],
            "users": [user.to_dict() for user in catalog.list_users()],
        }

    @classmethod
    def dumps(cls, catalog: Catalog) -> str:
        return json.dumps(cls.to_document(catalog), indent=2, ensure_ascii=False) + "\n"

    @staticmethod
    def from_document(data: Any) -> Catalog:
        """Validate a decoded snapshot and rebuild the catalog it describes."""
        try:
            snapshot = SnapshotModel.model_validate(data)
        except ValidationError as exc:
            raise CorruptSnapshot(f"Snapshot has an unexpected shape: {exc}") from exc

        if snapshot.version > SNAPSHOT_VERSION:
            raise CorruptSnapshot(f"Unsupported snapshot version {snapshot.version}.")
        if snapshot.next_book_id is None or snapshot.next_user_id is None:
            logger.warning("Snapshot has no id counters; deriving them from stored records")

        books = [Book.from_dict(record.model_dump(exclude_none=True)) for record in snapshot.books]
        users = [User.from_dict(record.model_dump(exclude_none=True)) for record in snapshot.users]

        try:
            catalog = Catalog(
                books=books,
                users=users,
                next_book_id=1 if snapshot.next_book_id is None else snapshot.next_book_id,
                next_user_id=1 if snapshot.next_user_id is None else snapshot.next_user_id,
            )
            catalog.check_consistency()
        except ValueError as exc:
            raise CorruptSnapshot(f"Snapshot is inconsistent: {exc}") from exc

        if snapshot.next_book_id is not None and catalog.next_book_id != snapshot.next_book_id:
            logger.warning(f"Book id counter raised from {snapshot.next_book_id} to {catalog.next_book_id}")
        if snapshot.next_user_id is not None and catalog.next_user_id != snapshot.next_user_id:
            logger.warning(f"User id counter raised from {snapshot.next_user_id} to {catalog.next_user_id}")
        return catalog
