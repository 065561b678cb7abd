import pytest

from catalog import Catalog
from storage import SnapshotStore


@pytest.fixture
def data_file(tmp_path):
    # Each test gets its own snapshot file
    return tmp_path / "library.json"


@pytest.fixture
def store(data_file):
    return SnapshotStore(data_file)


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def stocked(catalog):
    """Catalog with two books and two users, nothing issued."""
    catalog.add_book("Dune", "Frank Herbert")
    catalog.add_book("Emma", "Jane Austen")
    catalog.add_user("Alice")
    catalog.add_user("Bob")
    return catalog
