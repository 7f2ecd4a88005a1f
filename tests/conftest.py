import asyncio

import pytest

from bookshelf.core.errors import StorageError
from bookshelf.core.storage import KeyValueStorage
from bookshelf.core.store import BookStore

TODAY = "2024-05-01"


class FlakyStorage(KeyValueStorage):
    """Storage whose reads or writes can be switched to fail."""

    fail_reads = False
    fail_writes = False

    def get_item(self, key):
        if self.fail_reads:
            raise StorageError("disk unavailable")
        return super().get_item(key)

    def set_item(self, key, value):
        if self.fail_writes:
            raise StorageError("disk full")
        super().set_item(key, value)


@pytest.fixture
def run():
    loop = asyncio.new_event_loop()
    yield loop.run_until_complete
    loop.close()


@pytest.fixture
def storage(tmp_path):
    s = FlakyStorage(tmp_path / "books.db")
    yield s
    s.close()


@pytest.fixture
def store(storage, run):
    s = BookStore(storage, today=lambda: TODAY)
    run(s.load())
    return s
