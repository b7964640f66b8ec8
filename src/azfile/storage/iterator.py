from __future__ import annotations
import collections
import enum
import typing as t

from azfile.util import HaltFlag
from .base import StorageObject, StorageError


DEFAULT_PAGE_SIZE = 200


class PageStatus:
    """Cursor over a paginated listing: where to list from and where to resume."""

    def __init__(self, prefix: str, marker: t.Optional[str] = None, max_results: int = DEFAULT_PAGE_SIZE):
        self.prefix = prefix
        self.marker = marker
        self.max_results = max_results

    def __repr__(self):
        return f"PageStatus(prefix={self.prefix!r}, marker={self.marker!r}, max_results={self.max_results})"


class ObjectPage:

    def __init__(self, status: PageStatus):
        self.status = status
        self.data: list[StorageObject] = []
        self.done = False


class IteratorState(enum.Enum):

    READY = 'READY'
    FETCHING = 'FETCHING'
    EXHAUSTED = 'EXHAUSTED'


NextPageCallback = t.Callable[[ObjectPage], None]


class ObjectIterator:
    """Lazy, single-pass iterator over the objects of a paginated listing.

        ``next_page`` is called with an ObjectPage wrapping this iterator's cursor.
        It must append the page's objects to ``page.data``, and either advance
        ``page.status.marker`` or set ``page.done`` once the backend reports the
        listing is complete.

        Errors raised by ``next_page`` are passed to the caller and then re-raised
        on every later call, so an iterator that failed never yields anything more.
        Start a new listing to retry.
    """

    def __init__(self, next_page: NextPageCallback, status: PageStatus, halt_flag: t.Optional[HaltFlag] = None):
        self._next_page = next_page
        self._status = status
        self._halt_flag = halt_flag
        self._buffer: collections.deque[StorageObject] = collections.deque()
        self._state = IteratorState.READY
        self._error: t.Optional[BaseException] = None
        self.page_count = 0

    @property
    def state(self) -> IteratorState:
        return self._state

    def __iter__(self):
        return self

    def __next__(self) -> StorageObject:
        while not self._buffer:
            if self._error is not None:
                raise self._error
            if self._state == IteratorState.EXHAUSTED:
                raise StopIteration
            if self._state == IteratorState.FETCHING:
                raise StorageError("Listing iterator is already fetching a page, it cannot be shared", 4000)
            self._fetch()
        return self._buffer.popleft()

    def _fetch(self):
        self._state = IteratorState.FETCHING
        page = ObjectPage(self._status)
        try:
            if self._halt_flag is not None:
                self._halt_flag.check_continue()
            self._next_page(page)
        except BaseException as ex:
            self._error = ex
            self._state = IteratorState.EXHAUSTED
            raise
        self.page_count += 1
        self._buffer.extend(page.data)
        self._state = IteratorState.EXHAUSTED if page.done else IteratorState.READY
