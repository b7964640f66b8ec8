"""Readers that wrap another readable without altering the bytes passing through."""
import typing as t

from azfile.util import HaltFlag, Readable


IoCallback = t.Callable[[int], None]


class ReaderWrapper:

    def __init__(self, source: Readable):
        self._source = source

    def read(self, size: int = -1) -> bytes:
        return self._source.read(size)


class CallbackReader(ReaderWrapper):
    """Reports the number of bytes consumed on every read."""

    def __init__(self, source: Readable, callback: IoCallback):
        super().__init__(source)
        self._callback = callback

    def read(self, size: int = -1) -> bytes:
        data = self._source.read(size)
        if data:
            self._callback(len(data))
        return data


class LimitedReader(ReaderWrapper):
    """Stops after ``limit`` bytes, even if the source has more."""

    def __init__(self, source: Readable, limit: int):
        super().__init__(source)
        self._remaining = limit

    def read(self, size: int = -1) -> bytes:
        if self._remaining <= 0:
            return b''
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._source.read(size)
        self._remaining -= len(data)
        return data

    def __len__(self):
        return max(self._remaining, 0)


class HaltableReader(ReaderWrapper):

    def __init__(self, source: Readable, halt_flag: HaltFlag):
        super().__init__(source)
        self._halt_flag = halt_flag

    def read(self, size: int = -1) -> bytes:
        self._halt_flag.check_continue()
        return self._source.read(size)

