import abc
import threading
import typing as t

from .exc import AzFileError


_TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")


class HaltInterrupt(KeyboardInterrupt):
    pass


class HaltFlag(t.Protocol):

    def check_continue(self):
        if not self._should_continue():
            raise HaltInterrupt()

    def _should_continue(self) -> bool:
        raise NotImplementedError()

    @staticmethod
    def iterate(iterable: t.Iterable, halt_flag=None):
        if halt_flag is None:
            yield from iterable
        else:
            for x in iterable:
                halt_flag.check_continue()
                yield x


class ThreadingHaltFlag(HaltFlag):

    def __init__(self, event: t.Optional[threading.Event] = None):
        self._event = event or threading.Event()

    def halt(self):
        self._event.set()

    def _should_continue(self) -> bool:
        return not self._event.is_set()


@t.runtime_checkable
class Readable(t.Protocol):

    @abc.abstractmethod
    def read(self, chunk_size: int) -> bytes:
        pass


@t.runtime_checkable
class Writable(t.Protocol):

    @abc.abstractmethod
    def write(self, b: bytes):
        pass


def parse_bool(value) -> t.Optional[bool]:
    """Parse a boolean flag the way the backend reports it, returning None if it can't be parsed."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
    return None
