import io
import unittest as ut

from azfile.util import HaltFlag, ThreadingHaltFlag, HaltInterrupt
from azfile.storage.iowrap import CallbackReader, LimitedReader, HaltableReader


class TestReaders(ut.TestCase):

    def test_callback_reader(self):
        seen = []
        reader = CallbackReader(io.BytesIO(b"abcdef"), seen.append)
        self.assertEqual(reader.read(4), b"abcd")
        self.assertEqual(reader.read(4), b"ef")
        self.assertEqual(reader.read(4), b"")
        self.assertEqual(seen, [4, 2])

    def test_limited_reader(self):
        reader = LimitedReader(io.BytesIO(b"abcdef"), 4)
        self.assertEqual(len(reader), 4)
        self.assertEqual(reader.read(3), b"abc")
        self.assertEqual(len(reader), 1)
        self.assertEqual(reader.read(3), b"d")
        self.assertEqual(reader.read(3), b"")

    def test_limited_reader_read_all(self):
        self.assertEqual(LimitedReader(io.BytesIO(b"abcdef"), 5).read(), b"abcde")

    def test_limited_reader_short_source(self):
        reader = LimitedReader(io.BytesIO(b"ab"), 5)
        self.assertEqual(reader.read(), b"ab")
        self.assertEqual(reader.read(), b"")

    def test_haltable_reader(self):
        flag = ThreadingHaltFlag()
        reader = HaltableReader(io.BytesIO(b"abcdef"), flag)
        self.assertEqual(reader.read(2), b"ab")
        flag.halt()
        with self.assertRaises(HaltInterrupt):
            reader.read(2)


class TestHaltFlag(ut.TestCase):

    def test_iterate_without_flag(self):
        self.assertEqual(list(HaltFlag.iterate([1, 2, 3])), [1, 2, 3])

    def test_iterate_raises_once_halted(self):
        flag = ThreadingHaltFlag()
        seen = []
        with self.assertRaises(HaltInterrupt):
            for x in HaltFlag.iterate([1, 2, 3], flag):
                seen.append(x)
                flag.halt()
        self.assertEqual(seen, [1])
