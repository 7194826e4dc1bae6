"""Unit tests for bounded line reading and over-length recovery"""

import io

from xin.protocol.reader import LineReader, ReaderState, terminator_find


class TestTerminatorFind:
    """Terminator lookup"""

    def test_newline(self):
        assert terminator_find(b"k 65\n") == 4

    def test_carriage_return_first(self):
        assert terminator_find(b"k 65\r\n") == 4

    def test_none(self):
        assert terminator_find(b"k 65") == -1


class TestLineReader:
    """Reading and truncation recovery"""

    def test_plain_lines(self):
        """Terminated lines are yielded without terminators"""
        reader = LineReader(io.BytesIO(b"k 65\nK 65\r\n"))
        assert list(reader.lines()) == [b"k 65", b"K 65"]

    def test_overlong_line_dropped_with_one_warning(self, caplog, warnings_of):
        """A line longer than the buffer yields nothing and warns once"""
        stream = io.BytesIO(b"m " + b"1" * 200 + b" 2\nk 65\n")
        reader = LineReader(stream, line_max=64)

        assert list(reader.lines()) == [b"k 65"]
        assert len(warnings_of(caplog)) == 1
        assert reader.truncated_count == 1
        assert reader.state == ReaderState.NORMAL

    def test_two_overlong_lines_warn_twice(self, caplog, warnings_of):
        """Each over-length line gets its own warning"""
        stream = io.BytesIO(b"x" * 100 + b"\n" + b"y" * 100 + b"\nk 1\n")
        reader = LineReader(stream, line_max=64)

        assert list(reader.lines()) == [b"k 1"]
        assert len(warnings_of(caplog)) == 2

    def test_longest_line_that_fits(self):
        """62 content bytes plus newline fit a 64-byte buffer"""
        line = b"m" + b" " * 58 + b"5 5"
        assert len(line) == 62
        reader = LineReader(io.BytesIO(line + b"\n"), line_max=64)
        assert list(reader.lines()) == [line]

    def test_one_byte_too_long(self, caplog, warnings_of):
        """63 content bytes no longer leave room for the terminator"""
        line = b"m" + b" " * 59 + b"5 5"
        reader = LineReader(io.BytesIO(line + b"\nk 65\n"), line_max=64)

        assert list(reader.lines()) == [b"k 65"]
        assert len(warnings_of(caplog)) == 1

    def test_unterminated_tail_is_truncated(self, caplog, warnings_of):
        """A final line without newline is not interpreted"""
        reader = LineReader(io.BytesIO(b"k 65\nk 66"))
        assert list(reader.lines()) == [b"k 65"]
        assert len(warnings_of(caplog)) == 1
