"""Bounded line reader with over-length line recovery"""

import logging
from enum import Enum
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)

LINE_TERMINATORS = (b"\n", b"\r")


class ReaderState(Enum):
    """Whether the reader is inside an over-length line"""
    NORMAL = "normal"
    SKIPPING_OVERLONG = "skipping_overlong"


def terminator_find(chunk: bytes) -> int:
    """
    Locate the first line terminator in a chunk

    Args:
        chunk: Raw bytes read from the stream

    Returns:
        Index of the first CR or LF, or -1 if there is none
    """
    positions = [chunk.find(term) for term in LINE_TERMINATORS]
    found = [pos for pos in positions if pos >= 0]
    return min(found) if found else -1


class LineReader:
    """
    Reads terminated lines of at most `line_max - 1` bytes

    A read that fills the buffer without a terminator starts an over-length
    line: one warning is logged, then every buffer up to and including the
    one carrying the terminator is discarded. An unterminated tail at end of
    stream counts as truncated too.
    """

    def __init__(self, stream: BinaryIO, line_max: int = 64) -> None:
        """
        Initialize line reader

        Args:
            stream: Binary input stream (e.g. sys.stdin.buffer)
            line_max: Buffer size; one byte is reserved as in a C string buffer
        """
        self._stream: BinaryIO = stream
        self._chunk_max: int = line_max - 1
        self._state: ReaderState = ReaderState.NORMAL
        self._truncated_count: int = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def truncated_count(self) -> int:
        """Number of over-length lines dropped so far"""
        return self._truncated_count

    def lines(self) -> Iterator[bytes]:
        """
        Yield line contents without terminators until end of stream

        Raises:
            OSError: If reading the stream fails
        """
        while True:
            chunk = self._stream.readline(self._chunk_max)
            if not chunk:
                return

            end = terminator_find(chunk)
            if end < 0:
                if self._state == ReaderState.NORMAL:
                    logger.warning("parse error; truncated input")
                    self._truncated_count += 1
                self._state = ReaderState.SKIPPING_OVERLONG
                continue

            if self._state == ReaderState.SKIPPING_OVERLONG:
                # Tail of the dropped line
                self._state = ReaderState.NORMAL
                continue

            yield chunk[:end]
