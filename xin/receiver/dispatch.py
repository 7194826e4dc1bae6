"""
Command stream dispatch.

This module reads the command stream line by line, turns each line into a
command and routes it to the injection engine or the layout switcher. Lines
are applied strictly in order; a command's side effects are complete before
the next line is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from xin.common.errors import ProtocolError
from xin.common.types import Command, LayoutCommand
from xin.protocol.parser import CommandParser
from xin.protocol.reader import LineReader
from xin.x11.injector import EventInjector
from xin.x11.layout import LayoutSwitcher

logger = logging.getLogger(__name__)

__all__ = ["DispatchStats", "Dispatcher"]


@dataclass
class DispatchStats:
    """Outcome of one stream run."""

    commands: int = 0
    dropped: int = 0
    protocol_errors: int = 0
    truncated: int = 0
    read_error: OSError | None = None

    @property
    def exit_status(self) -> int:
        """0 on clean end of stream, 1 after a read error."""
        return 1 if self.read_error is not None else 0


class Dispatcher:
    """Routes parsed commands to the injector or layout switcher."""

    def __init__(
        self,
        injector: EventInjector,
        layout_switcher: LayoutSwitcher,
        line_max: int = 64,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            injector:
                Injection engine for key, button and motion commands.
            layout_switcher:
                Coordinator for layout commands.
            line_max:
                Line buffer bound in bytes.
        """
        self._injector: EventInjector = injector
        self._layout_switcher: LayoutSwitcher = layout_switcher
        self._line_max: int = line_max

    def command_dispatch(self, command: Command) -> bool:
        """
        Apply one command.

        Args:
            command:
                Parsed command.

        Returns:
            True if the command reached the session, False if it was dropped.

        Raises:
            ProtocolError:
                Raised when a layout name is rejected.
            LayoutToolError:
                Raised when the layout utility cannot be started.
        """
        if isinstance(command, LayoutCommand):
            self._layout_switcher.layout_switch(command.name)
            return True
        return self._injector.command_inject(command)

    def line_handle(self, line: bytes, stats: DispatchStats) -> None:
        """
        Parse and apply one line, absorbing protocol errors.

        Args:
            line:
                Line contents without terminator.
            stats:
                Run statistics updated in place.
        """
        try:
            command: Command = CommandParser.line_parse(line)
            applied: bool = self.command_dispatch(command)
        except ProtocolError as exc:
            logger.warning("%s", exc)
            stats.protocol_errors += 1
            return

        if applied:
            stats.commands += 1
        else:
            stats.dropped += 1

    def stream_run(self, stream: BinaryIO) -> DispatchStats:
        """
        Consume the stream until end of input or a read error.

        Args:
            stream:
                Binary command stream.

        Returns:
            Run statistics; `read_error` is set when reading failed.
        """
        stats = DispatchStats()
        reader = LineReader(stream, line_max=self._line_max)
        lines = reader.lines()

        while True:
            try:
                line: bytes = next(lines)
            except StopIteration:
                break
            except OSError as exc:
                logger.error("reading input: %s", exc)
                stats.read_error = exc
                break
            self.line_handle(line, stats)

        stats.truncated = reader.truncated_count
        logger.info(
            "End of input: %d commands, %d dropped, %d protocol errors, %d truncated",
            stats.commands,
            stats.dropped,
            stats.protocol_errors,
            stats.truncated,
        )
        return stats
