"""xin receiver main entry point"""

import argparse
import logging
import sys

from xin.receiver.bootstrap import configWithArgs_load, dispatcher_create
from xin.receiver.receiver_logging import logging_setup
from xin.x11.display import X11Session

logger = logging.getLogger(__name__)


def receiver_run(args: argparse.Namespace) -> int:
    """
    Run the receiver until end of input

    Args:
        args: Parsed command line arguments

    Returns:
        Exit status: 0 on clean end of input, 1 after a read error

    Raises:
        SessionError: If the display or XTEST is unavailable
        LayoutToolError: If the layout utility cannot be started
    """
    config = configWithArgs_load(args)
    logging_setup(config.logging.level, config.logging.format, config.logging.file)

    with X11Session(config.display) as session:
        dispatcher = dispatcher_create(config, session)
        stats = dispatcher.stream_run(sys.stdin.buffer)

    return stats.exit_status
