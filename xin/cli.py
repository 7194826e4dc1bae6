"""xin command-line interface"""

import argparse
import sys
from typing import NoReturn, Optional

from xin import __version__


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1"""

    def error(self, message: str) -> NoReturn:
        """
        Print usage and exit 1 on any unrecognized or malformed argument

        Args:
            message: argparse diagnostic
        """
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def arguments_parse(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list, None for sys.argv

    Returns:
        Parsed CLI arguments.
    """
    parser = UsageArgumentParser(
        prog="xin",
        description="Replay a forwarded keyboard/pointer command stream from stdin into X11",
        add_help=False,
    )

    parser.add_argument("--version", action="version", version=f"xin {__version__}")

    parser.add_argument(
        "-s",
        dest="sendevent",
        action="store_true",
        help="Deliver keys with SendEvent instead of XTEST (ignores grabs)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations)",
    )

    parser.add_argument(
        "--display", type=str, default=None, help="X11 display name (overrides config and $DISPLAY)"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (overrides config)"
    )

    parser.add_argument(
        "--info", action="store_true", help="Enable info logging (overrides config)"
    )

    parser.add_argument(
        "--warning", action="store_true", help="Enable warning logging (overrides config)"
    )

    parser.add_argument(
        "--error", action="store_true", help="Enable error logging (overrides config)"
    )

    args = parser.parse_args(argv)
    argsWithLogLevel_apply(args, logLevelOverride_get(args))
    return args


def logLevelOverride_get(args: argparse.Namespace) -> Optional[str]:
    """
    Resolve explicit log level override flags.

    The most restrictive flag wins.

    Args:
        args: Parsed CLI args.

    Returns:
        Selected log level or None.
    """
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def argsWithLogLevel_apply(args: argparse.Namespace, log_level: Optional[str]) -> None:
    """
    Apply optional log level override to args.

    Args:
        args: Parsed CLI args.
        log_level: Optional log level string.
    """
    if log_level is not None:
        setattr(args, "log_level", log_level)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """
    Main entry point for the xin command

    Args:
        argv: Argument list, None for sys.argv
    """
    args = arguments_parse(argv)

    try:
        from xin.receiver.main import receiver_run

        status = receiver_run(args)
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        print(f"xin: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(status)


if __name__ == "__main__":
    main()
