"""Line protocol parsing into typed commands

Forms (fields separated by whitespace):

    l <name>                 switch keyboard layout
    k <keysym> / K <keysym>  key press / release by keysym
    k <unused> <keycode>     key press by explicit keycode (K: release)
    b <unused> <button>      button press (B: release)
    m <dx> <dy>              relative pointer motion

Trailing fields after the last one a form uses are ignored.
"""

import re

from xin.common.errors import ProtocolError
from xin.common.types import (
    ButtonCommand,
    Command,
    KeyAction,
    KeyCommand,
    LayoutCommand,
    MotionCommand,
)

KEY_ACTIONS = {"k": KeyAction.PRESS, "K": KeyAction.RELEASE}
BUTTON_ACTIONS = {"b": KeyAction.PRESS, "B": KeyAction.RELEASE}
MOTION_CODE = "m"
LAYOUT_CODE = "l"

# Keycodes and buttons travel in a CARD8 field
CARD8_MAX = 255

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def integer_parse(field: str) -> int:
    """
    Parse a signed decimal integer field

    Raises:
        ProtocolError: If the field is not a plain decimal integer
    """
    if not _INTEGER_RE.match(field):
        raise ProtocolError("parse error; invalid or incomplete format")
    return int(field)


def card8_parse(field: str, what: str) -> int:
    """Parse an integer that must fit in an unsigned byte"""
    value = integer_parse(field)
    if not 0 <= value <= CARD8_MAX:
        raise ProtocolError(f"parse error; {what} {value} out of range")
    return value


class CommandParser:
    """Classifies one terminated line into a command"""

    @staticmethod
    def line_parse(line: bytes) -> Command:
        """
        Parse a line (terminator already stripped)

        Args:
            line: Raw line bytes

        Returns:
            Parsed command

        Raises:
            ProtocolError: If the line is malformed or uses an unknown control
        """
        try:
            text = line.decode("ascii")
        except UnicodeDecodeError:
            raise ProtocolError("parse error; non-ASCII input") from None

        if text.startswith(LAYOUT_CODE) and len(text) > 2 and text[1] == " ":
            return LayoutCommand(name=text[2:])

        fields = text.split()

        # Two fields: keysym form, keycode resolved through the active mapping
        if len(fields) == 2 and fields[0] in KEY_ACTIONS:
            return KeyCommand(action=KEY_ACTIONS[fields[0]], keysym=integer_parse(fields[1]))

        # Fields past the third are not read
        if len(fields) < 3 or len(fields[0]) != 1:
            raise ProtocolError("parse error; invalid or incomplete format")

        code = fields[0]
        if code == MOTION_CODE:
            return MotionCommand(delta_x=integer_parse(fields[1]), delta_y=integer_parse(fields[2]))
        if code in BUTTON_ACTIONS:
            integer_parse(fields[1])
            return ButtonCommand(
                action=BUTTON_ACTIONS[code], button=card8_parse(fields[2], "button")
            )
        if code in KEY_ACTIONS:
            return KeyCommand(
                action=KEY_ACTIONS[code],
                keysym=integer_parse(fields[1]),
                keycode=card8_parse(fields[2], "keycode"),
            )

        # Fields must still be integers for the line to be well-formed
        integer_parse(fields[1])
        integer_parse(fields[2])
        raise ProtocolError("parse error; unknown control")
