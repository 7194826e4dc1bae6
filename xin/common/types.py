"""Common types and data structures for xin"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class KeyAction(Enum):
    """Press or release, selected by the case of the command character"""
    PRESS = "press"
    RELEASE = "release"


class InjectionMethod(Enum):
    """How key events reach the session, fixed for the process lifetime"""
    XTEST = "xtest"          # Faithful: server synthesizes input, honors grabs
    SENDEVENT = "sendevent"  # Direct delivery to the focus window


@dataclass(frozen=True)
class Position:
    """2D position coordinates"""
    x: int
    y: int


@dataclass(frozen=True)
class ScreenGeometry:
    """Screen dimensions"""
    width: int
    height: int

    def clamp(self, x: int, y: int) -> Position:
        """Clamp coordinates per axis into [0, width] x [0, height]"""
        return Position(x=min(max(x, 0), self.width), y=min(max(y, 0), self.height))


@dataclass(frozen=True)
class KeyCommand:
    """
    Key press/release.

    Exactly one of keysym or keycode drives resolution: a 2-field line carries
    a keysym, a 3-field line an explicit keycode (keysym is then the unused
    first field, consulted only when the keycode is 0).
    """
    action: KeyAction
    keysym: int
    keycode: Optional[int] = None

    def isPress(self) -> bool:
        """Check if this is a key press (vs release)"""
        return self.action == KeyAction.PRESS


@dataclass(frozen=True)
class ButtonCommand:
    """Pointer button press/release"""
    action: KeyAction
    button: int

    def isPress(self) -> bool:
        """Check if this is a button press (vs release)"""
        return self.action == KeyAction.PRESS


@dataclass(frozen=True)
class MotionCommand:
    """Relative pointer motion; positive deltas move toward the origin"""
    delta_x: int
    delta_y: int


@dataclass(frozen=True)
class LayoutCommand:
    """Keyboard layout switch request"""
    name: str


Command = Union[KeyCommand, ButtonCommand, MotionCommand, LayoutCommand]
