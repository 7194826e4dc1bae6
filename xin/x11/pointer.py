"""Pointer position tracking and relative motion reconstruction"""

from typing import Optional

from xin.common.types import MotionCommand, Position
from xin.input.backend import DisplaySession


class PointerState:
    """
    Integrates relative motion deltas into a clamped absolute position

    The baseline is read from the server on first use only; afterwards the
    stored position is the sole source of truth, so physical pointer motion
    between commands is not observed.
    """

    def __init__(self, session: DisplaySession) -> None:
        """
        Initialize pointer state

        Args:
            session: Display session used for the baseline and screen bounds
        """
        self._session: DisplaySession = session
        self._position: Optional[Position] = None

    @property
    def valid(self) -> bool:
        """True once a baseline has been read from the session"""
        return self._position is not None

    def position_get(self) -> Optional[Position]:
        """Get last computed absolute position"""
        return self._position

    def motion_apply(self, command: MotionCommand) -> Position:
        """
        Apply a motion delta and return the new absolute position

        Deltas are subtracted (positive values move toward the origin) and
        each axis is clamped to [0, screen dimension]. Screen bounds are
        queried on every call.

        Args:
            command: Relative motion command

        Returns:
            Clamped absolute position, also stored as the next baseline
        """
        if self._position is None:
            self._position = self._session.pointerPosition_get()

        geometry = self._session.screenGeometry_get()
        self._position = geometry.clamp(
            self._position.x - command.delta_x,
            self._position.y - command.delta_y,
        )
        return self._position
