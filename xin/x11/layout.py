"""Keyboard layout switching synchronized with the server's MappingNotify"""

import logging
import subprocess
from enum import Enum

from xin.common.errors import LayoutToolError, ProtocolError
from xin.input.backend import DisplaySession

logger = logging.getLogger(__name__)


class LayoutSwitchState(Enum):
    """Progress of a layout switch"""
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_TOOL = "awaiting_tool"
    AWAITING_MAPPING_NOTIFY = "awaiting_mapping_notify"


class LayoutTool:
    """Runs the external layout utility (setxkbmap by default)"""

    def __init__(self, command: str = "setxkbmap") -> None:
        """
        Initialize layout tool runner

        Args:
            command: Executable that takes the layout name as its only argument
        """
        self._command: str = command

    @property
    def command(self) -> str:
        return self._command

    def layout_apply(self, name: str) -> None:
        """
        Run the utility synchronously; its exit status is logged, not acted on

        Args:
            name: Validated layout name

        Raises:
            LayoutToolError: If the utility cannot be started
        """
        try:
            result = subprocess.run([self._command, name], check=False)
        except OSError as e:
            raise LayoutToolError(f"cannot run {self._command}: {e}") from e
        logger.debug(f"{self._command} {name} exited with status {result.returncode}")


class LayoutSwitcher:
    """
    Switches keyboard layout and blocks until the new mapping is loaded

    Keysym to keycode translation is only correct after the server's
    MappingNotify has been applied, so no further command is interpreted
    until one arrives. There is no timeout: a tool that never changes the
    mapping stalls the receiver.
    """

    def __init__(
        self,
        session: DisplaySession,
        tool: LayoutTool,
        command_max: int = 128,
        sentinel_keysym: str = "Super_L",
    ) -> None:
        """
        Initialize layout switcher

        Args:
            session: Display session
            tool: External layout utility runner
            command_max: Bound on the composed "<tool> <name>" command length
            sentinel_keysym: Key grabbed on the root window before switching
        """
        self._session: DisplaySession = session
        self._tool: LayoutTool = tool
        self._command_max: int = command_max
        self._sentinel_keysym: str = sentinel_keysym
        self._state: LayoutSwitchState = LayoutSwitchState.IDLE

    @property
    def state(self) -> LayoutSwitchState:
        return self._state

    def layoutName_validate(self, name: str) -> None:
        """
        Check a layout name is plain ASCII letters and fits the command bound

        Args:
            name: Requested layout name

        Raises:
            ProtocolError: If the name is empty, has other characters or is too long
        """
        if not name or not (name.isascii() and name.isalpha()):
            raise ProtocolError("layout name cannot contain special characters")
        if len(f"{self._tool.command} {name}") >= self._command_max:
            raise ProtocolError("layout name too long")

    def layout_switch(self, name: str) -> None:
        """
        Validate, run the layout utility and wait for the mapping change

        Args:
            name: Requested layout name

        Raises:
            ProtocolError: If the name is rejected (nothing was changed)
            LayoutToolError: If the utility cannot be started
        """
        self._state = LayoutSwitchState.VALIDATING
        try:
            self.layoutName_validate(name)

            self._session.key_grab(self._sentinel_keysym)
            self._session.connection_sync()

            stale = self._session.mappingNotify_drain()
            if stale:
                logger.debug(f"Applied {stale} queued mapping notification(s)")

            self._state = LayoutSwitchState.AWAITING_TOOL
            logger.info(f"Switching keyboard layout to '{name}'")
            self._tool.layout_apply(name)

            self._state = LayoutSwitchState.AWAITING_MAPPING_NOTIFY
            self._session.mappingNotify_wait()

            # Layout changes often arrive as several notifications in a burst
            self._session.mappingNotify_drain()
            logger.info(f"Keyboard layout '{name}' active")
        finally:
            self._state = LayoutSwitchState.IDLE
