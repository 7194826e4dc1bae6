"""X11 event injection: XTest and SendEvent key strategies plus the engine"""

from __future__ import annotations

import logging

from xin.common.types import ButtonCommand, KeyCommand, MotionCommand
from xin.input.backend import DisplaySession, KeyInjectionStrategy
from xin.x11.pointer import PointerState

logger = logging.getLogger(__name__)


def keycode_resolve(session: DisplaySession, command: KeyCommand) -> int:
    """
    Pick the keycode for a key command

    An explicit non-zero keycode is used verbatim; otherwise the keysym is
    translated through the current mapping.

    Args:
        session: Display session
        command: Key command

    Returns:
        Keycode, or 0 if the keysym has no keycode
    """
    if command.keycode:
        return command.keycode
    return session.keysym_toKeycode(command.keysym)


class ModifierTracker:
    """Running modifier mask for events that bypass the server's own bookkeeping"""

    def __init__(self) -> None:
        self._state: int = 0

    @property
    def state(self) -> int:
        return self._state

    def mask_press(self, mask: int) -> int:
        """Add modifier bits on key press; returns the new state"""
        self._state |= mask
        return self._state

    def mask_release(self, mask: int) -> int:
        """Clear modifier bits on key release; returns the new state"""
        self._state &= ~mask
        return self._state


class XTestKeyStrategy:
    """Injects keys through XTest, leaving focus and modifiers to the server"""

    def __init__(self, session: DisplaySession) -> None:
        """
        Initialize XTest strategy

        Args:
            session: Display session
        """
        self._session: DisplaySession = session

    def keyCommand_inject(self, command: KeyCommand) -> bool:
        """
        Inject key press/release via XTest

        Args:
            command: Key command

        Returns:
            False if the keysym has no keycode and the event was dropped
        """
        keycode = keycode_resolve(self._session, command)
        if keycode == 0:
            logger.warning(f"couldn't find keycode for keysym {command.keysym:#x}")
            return False
        self._session.fakeKey_inject(keycode, command.isPress())
        self._session.connection_flush()
        logger.debug(f"XTest key {command.action.value}: keycode={keycode}")
        return True


class SendEventKeyStrategy:
    """
    Delivers key events straight to the focus window with SendEvent

    Ignores grabs and is marked send_event, so some clients filter it out.
    Modifier state is tracked here because the server does not see these keys.
    """

    def __init__(self, session: DisplaySession) -> None:
        """
        Initialize SendEvent strategy

        Args:
            session: Display session
        """
        self._session: DisplaySession = session
        self._modifiers: ModifierTracker = ModifierTracker()

    @property
    def modifiers(self) -> ModifierTracker:
        return self._modifiers

    def keyCommand_inject(self, command: KeyCommand) -> bool:
        """
        Build and send a key event to the focus window

        Args:
            command: Key command

        Returns:
            False if the keysym has no keycode and the event was dropped
        """
        focus = self._session.inputFocus_get()
        if focus is None:
            logger.warning("no input focus; sending events to root window")
            focus = self._session.rootWindow_get()

        keycode = keycode_resolve(self._session, command)
        if keycode == 0:
            logger.warning(f"couldn't find keycode for keysym {command.keysym:#x}")
            return False

        if command.keycode:
            mask = self._session.keycodeModifiers_get(keycode)
        else:
            mask = self._session.keysymModifiers_get(command.keysym)

        if command.isPress():
            state = self._modifiers.mask_press(mask)
        else:
            state = self._modifiers.mask_release(mask)

        self._session.keyEvent_send(focus, keycode, command.isPress(), state)
        self._session.connection_flush()
        logger.debug(
            f"SendEvent key {command.action.value}: keycode={keycode} state={state:#x}"
        )
        return True


class EventInjector:
    """Applies key, button and motion commands to the display session"""

    def __init__(self, session: DisplaySession, key_strategy: KeyInjectionStrategy) -> None:
        """
        Initialize event injector

        Args:
            session: Display session
            key_strategy: Strategy used for key commands, fixed for the injector's life
        """
        self._session: DisplaySession = session
        self._key_strategy: KeyInjectionStrategy = key_strategy
        self._pointer: PointerState = PointerState(session)

    @property
    def pointer(self) -> PointerState:
        return self._pointer

    def keyCommand_inject(self, command: KeyCommand) -> bool:
        """Inject a key command with the selected strategy"""
        return self._key_strategy.keyCommand_inject(command)

    def buttonCommand_inject(self, command: ButtonCommand) -> bool:
        """
        Press or release a pointer button via XTest

        Args:
            command: Button command
        """
        self._session.fakeButton_inject(command.button, command.isPress())
        self._session.connection_flush()
        logger.debug(f"Button {command.action.value}: button={command.button}")
        return True

    def motionCommand_inject(self, command: MotionCommand) -> bool:
        """
        Move the pointer by a relative delta using absolute XTest motion

        XTest relative motion misbehaves on some servers, so the absolute
        target is computed from tracked state.

        Args:
            command: Motion command
        """
        position = self._pointer.motion_apply(command)
        self._session.fakeMotion_inject(position)
        self._session.connection_flush()
        logger.debug(f"Pointer at ({position.x}, {position.y})")
        return True

    def command_inject(self, command: KeyCommand | ButtonCommand | MotionCommand) -> bool:
        """
        Inject any pointer or key command

        Args:
            command: Parsed command

        Returns:
            True if an event reached the session
        """
        if isinstance(command, KeyCommand):
            return self.keyCommand_inject(command)
        if isinstance(command, ButtonCommand):
            return self.buttonCommand_inject(command)
        if isinstance(command, MotionCommand):
            return self.motionCommand_inject(command)
        raise TypeError(f"Not an injectable command: {command!r}")
