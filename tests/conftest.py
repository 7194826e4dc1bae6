"""Pytest configuration and shared fixtures for xin tests

This module provides a recording fake display session used across the unit
tests in place of a live X11 connection.
"""

import logging
from typing import Any

import pytest

from xin.common.types import Position, ScreenGeometry

XK_A = 0x41
XK_a = 0x61
XK_Shift_L = 0xFFE1
XK_Control_L = 0xFFE3
SHIFT_MASK = 1 << 0
CONTROL_MASK = 1 << 2


class FakeSession:
    """In-memory display session that records every call in order"""

    def __init__(self) -> None:
        """Initialize fake session with a tiny US-like keymap"""
        self.keymap: dict[int, int] = {XK_A: 38, XK_a: 38, XK_Shift_L: 50, XK_Control_L: 37}
        self.modifier_keycodes: dict[int, int] = {50: SHIFT_MASK, 37: CONTROL_MASK}
        self.pointer: Position = Position(x=100, y=100)
        self.geometry: ScreenGeometry = ScreenGeometry(width=800, height=600)
        self.focus: Any = "focus-window"
        self.queued_mapping_notifies: int = 0
        self.calls: list[tuple[Any, ...]] = []

    def calls_named(self, name: str) -> list[tuple[Any, ...]]:
        """Return recorded calls with the given name"""
        return [call for call in self.calls if call[0] == name]

    def keysym_toKeycode(self, keysym: int) -> int:
        self.calls.append(("keysym_toKeycode", keysym))
        return self.keymap.get(keysym, 0)

    def keysymModifiers_get(self, keysym: int) -> int:
        return self.modifier_keycodes.get(self.keymap.get(keysym, 0), 0)

    def keycodeModifiers_get(self, keycode: int) -> int:
        return self.modifier_keycodes.get(keycode, 0)

    def pointerPosition_get(self) -> Position:
        self.calls.append(("pointerPosition_get",))
        return self.pointer

    def screenGeometry_get(self) -> ScreenGeometry:
        self.calls.append(("screenGeometry_get",))
        return self.geometry

    def fakeKey_inject(self, keycode: int, is_press: bool) -> None:
        self.calls.append(("fakeKey", keycode, is_press))

    def fakeButton_inject(self, button: int, is_press: bool) -> None:
        self.calls.append(("fakeButton", button, is_press))

    def fakeMotion_inject(self, position: Position) -> None:
        self.calls.append(("fakeMotion", position.x, position.y))

    def inputFocus_get(self) -> Any:
        return self.focus

    def rootWindow_get(self) -> Any:
        return "root-window"

    def keyEvent_send(self, window: Any, keycode: int, is_press: bool, state: int) -> None:
        self.calls.append(("keyEvent_send", window, keycode, is_press, state))

    def key_grab(self, keysym_name: str) -> None:
        self.calls.append(("key_grab", keysym_name))

    def connection_flush(self) -> None:
        self.calls.append(("flush",))

    def connection_sync(self) -> None:
        self.calls.append(("sync",))

    def mappingNotify_drain(self) -> int:
        self.calls.append(("mappingNotify_drain",))
        seen = self.queued_mapping_notifies
        self.queued_mapping_notifies = 0
        return seen

    def mappingNotify_wait(self) -> None:
        self.calls.append(("mappingNotify_wait",))


class FakeLayoutTool:
    """Layout tool stand-in that records invocations into the session log"""

    def __init__(self, session: FakeSession, command: str = "setxkbmap") -> None:
        self.command = command
        self._session = session
        self.invocations: list[str] = []

    def layout_apply(self, name: str) -> None:
        self.invocations.append(name)
        self._session.calls.append(("layout_apply", name))


@pytest.fixture
def fake_session() -> FakeSession:
    """Fresh recording display session"""
    return FakeSession()


@pytest.fixture
def fake_layout_tool(fake_session: FakeSession) -> FakeLayoutTool:
    """Recording layout tool bound to the fake session"""
    return FakeLayoutTool(fake_session)


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)


def warnings_get(caplog) -> list[logging.LogRecord]:
    """Return WARNING records captured so far"""
    return [record for record in caplog.records if record.levelno == logging.WARNING]


@pytest.fixture
def warnings_of():
    """Accessor for captured warning records"""
    return warnings_get

