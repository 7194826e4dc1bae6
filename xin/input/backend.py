"""Backend protocols for the display session and key injection strategies."""

from __future__ import annotations

from typing import Any, Protocol

from xin.common.types import KeyCommand, Position, ScreenGeometry

Window = Any


class DisplaySession(Protocol):
    """Operations the injection engine and layout switcher need from a display."""

    def keysym_toKeycode(self, keysym: int) -> int:
        """Translate a keysym via the active mapping; 0 when unmapped."""

    def keysymModifiers_get(self, keysym: int) -> int:
        """Return the modifier bitmask bound to a keysym (0 for plain keys)."""

    def keycodeModifiers_get(self, keycode: int) -> int:
        """Return the modifier bitmask bound to a keycode (0 for plain keys)."""

    def pointerPosition_get(self) -> Position:
        """Query the absolute pointer position on the root window."""

    def screenGeometry_get(self) -> ScreenGeometry:
        """Query current screen dimensions."""

    def fakeKey_inject(self, keycode: int, is_press: bool) -> None:
        """Synthesize a key event through the server (XTEST)."""

    def fakeButton_inject(self, button: int, is_press: bool) -> None:
        """Synthesize a pointer button event through the server (XTEST)."""

    def fakeMotion_inject(self, position: Position) -> None:
        """Synthesize absolute pointer motion on the current screen (XTEST)."""

    def inputFocus_get(self) -> Window | None:
        """Return the focus window, X.InputFocus for PointerRoot, or None when unknown."""

    def rootWindow_get(self) -> Window:
        """Return the root window of screen 0."""

    def keyEvent_send(self, window: Window, keycode: int, is_press: bool, state: int) -> None:
        """Build a key event and deliver it straight to `window`."""

    def key_grab(self, keysym_name: str) -> None:
        """Grab a key by keysym name on the root window."""

    def connection_flush(self) -> None:
        """Flush queued requests to the server."""

    def connection_sync(self) -> None:
        """Flush and wait until the server has processed all requests."""

    def mappingNotify_drain(self) -> int:
        """Apply queued mapping notifications without blocking; return count."""

    def mappingNotify_wait(self) -> None:
        """Block until a mapping notification arrives and apply it."""


class KeyInjectionStrategy(Protocol):
    """How a parsed key command reaches the session."""

    def keyCommand_inject(self, command: KeyCommand) -> bool:
        """Inject a key command; False when it was dropped."""
