"""X11 display connection and the session operations xin needs"""

import logging
import os
from typing import Any, Optional

from Xlib import X, XK, error as xerror
from Xlib import display as xdisplay
from Xlib.display import Display
from Xlib.ext import xtest
from Xlib.protocol import event as xevent

from xin.common.errors import SessionError
from xin.common.types import Position, ScreenGeometry

logger = logging.getLogger(__name__)


class X11Session:
    """Owns the X11 connection and exposes injection, query and mapping primitives"""

    def __init__(self, display_name: Optional[str] = None) -> None:
        """
        Initialize display session

        Args:
            display_name: X11 display name (e.g., ':0'), None for $DISPLAY
        """
        self._display: Optional[Display] = None
        self._display_name: Optional[str] = display_name

    def connection_establish(self) -> None:
        """
        Establish connection to X11 display

        Raises:
            SessionError: If the display cannot be opened
        """
        target = self._display_name or os.environ.get("DISPLAY")
        try:
            self._display = xdisplay.Display(self._display_name)
        except (xerror.DisplayError, OSError) as e:
            if target is None:
                raise SessionError(
                    "X11 connection failed; DISPLAY environment variable not set?"
                ) from e
            raise SessionError(f"failed X11 connection to '{target}': {e}") from e
        logger.info(f"Connected to X11 display {target}")

    def connection_close(self) -> None:
        """Close X11 display connection"""
        if self._display is not None:
            self._display.close()
            self._display = None

    def display_get(self) -> Display:
        """
        Get X11 display object

        Returns:
            X11 Display object

        Raises:
            RuntimeError: If not connected to display
        """
        if self._display is None:
            raise RuntimeError("Not connected to X11 display")
        return self._display

    def __enter__(self) -> "X11Session":
        """Context manager entry"""
        self.connection_establish()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit"""
        self.connection_close()

    def xtestExtension_verify(self) -> bool:
        """
        Verify XTest extension is available

        Returns:
            True if XTest is available, False otherwise
        """
        display = self.display_get()
        ext_info = display.query_extension("XTEST")
        return ext_info is not None

    def rootWindow_get(self) -> Any:
        """Root window of screen 0"""
        return self.display_get().screen(0).root

    # ------------------------------------------------------------------
    # Keyboard mapping
    # ------------------------------------------------------------------

    def keysym_toKeycode(self, keysym: int) -> int:
        """
        Translate keysym to keycode using the cached keyboard mapping

        Args:
            keysym: X11 keysym

        Returns:
            Keycode, or 0 if the keysym is not mapped
        """
        return self.display_get().keysym_to_keycode(keysym)

    def keysymModifiers_get(self, keysym: int) -> int:
        """
        Modifier bits bound to any keycode that produces `keysym`

        Args:
            keysym: X11 keysym

        Returns:
            Modifier bitmask (ShiftMask, ControlMask, Mod1Mask, ...)
        """
        display = self.display_get()
        keycodes = {keycode for keycode, _index in display.keysym_to_keycodes(keysym)}
        return self._modifierMask_compute(keycodes)

    def keycodeModifiers_get(self, keycode: int) -> int:
        """
        Modifier bits bound to a keycode

        Args:
            keycode: X11 keycode

        Returns:
            Modifier bitmask
        """
        return self._modifierMask_compute({keycode})

    def _modifierMask_compute(self, keycodes: set[int]) -> int:
        """Fold modifier-map rows containing any of `keycodes` into a mask"""
        if not keycodes:
            return 0
        mask = 0
        modifier_map = self.display_get().get_modifier_mapping()
        for index, row in enumerate(modifier_map):
            if keycodes.intersection(code for code in row if code):
                mask |= 1 << index
        return mask

    # ------------------------------------------------------------------
    # Pointer and screen
    # ------------------------------------------------------------------

    def pointerPosition_get(self) -> Position:
        """
        Query current pointer position relative to the root of screen 0

        Returns:
            Current pointer position
        """
        pointer_data = self.rootWindow_get().query_pointer()
        return Position(x=pointer_data.root_x, y=pointer_data.root_y)

    def screenGeometry_get(self) -> ScreenGeometry:
        """
        Get screen geometry (dimensions), asked of the server on every call

        Returns:
            Screen geometry with width and height
        """
        geom = self.rootWindow_get().get_geometry()
        return ScreenGeometry(width=geom.width, height=geom.height)

    # ------------------------------------------------------------------
    # Injection
    # ------------------------------------------------------------------

    def fakeKey_inject(self, keycode: int, is_press: bool) -> None:
        """
        Press or release a key through XTest

        Args:
            keycode: X11 keycode
            is_press: True for press, False for release
        """
        display = self.display_get()
        xtest.fake_input(display, X.KeyPress if is_press else X.KeyRelease, detail=keycode)

    def fakeButton_inject(self, button: int, is_press: bool) -> None:
        """
        Press or release a pointer button through XTest

        Args:
            button: Button number (1=left, 2=middle, 3=right, 4/5=wheel)
            is_press: True for press, False for release
        """
        display = self.display_get()
        xtest.fake_input(display, X.ButtonPress if is_press else X.ButtonRelease, detail=button)

    def fakeMotion_inject(self, position: Position) -> None:
        """
        Move pointer to an absolute position on the current screen

        Args:
            position: Target position
        """
        display = self.display_get()
        # root=X.NONE keeps the pointer on its current screen
        xtest.fake_input(display, X.MotionNotify, detail=0, root=X.NONE, x=position.x, y=position.y)

    def inputFocus_get(self) -> Optional[Any]:
        """
        Query the window holding input focus

        PointerRoot focus is returned as X.InputFocus so the server routes
        the event to the window under the pointer.

        Returns:
            Focus window, X.InputFocus, or None when there is no focus or the
            query fails
        """
        try:
            reply = self.display_get().get_input_focus()
        except xerror.XError as e:
            logger.debug(f"GetInputFocus failed: {e}")
            return None
        if reply.focus == X.PointerRoot:
            return X.InputFocus
        if isinstance(reply.focus, int):
            return None
        return reply.focus

    def keyEvent_send(self, window: Any, keycode: int, is_press: bool, state: int) -> None:
        """
        Deliver a synthetic key event directly to a window (SendEvent)

        The receiving client sees send_event set and no grab applies.

        Args:
            window: Destination window (also used as subwindow), or
                X.InputFocus to let the server pick the focus window
            keycode: X11 keycode
            is_press: True for press, False for release
            state: Modifier state to report in the event
        """
        event_class = xevent.KeyPress if is_press else xevent.KeyRelease
        event_mask = X.KeyPressMask if is_press else X.KeyReleaseMask
        key_event = event_class(
            time=X.CurrentTime,
            root=self.rootWindow_get(),
            window=window,
            same_screen=1,
            child=X.NONE if window == X.InputFocus else window,
            root_x=0,
            root_y=0,
            event_x=0,
            event_y=0,
            state=state,
            detail=keycode,
        )
        if window == X.InputFocus:
            self.display_get().send_event(
                X.InputFocus, key_event, event_mask=event_mask, propagate=False
            )
            return
        window.send_event(key_event, event_mask=event_mask, propagate=False)

    def key_grab(self, keysym_name: str) -> None:
        """
        Passively grab a key on the root window

        Args:
            keysym_name: Keysym name such as "Super_L"
        """
        keysym = XK.string_to_keysym(keysym_name)
        keycode = self.keysym_toKeycode(keysym)
        if keycode == 0:
            logger.warning(f"No keycode for grab keysym '{keysym_name}'")
            return
        self.rootWindow_get().grab_key(keycode, 0, False, X.GrabModeSync, X.GrabModeAsync)

    def connection_flush(self) -> None:
        """Flush queued requests"""
        self.display_get().flush()

    def connection_sync(self) -> None:
        """Flush and wait for the server to process all requests"""
        self.display_get().sync()

    # ------------------------------------------------------------------
    # Mapping notifications
    # ------------------------------------------------------------------

    def mappingNotify_apply(self, event: Any) -> bool:
        """
        Refresh cached keyboard mapping from a MappingNotify event

        Args:
            event: X event of any type

        Returns:
            True if the event was a MappingNotify
        """
        if event.type != X.MappingNotify:
            return False
        if event.request == X.MappingKeyboard:
            self.display_get().refresh_keyboard_mapping(event)
            logger.debug(
                f"Keyboard mapping refreshed: first_keycode={event.first_keycode} "
                f"count={event.count}"
            )
        return True

    def mappingNotify_drain(self) -> int:
        """
        Apply MappingNotify events already queued, without blocking

        Other queued events are discarded; xin selects none on its own.

        Returns:
            Number of MappingNotify events seen
        """
        display = self.display_get()
        seen = 0
        while display.pending_events() > 0:
            if self.mappingNotify_apply(display.next_event()):
                seen += 1
        return seen

    def mappingNotify_wait(self) -> None:
        """Block on the event stream until a MappingNotify arrives"""
        display = self.display_get()
        while True:
            if self.mappingNotify_apply(display.next_event()):
                return
