"""Backend factory functions."""

from __future__ import annotations

from xin.common.errors import SessionError
from xin.common.types import InjectionMethod
from xin.input.backend import DisplaySession, KeyInjectionStrategy
from xin.x11.display import X11Session
from xin.x11.injector import EventInjector, SendEventKeyStrategy, XTestKeyStrategy


def keyStrategy_create(method: InjectionMethod, session: DisplaySession) -> KeyInjectionStrategy:
    """
    Create the key injection strategy for a method.

    Args:
        method: Selected injection method
        session: Display session the strategy drives

    Returns:
        Key injection strategy
    """
    if method == InjectionMethod.XTEST:
        return XTestKeyStrategy(session)
    if method == InjectionMethod.SENDEVENT:
        return SendEventKeyStrategy(session)
    raise ValueError(f"Unsupported injection method '{method}'. Supported: xtest, sendevent.")


def eventInjector_create(method: InjectionMethod, session: X11Session) -> EventInjector:
    """
    Create the injection engine, checking XTEST when the faithful method is chosen.

    Args:
        method: Selected injection method
        session: Connected X11 session

    Returns:
        Event injector bound to the session

    Raises:
        SessionError: If XTEST is required but not advertised by the server
    """
    if method == InjectionMethod.XTEST and not session.xtestExtension_verify():
        raise SessionError("XTEST not available; try xin -s")
    return EventInjector(session, keyStrategy_create(method, session))
