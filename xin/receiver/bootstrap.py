"""Receiver bootstrap helpers for config, session, and engine wiring."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from xin.common.config import Config, ConfigLoader
from xin.common.types import InjectionMethod
from xin.input.factory import eventInjector_create
from xin.receiver.dispatch import Dispatcher
from xin.x11.display import X11Session
from xin.x11.layout import LayoutSwitcher, LayoutTool

logger = logging.getLogger(__name__)


def configWithArgs_load(args: argparse.Namespace) -> Config:
    """
    Load config and apply CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Loaded config.

    Raises:
        FileNotFoundError: If an explicit --config path does not exist.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = Path(args.config) if args.config else None
    method: InjectionMethod | None = InjectionMethod.SENDEVENT if args.sendevent else None
    return ConfigLoader.configWithOverrides_load(
        file_path=config_path,
        display=args.display,
        method=method,
        log_level=getattr(args, "log_level", None),
    )


def dispatcher_create(config: Config, session: X11Session) -> Dispatcher:
    """
    Build the injection engine, layout switcher and dispatcher.

    Args:
        config: Loaded config.
        session: Connected X11 session.

    Returns:
        Dispatcher ready to consume a stream.

    Raises:
        SessionError: If XTEST is required but unavailable.
    """
    injector = eventInjector_create(config.injection.method, session)
    logger.info(f"Injection method: {config.injection.method.value}")

    layout_switcher = LayoutSwitcher(
        session=session,
        tool=LayoutTool(config.layout.command),
        command_max=config.layout.command_max,
        sentinel_keysym=config.layout.sentinel_keysym,
    )
    return Dispatcher(injector, layout_switcher, line_max=config.protocol.line_max)
