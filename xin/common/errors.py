"""Exception types shared across xin"""


class ProtocolError(ValueError):
    """A command line or layout name could not be interpreted"""


class ConfigError(ValueError):
    """Configuration file content is invalid"""


class SessionError(RuntimeError):
    """Display connection or required extension is unavailable"""


class LayoutToolError(RuntimeError):
    """The external layout utility could not be invoked"""
