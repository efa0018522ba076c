class EchoError(Exception):
    """Base class for errors raised by the echo server."""


class ConfigError(EchoError):
    """Raised when the server configuration cannot be used to start."""


class RequestDumpError(EchoError):
    """Raised when a request cannot be written back as an HTTP request head."""
