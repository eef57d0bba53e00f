from typing import Optional


class ServerError(Exception):
    """Base class for failures raised by the demo server itself."""


class ConfigError(ServerError):
    pass


class BindError(ServerError):
    """The listening socket could not be acquired."""

    def __init__(self, host: str, port: int, reason: Optional[str] = None):
        self.host = host
        self.port = port
        msg = f"cannot bind {host}:{port}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
