import logging
import os
from typing import Mapping, NamedTuple, Optional

from devenv_demo.errors import ConfigError

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = 'INFO'


class ListenAddress(NamedTuple):
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def _parse_port(raw: str, var: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"{var} must be an integer, got {raw!r}") from None
    if not 0 <= port <= 65535:
        raise ConfigError(f"{var} out of range: {port}")
    return port


def listen_address(environ: Optional[Mapping[str, str]] = None) -> ListenAddress:
    """Resolve the bind address from the environment.

    Resolution order for the port:
      1. SERVER_PORT
      2. PORT (set by most container platforms and buildpacks)
      3. 8080
    Host comes from SERVER_ADDRESS, default 0.0.0.0.
    """
    env = os.environ if environ is None else environ
    host = env.get('SERVER_ADDRESS') or DEFAULT_HOST
    for var in ('SERVER_PORT', 'PORT'):
        raw = env.get(var)
        if raw:
            return ListenAddress(host, _parse_port(raw.strip(), var))
    return ListenAddress(host, DEFAULT_PORT)


def log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    level = (env.get('LOG_LEVEL') or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"unknown LOG_LEVEL {level!r}")
    return level
