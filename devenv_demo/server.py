"""HTTP server process for the welcome app.

Binds the listening socket itself so that a failed bind surfaces as a
BindError instead of Werkzeug printing to stderr and exiting, then hands the
bound socket to a threaded Werkzeug WSGI server.
"""
import logging
import os
import signal
import socket
import threading
from typing import Mapping, Optional, Tuple

from werkzeug.serving import BaseWSGIServer, get_sockaddr, make_server, select_address_family

from devenv_demo import config
from devenv_demo.app import app
from devenv_demo.errors import BindError, ServerError

logger = logging.getLogger(__name__)

LOG_FORMAT = '[%(name)s] %(levelname)s %(message)s'


class WelcomeServer:
    """A bound, not yet serving, WSGI server around the Flask app."""

    def __init__(self, sock: socket.socket, httpd: BaseWSGIServer, host: str):
        self._socket = sock
        self._httpd = httpd
        self._lock = threading.Lock()
        self._serving = False
        self._closed = False
        self.host = host
        self.port = sock.getsockname()[1]

    @property
    def address(self) -> config.ListenAddress:
        return config.ListenAddress(self.host, self.port)

    @property
    def url(self) -> str:
        host = self.host
        if host in ('0.0.0.0', '::', ''):
            host = '127.0.0.1'
        elif ':' in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    def serve_forever(self, poll_interval: float = 0.5) -> None:
        """Serve until shutdown() is called or the process is interrupted.

        Returns at once if the server was already shut down.
        """
        with self._lock:
            if self._closed:
                return
            self._serving = True
        try:
            self._httpd.serve_forever(poll_interval=poll_interval)
        except KeyboardInterrupt:
            logger.info("interrupted")
        finally:
            with self._lock:
                self._serving = False
            self.close()

    def shutdown(self) -> None:
        """Stop a serve_forever() loop running in another thread and free the port."""
        with self._lock:
            serving = self._serving
            if not serving:
                self._release()
        if serving:
            self._httpd.shutdown()
            self.close()

    def close(self) -> None:
        with self._lock:
            self._release()

    def _release(self) -> None:
        # caller holds self._lock
        if self._closed:
            return
        self._closed = True
        self._httpd.server_close()
        self._socket.close()
        logger.debug("released %s", self.address)

    def __enter__(self) -> 'WelcomeServer':
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


def _bind(host: str, port: int) -> socket.socket:
    family = select_address_family(host, port)
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        if os.name != 'nt':
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(get_sockaddr(host, port, family))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    return sock


def start(address: Tuple[str, int]) -> WelcomeServer:
    """Bind ``address`` and return a server ready to serve the welcome app.

    Raises BindError when the socket cannot be acquired (port in use,
    permission denied, unknown host). There is no retry.
    """
    host, port = address
    try:
        sock = _bind(host, port)
    except OSError as e:
        raise BindError(host, port, e.strerror or str(e)) from e
    httpd = make_server(host, port, app, threaded=True, fd=sock.fileno())
    server = WelcomeServer(sock, httpd, host)
    logger.debug("bound %s", server.address)
    return server


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the server in the foreground; return the process exit status."""
    logging.basicConfig(format=LOG_FORMAT, level=logging.INFO)
    try:
        logging.getLogger().setLevel(config.log_level(environ))
        server = start(config.listen_address(environ))
    except ServerError as e:
        logger.error("%s", e)
        return 1

    # SIGTERM stops the loop the same way Ctrl-C does
    previous = signal.signal(signal.SIGTERM, signal.default_int_handler)
    try:
        logger.info("listening on http://%s", server.address)
        server.serve_forever()
    except KeyboardInterrupt:
        # interrupted before the serving loop was entered
        logger.info("interrupted")
    finally:
        server.close()
        signal.signal(signal.SIGTERM, previous)
    logger.info("server stopped")
    return 0
