import threading
import time

import pytest
import requests

from devenv_demo.app import app
from devenv_demo.server import start


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c


def wait_until_ready(url: str, attempts: int = 50) -> None:
    for _ in range(attempts):
        try:
            requests.get(url, timeout=1.0)
            return
        except requests.ConnectionError:
            time.sleep(0.1)
    raise RuntimeError(f"server at {url} never came up")


@pytest.fixture
def live_server():
    """Real server on an ephemeral loopback port, serving in a background thread."""
    server = start(('127.0.0.1', 0))
    t = threading.Thread(target=server.serve_forever, kwargs={'poll_interval': 0.05}, daemon=True)
    t.start()
    wait_until_ready(server.url + "/")
    yield server
    server.shutdown()
    t.join(timeout=5)
