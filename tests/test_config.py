import pytest

from devenv_demo.config import ListenAddress, listen_address, log_level
from devenv_demo.errors import ConfigError


def test_defaults():
    assert listen_address({}) == ListenAddress('0.0.0.0', 8080)


def test_port_from_platform_variable():
    assert listen_address({'PORT': '5000'}).port == 5000


def test_server_port_takes_precedence():
    addr = listen_address({'SERVER_PORT': '9000', 'PORT': '5000'})
    assert addr.port == 9000


def test_empty_values_fall_back_to_defaults():
    assert listen_address({'SERVER_PORT': '', 'PORT': '', 'SERVER_ADDRESS': ''}) == ListenAddress('0.0.0.0', 8080)


def test_server_address():
    addr = listen_address({'SERVER_ADDRESS': '127.0.0.1', 'PORT': '0'})
    assert addr == ('127.0.0.1', 0)
    assert str(addr) == '127.0.0.1:0'


@pytest.mark.parametrize('raw', ['http', '80.5', '-1', '65536'])
def test_invalid_port(raw):
    with pytest.raises(ConfigError, match='PORT'):
        listen_address({'PORT': raw})


def test_log_level():
    assert log_level({}) == 'INFO'
    assert log_level({'LOG_LEVEL': 'debug'}) == 'DEBUG'
    with pytest.raises(ConfigError):
        log_level({'LOG_LEVEL': 'chatty'})
