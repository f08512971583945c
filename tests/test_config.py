"""Unit tests for Parameters defaults, env loading and validation."""
from unittest.mock import patch

import pytest

from xiaoi.config import REQ_URL, Parameters, get_parameters
from xiaoi.errors import InvalidParametersError


def test_request_url_constant():
    assert REQ_URL == "http://nlp.xiaoi.com/ask.do"


def test_get_parameters_defaults(monkeypatch):
    """Unset env falls back to defaults (8 connections, 10000 queue, memory queue, unescaped body)."""
    for name in (
        "XIAOI_APP_KEY", "XIAOI_APP_SECRET", "XIAOI_CONNECTIONS", "XIAOI_QUEUE_SIZE",
        "XIAOI_TIMEOUT_SECONDS", "XIAOI_URL", "QUEUE_TYPE", "XIAOI_URL_ENCODE_BODY",
    ):
        monkeypatch.delenv(name, raising=False)
    with patch("xiaoi.config.load_dotenv"):
        p = get_parameters()
    assert p.connections == 8
    assert p.queue_size == 10000
    assert p.queue_type == "memory"
    assert p.url == REQ_URL
    assert p.url_encode_body is False


def test_get_parameters_from_env(monkeypatch):
    monkeypatch.setenv("XIAOI_APP_KEY", "k")
    monkeypatch.setenv("XIAOI_APP_SECRET", "s")
    monkeypatch.setenv("XIAOI_CONNECTIONS", "5")
    monkeypatch.setenv("XIAOI_QUEUE_SIZE", "100")
    monkeypatch.setenv("XIAOI_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("QUEUE_TYPE", "redis")
    monkeypatch.setenv("XIAOI_URL_ENCODE_BODY", "yes")
    with patch("xiaoi.config.load_dotenv"):
        p = get_parameters()
    assert (p.key, p.secret, p.connections, p.queue_size, p.timeout) == ("k", "s", 5, 100, 2.5)
    assert p.queue_type == "redis"
    assert p.url_encode_body is True
    p.validate()


def test_validate_accepts_minimal_valid():
    Parameters(key="k", secret="s", connections=1, queue_size=2, timeout=1).validate()


@pytest.mark.parametrize(
    "kwargs, fragment",
    [
        ({"key": ""}, "key"),
        ({"secret": ""}, "secret"),
        ({"connections": 0}, "connections"),
        ({"queue_size": 7}, "queue_size"),
        ({"timeout": -1}, "timeout"),
        ({"close_timeout": 0}, "close_timeout"),
        ({"queue_type": "pubsub"}, "queue_type"),
    ],
)
def test_validate_rejects(kwargs, fragment):
    base = dict(key="k", secret="s", connections=8, queue_size=100, timeout=1.0)
    base.update(kwargs)
    with pytest.raises(InvalidParametersError, match=fragment):
        Parameters(**base).validate()


def test_invalid_parameters_is_value_error():
    with pytest.raises(ValueError):
        Parameters().validate()


@pytest.mark.parametrize("name, value", [("XIAOI_CONNECTIONS", "eight"), ("XIAOI_TIMEOUT_SECONDS", "1s")])
def test_get_parameters_malformed_number(monkeypatch, name, value):
    """A non-numeric env value raises InvalidParametersError naming the variable."""
    monkeypatch.setenv(name, value)
    with patch("xiaoi.config.load_dotenv"):
        with pytest.raises(InvalidParametersError, match=name):
            get_parameters()


def test_validate_allows_queue_size_equal_to_connections():
    Parameters(key="k", secret="s", connections=4, queue_size=4, timeout=1).validate()
