import logging

import pytest

from subsplice.config import (ALIVE_BELOW_400, MAX_WORKERS, SHORT_DOMAIN_PREPEND, ConfigError, RunConfig,
                              parse_duration, require_inputs, setup_logging)
from subsplice.utils.dns_utils import build_resolver
from subsplice.utils.http_utils import build_session


@pytest.mark.parametrize("value, expected", [
    ("3s", 3.0),
    ("500ms", 0.5),
    ("1m30s", 90.0),
    ("1.5s", 1.5),
    ("2", 2.0),
    (" 4S ", 4.0),
    ("1h", 3600.0),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "abc", "3x", "s", "5s garbage", "-1s"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ConfigError):
        parse_duration(value)


def test_default_config_is_valid():
    config = RunConfig().validate()
    assert config.workers == 300
    assert config.timeout == 3.0
    assert config.debug is False


@pytest.mark.parametrize("kwargs", [
    {"workers": 0},
    {"workers": -5},
    {"workers": MAX_WORKERS + 1},
    {"workers": "10"},
    {"workers": True},
    {"timeout": 0},
    {"timeout": -1.0},
    {"timeout": 10000},
    {"dns_timeout": 0},
    {"alive_policy": "maybe"},
    {"short_domain_policy": "sometimes"},
])
def test_invalid_config(kwargs):
    with pytest.raises(ConfigError):
        RunConfig(**kwargs).validate()


def test_alternative_policies_are_valid():
    RunConfig(alive_policy=ALIVE_BELOW_400, short_domain_policy=SHORT_DOMAIN_PREPEND).validate()


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "debug.log"
    logger = setup_logging(verbose=False, log_file=str(log_file))
    logging.getLogger("subsplice.phases.probing").debug("resolver detail")
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == "subsplice"
    assert len(logger.handlers) == 2
    assert "resolver detail" in log_file.read_text()


def test_setup_logging_replaces_handlers():
    setup_logging()
    logger = setup_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.DEBUG


def test_build_resolver():
    resolver = build_resolver(timeout=1.5, nameservers=["9.9.9.9"])
    assert resolver.timeout == 1.5
    assert resolver.lifetime == 1.5
    assert resolver.cache is None
    assert [str(ns) for ns in resolver.nameservers] == ["9.9.9.9"]


def test_build_session():
    session = build_session(pool_connections=10, pool_maxsize=5)
    adapter = session.get_adapter("https://example.com/")
    assert session.verify is False
    assert adapter._pool_connections == 10
    assert adapter._pool_maxsize == 5
    assert adapter.max_retries.total == 0
    session.close()


def test_require_inputs():
    require_inputs(["admin"], ["api.prod.evil.com"])
    with pytest.raises(ConfigError, match="words.txt has no usable entries"):
        require_inputs([], ["api.prod.evil.com"], "words.txt")
    with pytest.raises(ConfigError, match="No usable target domains"):
        require_inputs(["admin"], [])
