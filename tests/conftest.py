import logging
import threading

import dns.exception
import dns.resolver
import pytest
import requests


class FakeResolver:
    """Answers A lookups for a fixed set of names; everything else is NXDOMAIN."""

    def __init__(self, resolvable=(), aaaa_only=(), errors=None):
        self.resolvable = set(resolvable)
        self.aaaa_only = set(aaaa_only)
        self.errors = errors or {}
        self.calls = []
        self._lock = threading.Lock()

    def resolve(self, name, rtype):
        with self._lock:
            self.calls.append((name, rtype))
        if name in self.errors:
            raise self.errors[name]
        if name in self.resolvable and rtype == 'A':
            return ['192.0.2.10']
        if name in self.aaaa_only:
            if rtype == 'AAAA':
                return ['2001:db8::10']
            raise dns.resolver.NoAnswer()
        if name in self.resolvable:
            raise dns.resolver.NoAnswer()
        raise dns.resolver.NXDOMAIN()

    def names(self):
        return [name for name, _ in self.calls]


class FakeRaw:
    def __init__(self):
        self.drained = False
        self.released = False

    def drain_conn(self):
        self.drained = True

    def release_conn(self):
        self.released = True


class FakeResponse:
    def __init__(self, status_code, headers=None):
        self.status_code = status_code
        self.headers = headers or {}
        self.raw = FakeRaw()
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """
    Maps URLs to a status code or an exception. Unknown URLs raise ConnectionError,
    unless ``default`` is set, in which case every URL answers with that status.
    """

    def __init__(self, responses=None, default=None, headers=None):
        self.responses = responses or {}
        self.default = default
        self.headers = headers
        self.calls = []
        self.returned = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, **kwargs):
        with self._lock:
            self.calls.append((url, kwargs))
        result = self.responses.get(url, self.default)
        if result is None:
            raise requests.exceptions.ConnectionError(f"refused: {url}")
        if isinstance(result, Exception):
            raise result
        response = FakeResponse(result, self.headers)
        self.returned.append(response)
        return response

    def close(self):
        self.closed = True

    def urls(self):
        return [url for url, _ in self.calls]


@pytest.fixture
def fake_resolver():
    return FakeResolver


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture(autouse=True)
def reset_subsplice_logger():
    yield
    logger = logging.getLogger("subsplice")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
