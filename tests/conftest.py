"""Pytest configuration and fixtures for CCU control tests."""

from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from core.client import CCUClient
from payloads import BASE_URL, TOKEN


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects with a given body and status."""
    def _make(body: bytes, status_code: int = 200, url: str = BASE_URL) -> requests.Response:
        resp = requests.Response()
        resp.status_code = status_code
        resp.headers['Content-Type'] = 'text/xml'
        resp._content = body  # noqa: SLF001
        resp.url = url
        return resp
    return _make


@pytest.fixture
def session():
    """A mock requests session; set session.get.return_value per test."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    """A CCUClient wired to the mock session."""
    return CCUClient(BASE_URL, TOKEN, session=session)


@pytest.fixture
def last_request(session):
    """Return (url, params) of the last GET made on the mock session."""
    def _last():
        args, kwargs = session.get.call_args
        return args[0], kwargs['params']
    return _last
