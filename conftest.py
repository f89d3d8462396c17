# conftest.py - shared fixtures for restmodel tests

import json

import pytest

from restmodel import Settings


class FakeResponse:
    """Minimal stand-in for requests.Response"""
    def __init__(self, status_code: int = 200, payload=None, text: str = None):
        self.status_code = status_code
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = ""
        self.content = self.text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class MockSession:
    """Mock session for testing without real HTTP calls"""
    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, response):
        """Queue a FakeResponse (or an exception to raise) for the next request"""
        self.responses.append(response)

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append({
            "method": method,
            "url": url,
            "json": json,
            "headers": headers,
            "timeout": timeout
        })
        response = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        pass


@pytest.fixture
def session():
    return MockSession()


@pytest.fixture
def registry(session):
    registry = Settings()
    registry.add_endpoint({"name": "api", "value": "https://x.test", "default": True})
    registry.add_api_path({"name": "v1", "value": "/api/v1", "default": True})
    registry.session = session
    yield registry
    registry.close()
