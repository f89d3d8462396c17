# test_settings.py - settings registry tests

import threading
import time

import pytest

from conftest import FakeResponse
from restmodel import ConfigurationError, RestClient, Settings


def test_add_single_endpoint_and_default():
    """Test a single default endpoint is registered and resolvable"""
    s = Settings()
    s.add_endpoint({"name": "api", "value": "https://x.test", "default": True})

    assert s.endpoints == {"api": "https://x.test"}
    assert s.default_endpoint == "api"
    assert s.resolve_endpoint() == "https://x.test"
    assert s.resolve_endpoint("api") == "https://x.test"


def test_second_default_endpoint_fails():
    """Test only one default endpoint may be declared"""
    s = Settings()
    s.add_endpoint({"name": "api", "value": "https://x.test", "default": True})

    with pytest.raises(ConfigurationError) as exc_info:
        s.add_endpoint({"name": "api2", "value": "https://y.test", "default": True})

    assert "There can be only one default endpoint" in str(exc_info.value)
    assert s.default_endpoint == "api"


def test_second_default_endpoint_in_list_fails():
    """Test the one-default rule also holds for list entries"""
    s = Settings()
    with pytest.raises(ConfigurationError, match="only one default endpoint"):
        s.add_endpoint([
            {"name": "api", "value": "https://x.test", "default": True},
            {"name": "api2", "value": "https://y.test", "default": True},
        ])


def test_second_default_api_path_fails_for_single_and_list():
    s = Settings()
    s.add_api_path({"name": "v1", "value": "/v1", "default": True})

    with pytest.raises(ConfigurationError, match="only one default api path"):
        s.add_api_path({"name": "v2", "value": "/v2", "default": True})
    with pytest.raises(ConfigurationError, match="only one default api path"):
        s.add_api_path([{"name": "v3", "value": "/v3", "default": True}])


def test_list_failure_keeps_earlier_entries():
    """Test a failing list element aborts the rest but keeps what was applied"""
    s = Settings()
    with pytest.raises(ConfigurationError):
        s.add_endpoint([
            {"name": "a", "value": "https://a.test"},
            {"name": "b"},
            {"name": "c", "value": "https://c.test"},
        ])

    assert s.endpoints == {"a": "https://a.test"}


@pytest.mark.parametrize("entry", [None, "https://x.test", {"name": "api"}, {"value": "https://x.test"},
                                   {"name": "", "value": "https://x.test"}])
def test_invalid_endpoint_entry(entry):
    s = Settings()
    with pytest.raises(ConfigurationError, match='name = "", value = ""'):
        s.add_endpoint(entry)


def test_invalid_api_path_entry():
    s = Settings()
    with pytest.raises(ConfigurationError, match="ApiPaths provided is not valid"):
        s.add_api_path({"name": "v1"})


def test_set_default_endpoint_requires_known_name():
    s = Settings()
    s.add_endpoint([{"name": "a", "value": "https://a.test"}, {"name": "b", "value": "https://b.test"}])

    with pytest.raises(ConfigurationError, match="must be added to endpoints before"):
        s.set_default_endpoint("missing")
    with pytest.raises(ConfigurationError, match="must be provided"):
        s.set_default_endpoint("")

    s.set_default_endpoint("b")
    assert s.resolve_endpoint() == "https://b.test"


def test_set_default_api_path_requires_known_name():
    s = Settings()
    with pytest.raises(ConfigurationError, match="must be added to ApiPaths before"):
        s.set_default_api_path("v1")

    s.add_api_path({"name": "v1", "value": "/v1"})
    s.set_default_api_path("v1")
    assert s.resolve_api_path() == "/v1"


def test_resolution_without_defaults():
    s = Settings()
    assert s.resolve_api_path() == ""
    with pytest.raises(ConfigurationError):
        s.resolve_endpoint()
    with pytest.raises(ConfigurationError):
        s.resolve_endpoint("nope")


def test_model_headers():
    """Test headers are scoped per model name and returned as copies"""
    s = Settings()
    s.set_header("User", "X-Tenant", "acme")
    s.set_header("User", "Authorization", "Bearer abc")

    headers = s.get_headers("User")
    assert headers == {"X-Tenant": "acme", "Authorization": "Bearer abc"}
    assert s.get_headers("Post") == {}

    headers["X-Tenant"] = "other"
    assert s.get_headers("User")["X-Tenant"] == "acme"


def test_config_merges_over_defaults():
    s = Settings(config={"timeout": 5})
    assert s.config["timeout"] == 5
    assert s.config["headers"]["Accept"] == "application/json"


def test_reset_clears_registry():
    s = Settings()
    s.add_endpoint({"name": "api", "value": "https://x.test", "default": True})
    s.set_header("User", "X", "1")
    s.reset()

    assert s.endpoints == {}
    assert s.default_endpoint is None
    assert s.model_headers == {}
    s.add_endpoint({"name": "api2", "value": "https://y.test", "default": True})
    assert s.default_endpoint == "api2"


class SlowSession:
    """Session whose requests take a while, so work is still queued on close"""
    def __init__(self, delay: float = 0.2):
        self.delay = delay
        self.calls = 0
        self.closed = False

    def request(self, method, url, json=None, headers=None, timeout=None):
        time.sleep(self.delay)
        self.calls += 1
        return FakeResponse(200, {"ok": True})

    def close(self):
        self.closed = True


def test_close_drains_queued_requests():
    """Test close() waits for queued work instead of blocking the workers"""
    s = Settings(config={"max_workers": 1})
    s.add_endpoint({"name": "api", "value": "https://x.test", "default": True})
    slow = SlowSession()
    s.session = slow
    client = RestClient(settings=s)
    pending = [client.get("a").exec(), client.get("b").exec()]

    closer = threading.Thread(target=s.close, daemon=True)
    closer.start()
    closer.join(timeout=5)

    assert not closer.is_alive()
    assert [f.result(timeout=1) for f in pending] == [{"ok": True}, {"ok": True}]
    assert slow.calls == 2
    assert slow.closed
