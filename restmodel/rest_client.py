# restmodel/rest_client.py
import logging
from concurrent.futures import Future
from typing import Any, Dict, Optional

import requests

from .exceptions import RequestFailedError
from .helpers import path_join
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class RestRequest:
    """
    A single HTTP call built by RestClient.
    Nothing is sent until exec() is called.
    """
    def __init__(self, client: "RestClient", method: str, url: str,
                 body: Any = None, headers: Dict = None):
        self.client = client
        self.method = method
        self.url = url
        self.body = body
        self.headers = headers or {}
        self.raw: Optional[requests.Response] = None

    @property
    def xhr(self) -> Optional[requests.Response]:
        return self.raw

    def exec(self) -> Future:
        """Send the request on the settings' worker pool"""
        logger.debug("Dispatching %s %s", self.method, self.url)
        return self.client.settings.executor.submit(self._send)

    def _send(self):
        try:
            response = self.client.settings.session.request(
                self.method,
                self.url,
                json=self.body,
                headers=self.headers,
                timeout=self.client.config["timeout"]
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", self.method, self.url, e)
            raise RequestFailedError(response=e, request=self) from e

        self.raw = response
        data = _decode(response)
        if not 200 <= response.status_code < 300:
            logger.warning("%s %s failed: %s", self.method, self.url, response.status_code)
            raise RequestFailedError(response=data, request=self, status_code=response.status_code)
        return data

    def __repr__(self):
        return f"<RestRequest {self.method} {self.url}>"


class RestClient:
    """
    HTTP consumer bound to one endpoint + api path pair from the settings registry.
    """
    def __init__(self, endpoint_name: str = None, api_path_name: str = None,
                 settings: Settings = None, config: Dict = None):
        self.settings = settings or default_settings
        self.config = {**self.settings.config, **(config or {})}
        self.endpoint_name = endpoint_name or self.settings.default_endpoint
        self.api_path_name = api_path_name or self.settings.default_api_path
        self.base_url = self.settings.resolve_endpoint(self.endpoint_name)
        self.api_path = self.settings.resolve_api_path(self.api_path_name)

    def build_url(self, path: str) -> str:
        if path and str(path).startswith(("http://", "https://")):
            return str(path)
        return path_join(self.base_url, self.api_path, path)

    def _request(self, method: str, path: str, body: Any = None, headers: Dict = None) -> RestRequest:
        merged_headers = {**self.config["headers"], **(headers or {})}
        request = RestRequest(self, method, self.build_url(path), body, merged_headers)
        logger.debug("Built %r", request)
        return request

    def get(self, path: str, headers: Dict = None) -> RestRequest:
        return self._request("GET", path, headers=headers)

    def post(self, path: str, body: Any = None, headers: Dict = None) -> RestRequest:
        return self._request("POST", path, body, headers)

    def put(self, path: str, body: Any = None, headers: Dict = None) -> RestRequest:
        return self._request("PUT", path, body, headers)

    def patch(self, path: str, body: Any = None, headers: Dict = None) -> RestRequest:
        return self._request("PATCH", path, body, headers)

    def delete(self, path: str, headers: Dict = None) -> RestRequest:
        return self._request("DELETE", path, headers=headers)


def _decode(response: requests.Response):
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
