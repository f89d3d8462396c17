# restmodel/settings.py
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Union

import requests

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Entry = Dict[str, object]

DEFAULT_CONFIG = {
    "timeout": 30,
    "headers": {
        "Content-Type": "application/json",
        "Accept": "application/json"
    },
    "max_workers": 4,
}


class Settings:
    """
    Registry of named endpoints (base URLs), named API paths and per-model headers.
    Entries are stored as: {"name": ..., "value": ..., "default": bool}
    """
    def __init__(self, config: Dict = None):
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.endpoints: Dict[str, str] = {}
        self.api_paths: Dict[str, str] = {}
        self.default_endpoint: Optional[str] = None
        self.default_api_path: Optional[str] = None
        self.model_headers: Dict[str, Dict[str, str]] = {}

        self._session = None
        self._executor = None
        self._lock = threading.Lock()

    # -- endpoints and api paths ------------------------------------------

    def add_endpoint(self, endpoint: Union[Entry, List[Entry]]):
        """Register one endpoint or a list of them"""
        if isinstance(endpoint, list):
            for item in endpoint:
                self._add_endpoint_entry(item)
        elif _is_valid_entry(endpoint):
            self._add_endpoint_entry(endpoint)
        else:
            raise ConfigurationError(
                'Endpoint provided is not valid or its format is wrong. '
                'Correct format is { name = "", value = "" }.'
            )

    def add_api_path(self, api_path: Union[Entry, List[Entry]]):
        """Register one API path or a list of them"""
        if isinstance(api_path, list):
            for item in api_path:
                self._add_api_path_entry(item)
        elif _is_valid_entry(api_path):
            self._add_api_path_entry(api_path)
        else:
            raise ConfigurationError(
                'ApiPaths provided is not valid or its format is wrong. '
                'Correct format is { name = "", value = "" }.'
            )

    def _add_endpoint_entry(self, item: Entry):
        if not _is_valid_entry(item):
            raise ConfigurationError(
                f'Endpoint list item {item!r} is not valid. '
                'Correct format is { name = "", value = "" }.'
            )
        self.endpoints[item["name"]] = item["value"]
        logger.info("Registered endpoint %s -> %s", item["name"], item["value"])
        if item.get("default"):
            if self.default_endpoint:
                raise ConfigurationError("There can be only one default endpoint")
            self.default_endpoint = item["name"]

    def _add_api_path_entry(self, item: Entry):
        if not _is_valid_entry(item):
            raise ConfigurationError(
                f'ApiPaths list item {item!r} is not valid. '
                'Correct format is { name = "", value = "" }.'
            )
        self.api_paths[item["name"]] = item["value"]
        logger.info("Registered api path %s -> %s", item["name"], item["value"])
        if item.get("default"):
            if self.default_api_path:
                raise ConfigurationError("There can be only one default api path")
            self.default_api_path = item["name"]

    def set_default_endpoint(self, endpoint_name: str):
        if not endpoint_name or not isinstance(endpoint_name, str):
            raise ConfigurationError("Default endpoint name must be provided and its type must be string.")
        if endpoint_name not in self.endpoints:
            raise ConfigurationError("Endpoint name provided must be added to endpoints before.")
        self.default_endpoint = endpoint_name

    def set_default_api_path(self, api_path_name: str):
        if not api_path_name or not isinstance(api_path_name, str):
            raise ConfigurationError("Default api path name must be provided and its type must be string.")
        if api_path_name not in self.api_paths:
            raise ConfigurationError("API path name provided must be added to ApiPaths before.")
        self.default_api_path = api_path_name

    def resolve_endpoint(self, endpoint_name: Optional[str] = None) -> str:
        """Base URL for the given endpoint name, or for the default endpoint"""
        name = endpoint_name or self.default_endpoint
        if not name:
            raise ConfigurationError("No endpoint name given and no default endpoint is set.")
        if name not in self.endpoints:
            raise ConfigurationError(f"Endpoint '{name}' has not been added.")
        return self.endpoints[name]

    def resolve_api_path(self, api_path_name: Optional[str] = None) -> str:
        name = api_path_name or self.default_api_path
        if not name:
            return ""
        if name not in self.api_paths:
            raise ConfigurationError(f"API path '{name}' has not been added.")
        return self.api_paths[name]

    # -- headers ----------------------------------------------------------

    def set_header(self, model_name: str, key: str, value: str):
        """Set a header sent with every request issued by the given model type"""
        self.model_headers.setdefault(model_name, {})[key] = value

    def get_headers(self, model_name: str) -> Dict[str, str]:
        return dict(self.model_headers.get(model_name, {}))

    # -- transport resources ----------------------------------------------

    @property
    def session(self) -> requests.Session:
        with self._lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session

    @session.setter
    def session(self, value: requests.Session):
        self._session = value

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config["max_workers"],
                    thread_name_prefix="restmodel"
                )
            return self._executor

    def close(self):
        """Shut down the worker pool and close the HTTP session"""
        # workers still read the session while the pool drains
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            session.close()

    def reset(self):
        """Forget every endpoint, api path and header (use with caution)"""
        self.endpoints.clear()
        self.api_paths.clear()
        self.model_headers.clear()
        self.default_endpoint = None
        self.default_api_path = None


def _is_valid_entry(entry) -> bool:
    return isinstance(entry, dict) and bool(entry.get("name")) and bool(entry.get("value"))


settings = Settings()
