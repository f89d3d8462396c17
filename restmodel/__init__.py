# restmodel/__init__.py
from .rest_client import RestClient, RestRequest
from .base_model import RestBaseModel, ModelConfig
from .settings import Settings, settings
from .exceptions import (
    RestModelError,
    ConfigurationError,
    MissingIdError,
    InvalidModelError,
    RequestFailedError,
)

__version__ = "0.1.0"
__all__ = [
    "RestClient",
    "RestRequest",
    "RestBaseModel",
    "ModelConfig",
    "Settings",
    "settings",
    "RestModelError",
    "ConfigurationError",
    "MissingIdError",
    "InvalidModelError",
    "RequestFailedError",
]
