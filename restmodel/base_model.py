# restmodel/base_model.py
import logging
import types
from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Optional

from .exceptions import ConfigurationError, InvalidModelError, MissingIdError
from .fields import model_to_wire, resolve_field_value, wire_key, wire_to_model
from .helpers import (
    append_query_params_to_url,
    is_array,
    is_function,
    is_object,
    path_join,
    replace_url_params_with_values,
)
from .rest_client import RestClient, RestRequest
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ModelConfig:
    """
    Per-model-type configuration, attached to the class when it is defined.
    Known names are plain attributes; anything else lands in `extras`.
    """
    KNOWN = ("fields", "id_field", "paths", "endpoint_name", "api_path_name",
             "result_list_field", "settings")

    def __init__(self, parent: "ModelConfig" = None):
        self.fields: Dict[str, Dict] = dict(parent.fields) if parent else {}
        self.id_field: str = parent.id_field if parent else "id"
        self.paths: Dict[str, str] = dict(parent.paths) if parent else {}
        self.endpoint_name: Optional[str] = parent.endpoint_name if parent else None
        self.api_path_name: Optional[str] = parent.api_path_name if parent else None
        self.result_list_field = parent.result_list_field if parent else None
        self.settings: Settings = parent.settings if parent else default_settings
        self.extras: Dict[str, Any] = dict(parent.extras) if parent else {}

    def set(self, name: str, value):
        if name in self.KNOWN:
            setattr(self, name, value)
        else:
            self.extras[name] = value

    def get(self, name: str):
        if name in self.KNOWN:
            return getattr(self, name)
        return self.extras.get(name)


class hybridmethod:
    """
    Method with one implementation for instances and another for the class,
    e.g. `user.save()` versus `User.save(model=user)`.
    """
    def __init__(self, finstance: Callable, fclass: Callable = None):
        self.finstance = finstance
        self.fclass = fclass
        self.__doc__ = finstance.__doc__

    def classmethod(self, fclass: Callable) -> "hybridmethod":
        self.fclass = fclass
        return self

    def __get__(self, obj, objtype=None):
        if obj is None:
            return types.MethodType(self.fclass, objtype)
        return types.MethodType(self.finstance, obj)


def _has_id(value) -> bool:
    return value is not None and value != ""


def _resolved(value) -> Future:
    future = Future()
    future.set_result(value)
    return future


def _rejected(error: Exception) -> Future:
    future = Future()
    future.set_exception(error)
    return future


def _dispatch(request: RestRequest, generate_only: bool,
              on_success: Callable[[Any], Dict] = None) -> Future:
    """Execute the request and map its outcome, or only report the URL"""
    if generate_only:
        return _resolved({"requestURL": request.url})

    result = Future()

    def _done(sent: Future):
        if sent.cancelled():
            result.cancel()
            return
        error = sent.exception()
        if error is not None:
            result.set_exception(error)
            return
        response = sent.result()
        try:
            if on_success is None:
                result.set_result({"response": response, "request": request})
            else:
                result.set_result(on_success(response))
        except Exception as e:
            result.set_exception(e)

    request.exec().add_done_callback(_done)
    return result


class RestBaseModel:
    """
    Base class mapping plain objects to REST resources.

    Subclasses declare their configuration either as class keywords

        class User(RestBaseModel, fields={"id": {}, "name": {"map": "userName"}},
                   paths={"default": "users"}):
            pass

    or through `User.set_config(name, value)` before first use.
    """
    _config = ModelConfig()

    def __init_subclass__(cls, **config):
        super().__init_subclass__()
        # cls._config still resolves to the parent's config at this point
        cls._config = ModelConfig(parent=cls._config)
        for name, value in config.items():
            cls._config.set(name, value)

    def __init__(self, model: Dict = None, **values):
        source = {**(model or {}), **values}
        for field_name, field_def in self._config.fields.items():
            setattr(self, field_name, resolve_field_value(source, field_name, field_def))

    # -- configuration ----------------------------------------------------

    @classmethod
    def set_config(cls, name: str, value):
        cls._config.set(name, value)

    @classmethod
    def get_config(cls, name: str):
        return cls._config.get(name)

    @classmethod
    def set_header(cls, name: str, value: str):
        """Set a header sent with every request this model type issues"""
        cls._config.settings.set_header(cls.__name__, name, value)

    # -- conversion -------------------------------------------------------

    @classmethod
    def from_wire(cls, wire: Dict) -> "RestBaseModel":
        return wire_to_model(wire, cls)

    def to_wire(self) -> Dict:
        return model_to_wire(self)

    def to_dict(self) -> Dict:
        return {name: getattr(self, name, None) for name in self._config.fields}

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((type(self), getattr(self, self._config.id_field, None)))

    def __repr__(self):
        id_value = getattr(self, self._config.id_field, None)
        return f"<{type(self).__name__} {self._config.id_field}={id_value!r}>"

    # -- request building helpers -----------------------------------------

    @classmethod
    def _consumer(cls, endpoint_name: str = None, api_path_name: str = None) -> RestClient:
        config = cls._config
        return RestClient(
            endpoint_name=endpoint_name or config.endpoint_name,
            api_path_name=api_path_name or config.api_path_name,
            settings=config.settings
        )

    @classmethod
    def _path(cls, path: str) -> str:
        template = cls._config.paths.get(path)
        if template is None:
            raise ConfigurationError(f"Path '{path}' is not configured for {cls.__name__}.")
        return template

    @classmethod
    def _headers(cls) -> Dict[str, str]:
        return cls._config.settings.get_headers(cls.__name__)

    @classmethod
    def _payload(cls, model: "RestBaseModel", data_keys: Optional[List[str]] = None) -> Dict:
        if data_keys is None:
            return model_to_wire(model)
        unknown = [key for key in data_keys if key not in cls._config.fields]
        if unknown:
            raise ConfigurationError(f"Unknown fields for {cls.__name__}: {', '.join(unknown)}")
        return model_to_wire(model, data_keys)

    @classmethod
    def _id_wire_key(cls) -> str:
        return wire_key(cls._config.fields, cls._config.id_field)

    @classmethod
    def _create(cls, model: "RestBaseModel", consumer: RestClient, template: str,
                data: Dict, generate_only: bool) -> Future:
        """POST the payload and copy the server-assigned id back into the model"""
        id_key = cls._id_wire_key()
        data.pop(id_key, None)
        request = consumer.post(template, data, cls._headers())

        def _assign_id(response):
            if isinstance(response, dict) and id_key in response:
                setattr(model, cls._config.id_field, response[id_key])
            return {"response": response, "request": request}

        return _dispatch(request, generate_only, _assign_id)

    # -- CRUD -------------------------------------------------------------

    @hybridmethod
    def save(self, path: str = "default", endpoint_name: str = None, api_path_name: str = None,
             data_keys: List[str] = None, update_method: str = None,
             generate_only: bool = False) -> Future:
        """
        Create the resource when the model has no id, otherwise update it.
        Updates use PUT unless update_method="patch"; data_keys restricts the payload.
        Resolves {"response", "request"} or {"requestURL"} with generate_only.
        """
        cls = type(self)
        consumer = cls._consumer(endpoint_name, api_path_name)
        template = cls._path(path)
        id_value = getattr(self, cls._config.id_field, None)
        data = cls._payload(self, data_keys)

        if not _has_id(id_value):
            return cls._create(self, consumer, template, data, generate_only)

        if update_method == "patch":
            request = consumer.patch(path_join(template, id_value), data, cls._headers())
        else:
            data.pop(cls._id_wire_key(), None)
            request = consumer.put(path_join(template, id_value), data, cls._headers())
        return _dispatch(request, generate_only)

    @save.classmethod
    def save(cls, model: "RestBaseModel" = None, path: str = "default", endpoint_name: str = None,
             api_path_name: str = None, patch: List[str] = None,
             generate_only: bool = False) -> Future:
        """
        Save the given model. Raises InvalidModelError right away when `model`
        is not an instance of this class.
        With an id, `patch` lists the fields to PATCH; without it the full model is PUT.
        """
        if not isinstance(model, cls):
            raise InvalidModelError("model must be provided as option parameter")

        consumer = cls._consumer(endpoint_name, api_path_name)
        template = cls._path(path)
        id_value = getattr(model, cls._config.id_field, None)

        if not _has_id(id_value):
            return cls._create(model, consumer, template, cls._payload(model), generate_only)

        if isinstance(patch, list):
            request = consumer.patch(path_join(template, id_value), cls._payload(model, patch),
                                     cls._headers())
        else:
            data = cls._payload(model)
            data.pop(cls._id_wire_key(), None)
            request = consumer.put(path_join(template, id_value), data, cls._headers())
        return _dispatch(request, generate_only)

    @classmethod
    def get(cls, id=None, path: str = "default", endpoint_name: str = None,
            api_path_name: str = None, path_data: Dict = None, query_params: Dict = None,
            result_field: str = None, generate_only: bool = False) -> Future:
        """
        Fetch one resource by id.
        The default path gets "/{id}" appended; other paths carry their own placeholders.
        Resolves {"model", "response", "request"}.
        """
        consumer = cls._consumer(endpoint_name, api_path_name)
        template = cls._path(path)
        if not _has_id(id):
            return _rejected(MissingIdError())

        path_data = dict(path_data or {})
        if not _has_id(path_data.get("id")):
            path_data["id"] = id
        if path == "default":
            template = path_join(template, "{id}")
        url = append_query_params_to_url(
            replace_url_params_with_values(template, path_data),
            query_params
        )
        request = consumer.get(url, cls._headers())

        def _to_model(response):
            model = None
            if isinstance(response, dict):
                record = response
                if result_field and response.get(result_field):
                    record = response[result_field]
                if isinstance(record, dict):
                    model = wire_to_model(record, cls)
            return {"model": model, "response": response, "request": request}

        return _dispatch(request, generate_only, _to_model)

    @classmethod
    def all(cls, path: str = "default", endpoint_name: str = None, api_path_name: str = None,
            path_data: Dict = None, query_params: Dict = None, result_list_field=None,
            result_list: list = None, result_list_item_type: type = None,
            generate_only: bool = False) -> Future:
        """
        Fetch a list of resources.
        `result_list_field` is a response key or a callable returning the list.
        A supplied `result_list` is cleared and refilled in place.
        Resolves {"resultList", "response", "request"}.
        """
        consumer = cls._consumer(endpoint_name, api_path_name)
        url = append_query_params_to_url(
            replace_url_params_with_values(cls._path(path), path_data or {}),
            query_params
        )
        request = consumer.get(url, cls._headers())
        list_field = result_list_field or cls._config.result_list_field
        item_type = cls
        if (isinstance(result_list_item_type, type) and result_list_item_type is not RestBaseModel
                and issubclass(result_list_item_type, RestBaseModel)):
            item_type = result_list_item_type

        def _to_list(response):
            target = result_list if isinstance(result_list, list) else []
            if is_function(list_field):
                items = list_field(response)
            elif list_field and is_object(response) and is_array(response.get(list_field)):
                items = response[list_field]
            else:
                items = response
            target.clear()
            if is_array(items):
                target.extend(wire_to_model(item, item_type) for item in items if is_object(item))
            logger.debug("%s.all loaded %d items", cls.__name__, len(target))
            return {"resultList": target, "response": response, "request": request}

        return _dispatch(request, generate_only, _to_list)

    @hybridmethod
    def delete(self, id=None, path: str = "default", endpoint_name: str = None,
               api_path_name: str = None, generate_only: bool = False) -> Future:
        """Delete the resource identified by `id` or, failing that, by this model's id"""
        cls = type(self)
        if not _has_id(id):
            id = getattr(self, cls._config.id_field, None)
        return cls._delete(id, path, endpoint_name, api_path_name, generate_only)

    @delete.classmethod
    def delete(cls, id=None, path: str = "default", endpoint_name: str = None,
               api_path_name: str = None, generate_only: bool = False) -> Future:
        return cls._delete(id, path, endpoint_name, api_path_name, generate_only)

    @classmethod
    def _delete(cls, id, path: str, endpoint_name: str, api_path_name: str,
                generate_only: bool) -> Future:
        consumer = cls._consumer(endpoint_name, api_path_name)
        template = cls._path(path)
        if not _has_id(id):
            return _rejected(MissingIdError())
        request = consumer.delete(path_join(template, id), cls._headers())
        return _dispatch(request, generate_only)
