# restmodel/fields.py
"""
Conversion between the wire representation of a resource (the JSON the
server speaks) and model instances.

A model declares its fields as {field_name: {"map": wire_key, "default": value}},
both keys optional. Only declared fields ever cross the boundary.
"""
from typing import Any, Dict, Iterable, Optional

_MISSING = object()


def wire_key(fields: Dict[str, Dict], field_name: str) -> str:
    """Wire key for an internal field name"""
    field_def = fields.get(field_name) or {}
    return field_def.get("map") or field_name


def default_value(field_def: Optional[Dict]) -> Any:
    """Fresh [] / {} for container defaults, the scalar itself otherwise, None if undeclared"""
    if not field_def or "default" not in field_def:
        return None
    default = field_def["default"]
    if isinstance(default, list):
        return []
    if isinstance(default, dict):
        return {}
    return default


def resolve_field_value(source: Dict, field_name: str, field_def: Optional[Dict]) -> Any:
    """
    Resolve the initial value of one field:
    1. the value at the wire key, else at the internal name
    2. the declared default
    3. None
    """
    field_def = field_def or {}
    mapped = field_def.get("map")
    value = _MISSING
    if mapped and mapped in source:
        value = source[mapped]
    elif field_name in source:
        value = source[field_name]

    if value is _MISSING:
        return default_value(field_def)
    return value


def wire_to_model(wire: Dict, model_type):
    """Build a model_type instance from a wire record; unknown wire keys are dropped"""
    model = model_type()
    fields = model_type.get_config("fields") or {}
    for field_name in fields:
        key = wire_key(fields, field_name)
        if key in wire:
            setattr(model, field_name, wire[key])
    return model


def model_to_wire(model, keys: Optional[Iterable[str]] = None) -> Dict:
    """Wire record for a model instance, optionally restricted to the given field names"""
    fields = type(model).get_config("fields") or {}
    names = fields.keys() if keys is None else keys
    return {wire_key(fields, name): getattr(model, name, None) for name in names}
