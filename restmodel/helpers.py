# restmodel/helpers.py
import re
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_function(value: Any) -> bool:
    return callable(value) and not isinstance(value, type)


def path_join(*segments) -> str:
    """
    Join URL segments with exactly one slash between them.
    Empty segments are skipped; a leading slash on the first segment and a
    trailing slash on the last one are kept.
    """
    parts = [str(s) for s in segments if s is not None and str(s) != ""]
    if not parts:
        return ""

    joined = []
    for i, part in enumerate(parts):
        if i > 0:
            part = part.lstrip("/")
        if i < len(parts) - 1:
            part = part.rstrip("/")
        if part:
            joined.append(part)
    return "/".join(joined)


def replace_url_params_with_values(template: str, data: Optional[Dict] = None) -> str:
    """Substitute {key} placeholders; placeholders without data are left untouched"""
    if not template:
        return template or ""
    data = data or {}

    def _replace(match):
        key = match.group(1)
        if key in data and data[key] is not None:
            return quote(str(data[key]), safe="")
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


def append_query_params_to_url(url: str, params: Optional[Dict] = None) -> str:
    if not params:
        return url
    items = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            items.extend((key, v) for v in value)
        elif isinstance(value, bool):
            items.append((key, "true" if value else "false"))
        else:
            items.append((key, value))
    if not items:
        return url

    separator = "&" if "?" in url else "?"
    if url.endswith("?") or url.endswith("&"):
        separator = ""
    return f"{url}{separator}{urlencode(items)}"
