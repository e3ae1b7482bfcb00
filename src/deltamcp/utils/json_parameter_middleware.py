"""JSON parameter conversion for FastMCP tools.

MCP clients sometimes send list and dict arguments as JSON strings. The
``json_convert`` decorator parses such strings before the tool body runs and
turns malformed input into a structured INVALID_INPUT error.
"""

import functools
import inspect
import json
import types
from collections.abc import Callable
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

_JSON_CONTAINERS = (list, dict)

F = TypeVar("F", bound=Callable[..., Any])


def _container_types(expected_type: Any) -> tuple[type, ...]:
    """Collect list/dict types accepted by an annotation such as ``list[str] | None``."""
    if get_origin(expected_type) is types.UnionType:
        found: tuple[type, ...] = ()
        for arg in get_args(expected_type):
            found += _container_types(arg)
        return found

    origin = get_origin(expected_type) or expected_type
    if origin in _JSON_CONTAINERS:
        return (origin,)
    return ()


def convert_parameter(value: Any, expected_type: Any, param_name: str) -> Any:
    """Parse ``value`` as JSON when the parameter expects a list or dict.

    Raises:
        ValueError: if the string is not valid JSON or decodes to the wrong type
    """
    containers = _container_types(expected_type)
    if not containers or not isinstance(value, str):
        return value

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in parameter '{param_name}': {e}") from e

    if not isinstance(parsed, containers):
        expected = " or ".join(t.__name__ for t in containers)
        raise ValueError(f"Parameter '{param_name}' must be a {expected}, got {type(parsed).__name__} from JSON")
    return parsed


def json_convert(func: F) -> F:
    """Decorator that converts JSON string arguments of list/dict parameters.

    Usage:
        @mcp.tool
        @json_convert
        def classify_changes(changes: list[dict[str, Any]]) -> dict:
            ...
    """
    sig = inspect.signature(func)
    type_hints = get_type_hints(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        bound_args = sig.bind(*args, **kwargs)
        bound_args.apply_defaults()

        converted_kwargs = {}
        for param_name, param_value in bound_args.arguments.items():
            if param_name not in type_hints:
                converted_kwargs[param_name] = param_value
                continue
            try:
                converted_kwargs[param_name] = convert_parameter(param_value, type_hints[param_name], param_name)
            except ValueError as e:
                return {"error": {"code": "INVALID_INPUT", "message": str(e)}}

        return func(**converted_kwargs)

    return wrapper  # type: ignore
