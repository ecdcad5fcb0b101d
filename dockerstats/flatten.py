"""Flattening of nested stats documents into dotted keys."""
from typing import Any, Dict, List, Mapping, Union

# Values decoded from a stats response: null, bool, number, string,
# array or object.
JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


def flatten(node: Mapping[str, JsonValue], prefix: str = "") -> Dict[str, JsonValue]:
    """
    Flatten a nested mapping into a single level keyed by dotted paths.

    Objects are recursed into; every other value, arrays included, is bound
    to its full path as-is. Arrays are left for the consumer to drop (see
    is_field_value), so callers that need them (block I/O, CPU core count)
    still work from the raw document.

    Args:
        node: Decoded JSON object
        prefix: Path prefix including its trailing dot

    Returns:
        Dict of dotted key -> leaf value, in first-encounter order
    """
    result: Dict[str, JsonValue] = {}
    for key, value in node.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping):
            result.update(flatten(value, f"{path}."))
        else:
            result[path] = value
    return result


def is_field_value(value: JsonValue) -> bool:
    """Only scalars become metric fields; arrays and nulls are dropped."""
    return value is not None and not isinstance(value, (list, tuple, Mapping))
