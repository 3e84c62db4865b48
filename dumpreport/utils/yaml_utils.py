"""Helpers for YAML parsing quirks."""

from typing import Any, Dict, Mapping, TypeVar

V = TypeVar("V")


def normalize_yaml_dict_keys(data: Mapping[Any, V]) -> Dict[str, V]:
    """Return a copy of ``data`` whose keys are all strings.

    YAML 1.1 reads unquoted ``yes``/``no``/``on``/``off``/``true``/``false``
    keys as booleans and bare numbers as ints or floats. Result metadata and
    error summaries are keyed by free-form labels and file paths, so every key
    is converted with ``str()`` (``True`` becomes ``"True"``).

    Examples:
        >>> normalize_yaml_dict_keys({True: "a", 1: "b", "c": "d"})
        {'True': 'a', '1': 'b', 'c': 'd'}
    """
    return {str(key): value for key, value in data.items()}
