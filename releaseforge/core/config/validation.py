"""
Type checks shared by the configuration dataclasses.

YAML hands over whatever the file holds (null, numbers, a scalar where a
list belongs), so each section checks its fields against the declared
types before any normalization runs.
"""

from dataclasses import fields
from typing import Any, List

from releaseforge.core.exceptions import ConfigValidationError

_STR_LIST = List[str]


def check_field_types(config: Any, section: str) -> None:
    """
    Validate the field values of a config dataclass in place.

    A single string given for a list of strings is wrapped in a list.

    Args:
        config: Dataclass instance to check.
        section: Section name used in error messages (e.g. "release").

    Raises:
        ConfigValidationError: If a value has the wrong type.
    """
    for f in fields(config):
        key = f"{section}.{f.name}"
        value = getattr(config, f.name)

        if f.type is str and not isinstance(value, str):
            raise ConfigValidationError(
                f"{key} must be a string, got {_type_name(value)}"
            )
        if f.type is bool and not isinstance(value, bool):
            raise ConfigValidationError(
                f"{key} must be true or false, got {_type_name(value)}"
            )
        if f.type == _STR_LIST:
            setattr(config, f.name, _as_str_list(key, value))


def _as_str_list(key: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigValidationError(
            f"{key} must be a list of strings, got {_type_name(value)}"
        )
    for item in value:
        if not isinstance(item, str):
            raise ConfigValidationError(
                f"{key} must contain only strings, got {_type_name(item)}"
            )
    return list(value)


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__
