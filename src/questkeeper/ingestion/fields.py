"""Typed field access over decoded YAML records.

Content records are loosely typed mappings. ``RecordFields`` reads them
with an explicit default for every field, so a missing optional field or
a value of the wrong shape never raises.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, overload

_SCALARS = (str, int, float, bool)


class RecordFields:
    """Read-only typed accessor for one decoded record.

    Example:
        >>> fields = RecordFields({"id": "goblin", "armor_class": 15})
        >>> fields.get_int("armor_class", 10), fields.get_int("speed", 30)
        (15, 30)
    """

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def raw(self, key: str) -> Any:
        """The undecoded value, or None when absent."""
        return self._data.get(key)

    @overload
    def get_str(self, key: str, default: str) -> str: ...

    @overload
    def get_str(self, key: str, default: None = None) -> str | None: ...

    def get_str(self, key: str, default: str | None = None) -> str | None:
        """Read a string; other scalars are converted with ``str``.

        YAML turns ``version: 1.0`` into a float, so scalars are rendered
        rather than rejected.
        """
        value = self._data.get(key)
        if value is None or not isinstance(value, _SCALARS):
            return default
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def get_int(self, key: str, default: int) -> int:
        """Read an integer; floats are truncated, anything else gives the default."""
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return int(value)

    def get_optional_int(self, key: str) -> int | None:
        """Read an integer, or None when absent or not numeric."""
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return int(value)

    def get_float(self, key: str, default: float) -> float:
        """Read a number as a float."""
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return float(value)

    def get_bool(self, key: str, default: bool) -> bool:
        """Read a boolean; only real YAML booleans count."""
        value = self._data.get(key)
        if not isinstance(value, bool):
            return default
        return value

    def get_list(self, key: str) -> list[Any]:
        """Read a list; absent or non-list values give an empty list."""
        value = self._data.get(key)
        if not isinstance(value, list):
            return []
        return value

    def get_str_list(self, key: str) -> list[str]:
        """Read a list of scalars as strings, dropping nested values."""
        return [
            str(item)
            for item in self.get_list(key)
            if isinstance(item, _SCALARS) and not isinstance(item, bool)
        ]

    def get_mapping(self, key: str) -> dict[str, Any]:
        """Read a nested mapping; keys are converted to strings."""
        value = self._data.get(key)
        if not isinstance(value, Mapping):
            return {}
        return {str(k): v for k, v in value.items()}

    def nested(self, key: str) -> RecordFields:
        """Accessor for a nested mapping (empty when absent)."""
        return RecordFields(self.get_mapping(key))


__all__ = [
    "RecordFields",
]
