# File: outreach_cms/core/identifiers.py
from typing import Any, Optional


class ResourceId:
    """
    Public identifier of a stored record.

    The web layer only ever sees the string form; the native integer key stays
    inside the repositories.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"Invalid resource id: {value!r}")
        self._value = value

    @classmethod
    def parse(cls, raw: Any) -> Optional["ResourceId"]:
        if isinstance(raw, ResourceId):
            return raw
        if isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return cls(raw) if raw > 0 else None
        if not isinstance(raw, str):
            return None
        raw = raw.strip()
        if not raw.isascii() or not raw.isdigit():
            return None
        value = int(raw)
        return cls(value) if value > 0 else None

    @classmethod
    def format(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        rid = cls.parse(value)
        if rid is None:
            raise ValueError(f"Invalid resource id: {value!r}")
        return str(rid)

    def __int__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"ResourceId({self._value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ResourceId) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)
