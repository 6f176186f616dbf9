"""Query string encoding for list operations.

Parameters are collected as an ordered list of (key, value) pairs, so a
sequence value becomes one repeated key per element (`tags=a&tags=b`).
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeAlias

Query: TypeAlias = list[tuple[str, str]]


def _encode(value: object) -> str:
    match value:
        case bool():
            return "true" if value else "false"
        case Enum():
            return str(value.value)
        case _:
            return str(value)


def add_to_query(query: Query, key: str, value: object) -> None:
    """Append `value` under `key`. None is skipped; sequences repeat the key."""
    match value:
        case None:
            return
        case str() | Enum() | bool() | int() | float():
            query.append((key, _encode(value)))
        case Iterable():
            for item in value:
                if item is not None:
                    query.append((key, _encode(item)))
        case _:
            query.append((key, _encode(value)))
