"""Encode optional tool arguments as CLI flags."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def build_flags(options: Mapping[str, object]) -> list[str]:
    """Turn an options mapping into argument tokens.

    ``True`` becomes a bare ``--key``; strings and numbers become
    ``--key value``; ``None`` and ``False`` are dropped.  Mapping order
    is preserved.

    >>> build_flags({"a": True, "b": "x", "c": 5, "d": None, "e": False})
    ['--a', '--b', 'x', '--c', '5']
    """
    tokens: list[str] = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        if value is True:
            tokens.append(f"--{key}")
        elif isinstance(value, str):
            tokens.extend((f"--{key}", value))
        elif isinstance(value, int | float):
            tokens.extend((f"--{key}", str(value)))
    return tokens


def build_args(base: Sequence[str], options: Mapping[str, object]) -> list[str]:
    """Base subcommand tokens followed by the encoded *options*."""
    return [*base, *build_flags(options)]
