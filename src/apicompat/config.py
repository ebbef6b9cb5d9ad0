from __future__ import annotations

import os

from .policy import MARSHAL_METHOD_NAMES


def _split_names(raw: str) -> tuple[str, ...]:
    return tuple(n.strip() for n in raw.split(",") if n.strip())


def default_method_names() -> tuple[str, ...]:
    """Return the method names kept when pruning graphs before a check.

    Override with `APICOMPAT_METHODS` (comma separated).
    """
    override = os.environ.get("APICOMPAT_METHODS")
    if override:
        names = _split_names(override)
        if names:
            return names
    return MARSHAL_METHOD_NAMES


def parse_method_names(raw: str) -> tuple[str, ...]:
    return _split_names(raw)
