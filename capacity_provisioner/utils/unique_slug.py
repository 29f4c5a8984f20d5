from __future__ import annotations

import secrets
import string
from typing import Iterable, Set

from coolname import generate_slug


_ALPH = string.ascii_lowercase + string.digits


def _suffix(k: int = 5) -> str:
    return "".join(secrets.choice(_ALPH) for _ in range(k))


def generate_unique_coolname(existing_slugs: Iterable[str], *, prefix: str = "", max_tries: int = 30) -> str:
    """
    Returns a coolname slug that is not in `existing_slugs`.

    - Tries `max_tries` times with plain coolname generation.
    - Then falls back to appending a random suffix to guarantee uniqueness.

    When `prefix` is given, the slug is returned as `{prefix}-{slug}`.
    """
    existing: Set[str] = set(existing_slugs)
    head = f"{prefix}-" if prefix else ""

    for _ in range(max_tries):
        slug = f"{head}{generate_slug(2)}"  # e.g. "gpu-pool-silent-otter"
        if slug not in existing:
            return slug

    while True:
        slug = f"{head}{generate_slug(2)}-{_suffix()}"
        if slug not in existing:
            return slug
