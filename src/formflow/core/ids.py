"""
Deterministic identifier generation for rendered components.

Each component instance owns one IdGenerator. The generator draws a seed
from a process-wide counter exactly once, at construction, and every id it
hands out embeds that seed. Ids are therefore stable across re-renders of
the same instance and distinct between instances, including several
instances built from the same option set.
"""

from __future__ import annotations

import itertools
import re

_instance_seeds = itertools.count(1)


def slugify(value: str) -> str:
    """Reduce a value to a lowercase, hyphen-separated id fragment."""
    text = str(value).lower().strip()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-") or "x"


class IdGenerator:
    """Hands out document-unique ids for a single component instance."""

    def __init__(self, prefix: str = "ff"):
        self.prefix = slugify(prefix)
        self.seed = next(_instance_seeds)
        self._issued: dict[str, str] = {}

    @property
    def root(self) -> str:
        """The instance's own id, e.g. ``form-field-12``."""
        return f"{self.prefix}-{self.seed}"

    def id_for(self, *parts: str) -> str:
        """Return the id for ``parts``, issuing it on first request.

        The same parts always map to the same id for this instance.
        Parts that slugify identically but differ in raw text still get
        distinct ids.
        """
        key = "\x1f".join(parts)
        issued = self._issued.get(key)
        if issued is not None:
            return issued

        candidate = "-".join([self.prefix, *(slugify(p) for p in parts), str(self.seed)])
        taken = set(self._issued.values())
        if candidate in taken:
            candidate = f"{candidate}_{len(self._issued)}"
        self._issued[key] = candidate
        return candidate
