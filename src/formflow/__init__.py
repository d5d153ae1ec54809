"""
formflow - accessible, schema-validated forms.

Field composition, choice groups, a declarative validation engine,
multi-step wizards and derived values, with a server-rendered demo app.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version


def _get_version() -> str:
    try:
        return _metadata_version("formflow")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _get_version()

__all__ = ["__version__"]
