"""
Web runtime: configuration, template rendering, the app shell and the
FastAPI application factory (``formflow.runtime.app.create_app``).
"""

from __future__ import annotations

from formflow.runtime.config import AppConfig

__all__ = ["AppConfig"]
