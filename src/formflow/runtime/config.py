"""
Application configuration from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEV_SECRET_KEY = "formflow-dev-secret-key"


@dataclass
class AppConfig:
    """Configuration for the formflow web application."""

    host: str = "127.0.0.1"
    port: int = 8000
    secret_key: str = DEV_SECRET_KEY
    log_level: str = "INFO"
    cookie_max_age: int = 86400

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables."""
        return cls(
            host=os.environ.get("FORMFLOW_HOST", "127.0.0.1"),
            port=int(os.environ.get("FORMFLOW_PORT", "8000")),
            secret_key=os.environ.get("FORMFLOW_SECRET_KEY", DEV_SECRET_KEY),
            log_level=os.environ.get("FORMFLOW_LOG_LEVEL", "INFO").upper(),
            cookie_max_age=int(os.environ.get("FORMFLOW_COOKIE_MAX_AGE", "86400")),
        )

    @property
    def uses_dev_secret(self) -> bool:
        return self.secret_key == DEV_SECRET_KEY
