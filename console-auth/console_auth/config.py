"""
Console Auth Configuration
==========================
Backend connection and persistence settings.
"""

import os
from dataclasses import dataclass

from .constants import COOLDOWN_SECONDS, LOGIN_PATH, USERNAME_DEBOUNCE_SECONDS


@dataclass
class ConsoleAuthConfig:
    """Configuration for the console auth flows."""
    api_base_url: str = os.environ.get(
        "CONSOLE_API_URL", "http://localhost:8080/api"
    )
    timeout: float = float(os.environ.get("CONSOLE_API_TIMEOUT", "10.0"))
    max_retries: int = int(os.environ.get("CONSOLE_API_MAX_RETRIES", "3"))
    storage_path: str = os.environ.get(
        "CONSOLE_AUTH_STORAGE",
        os.path.join(os.path.expanduser("~"), ".console-auth", "storage.json"),
    )
    cooldown_seconds: int = COOLDOWN_SECONDS
    username_debounce_seconds: float = USERNAME_DEBOUNCE_SECONDS
    login_path: str = LOGIN_PATH
