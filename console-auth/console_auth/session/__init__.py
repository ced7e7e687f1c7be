"""
Session Hygiene
===============
Persisted session keys, the clean-state guard and the login lifecycle.
"""

from .guard import EntryPoint, SessionGuard
from .manager import AuthManager

__all__ = [
    "EntryPoint",
    "SessionGuard",
    "AuthManager",
]
