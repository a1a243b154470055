"""
Testing utilities for token_kernel apps.
──────────────────────────────────────────────────────────────
Provides pytest fixtures for a controllable clock, a context-bound
in-memory cookie jar and ready-made settings.
──────────────────────────────────────────────────────────────
"""
from .fixtures import FrozenClock, cookie_jar, frozen_clock, token_settings

__all__ = ["FrozenClock", "cookie_jar", "frozen_clock", "token_settings"]
