# token_kernel/security/clock.py
"""
Single source of "now" (Unix epoch seconds) for token + cookie code.
Tests swap it through token_kernel.testing.fixtures.frozen_clock.
"""
import time


def now() -> int:
    return int(time.time())
