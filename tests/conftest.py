from token_kernel.testing.fixtures import cookie_jar, frozen_clock, token_settings  # noqa: F401
