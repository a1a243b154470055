# src/token_kernel/config/base_settings.py
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from token_kernel.security.token import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS


class TokenSettings(BaseSettings):
    """
    Token + cookie settings, read from TOKEN_* environment variables / .env.
    Apps can subclass and extend it.

    There is deliberately no default for `secret_key`: a missing secret is a
    configuration error at startup.
    """

    secret_key: str = Field(min_length=1)
    algorithm: str = DEFAULT_ALGORITHM
    cookie_ttl: int = Field(default=0, ge=0)
    cookie_multi_label_suffixes: List[str] = [".co.uk"]
    cookie_secure: bool = False
    cookie_httponly: bool = True
    cookie_samesite: Optional[Literal["lax", "strict", "none"]] = "lax"

    model_config = SettingsConfigDict(
        env_prefix="TOKEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"unsupported digest algorithm {value!r}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> TokenSettings:
    # singleton (reads env once)
    return TokenSettings()
