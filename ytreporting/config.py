from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://youtubereporting.googleapis.com/"


class ConfigurationError(Exception):
    pass


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _base_url() -> str:
    return _optional_env("YTREPORTING_BASE_URL") or DEFAULT_BASE_URL


def _access_token() -> Optional[str]:
    return _optional_env("YTREPORTING_ACCESS_TOKEN")


def _default_page_size() -> Optional[int]:
    if _optional_env("YTREPORTING_DEFAULT_PAGE_SIZE") is None:
        return None
    value = _int_env("YTREPORTING_DEFAULT_PAGE_SIZE", "0")
    if value <= 0:
        raise ConfigurationError("YTREPORTING_DEFAULT_PAGE_SIZE must be positive")
    return value


def _timeout_seconds() -> float:
    return _float_env("YTREPORTING_TIMEOUT_SECONDS", "30")


def _max_retries() -> int:
    return max(0, _int_env("YTREPORTING_MAX_RETRIES", "3"))


def _backoff_base_seconds() -> float:
    return max(0.0, _float_env("YTREPORTING_BACKOFF_BASE_SECONDS", "0.25"))


def _content_owner() -> Optional[str]:
    return _optional_env("YTREPORTING_CONTENT_OWNER")


@dataclass
class ServiceConfig:
    base_url: str = DEFAULT_BASE_URL
    access_token: Optional[str] = None
    default_page_size: Optional[int] = None
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 0.25
    on_behalf_of_content_owner: Optional[str] = None

    @classmethod
    def from_env(cls) -> ServiceConfig:
        return cls(
            base_url=_base_url(),
            access_token=_access_token(),
            default_page_size=_default_page_size(),
            timeout_seconds=_timeout_seconds(),
            max_retries=_max_retries(),
            backoff_base_seconds=_backoff_base_seconds(),
            on_behalf_of_content_owner=_content_owner(),
        )
