from __future__ import annotations

import os
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Callable

from dotenv import load_dotenv


load_dotenv()


EnvGetter = Callable[[str], str | None]

ACCOUNT_ENV_PREFIX = "TP_"
ACCOUNT_USERNAME_SUFFIX = "_USERNAME"
ACCOUNT_PASSWORD_SUFFIX = "_PASSWORD"
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CALENDAR_TIMEZONE = "Australia/Melbourne"


def _bool_env(name: str, default: bool, *, getenv: EnvGetter = os.getenv) -> bool:
    value = getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(*names: str, default: str = "", getenv: EnvGetter = os.getenv) -> str:
    for name in names:
        value = getenv(name)
        if value is not None:
            return value.strip()
    return default


def _optional_str_env(*names: str, getenv: EnvGetter = os.getenv) -> str | None:
    value = _str_env(*names, default="", getenv=getenv)
    return value or None


def _int_env(
    *names: str,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
    getenv: EnvGetter = os.getenv,
) -> int:
    raw = _optional_str_env(*names, getenv=getenv)
    if raw is None:
        parsed = default
    else:
        try:
            parsed = int(raw)
        except ValueError:
            parsed = default

    if minimum is not None and parsed < minimum:
        parsed = minimum
    if maximum is not None and parsed > maximum:
        parsed = maximum
    return parsed


@dataclass(frozen=True)
class AccountCredentials:
    username: str
    password: str = field(repr=False)


def load_accounts(environ: Mapping[str, str] | None = None) -> dict[str, AccountCredentials]:
    """Collect ``TP_<KEY>_USERNAME`` / ``TP_<KEY>_PASSWORD`` pairs.

    The account key is ``<KEY>`` lower-cased. Pairs missing either half are
    ignored.
    """
    env = os.environ if environ is None else environ
    accounts: dict[str, AccountCredentials] = {}
    for name in sorted(env):
        if not (name.startswith(ACCOUNT_ENV_PREFIX) and name.endswith(ACCOUNT_USERNAME_SUFFIX)):
            continue
        raw_key = name[len(ACCOUNT_ENV_PREFIX) : -len(ACCOUNT_USERNAME_SUFFIX)]
        if not raw_key:
            continue
        env_prefix = f"{ACCOUNT_ENV_PREFIX}{raw_key.upper()}"
        username = str(env.get(f"{env_prefix}{ACCOUNT_USERNAME_SUFFIX}") or "").strip()
        password = str(env.get(f"{env_prefix}{ACCOUNT_PASSWORD_SUFFIX}") or "")
        if username and password:
            accounts[raw_key.lower()] = AccountCredentials(username=username, password=password)
    return accounts


@dataclass(frozen=True)
class Settings:
    accounts: dict[str, AccountCredentials]
    api_secret: str | None

    api_port: int
    log_level: str
    cache_ttl_seconds: int
    calendar_timezone: str

    capture_headless: bool
    capture_login_timeout_seconds: int
    capture_settle_seconds: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            accounts=load_accounts(),
            api_secret=_optional_str_env("API_SECRET"),
            api_port=_int_env("API_PORT", "PORT", default=3000, minimum=1, maximum=65535),
            log_level=_str_env("LOG_LEVEL", default="INFO").upper(),
            cache_ttl_seconds=_int_env(
                "CACHE_TTL_SECONDS", default=DEFAULT_CACHE_TTL_SECONDS, minimum=0, maximum=7 * 86400
            ),
            calendar_timezone=_str_env("CALENDAR_TIMEZONE", "TIMEZONE", default=DEFAULT_CALENDAR_TIMEZONE),
            capture_headless=_bool_env("CAPTURE_HEADLESS", True),
            capture_login_timeout_seconds=_int_env(
                "CAPTURE_LOGIN_TIMEOUT_SECONDS", default=30, minimum=5, maximum=300
            ),
            capture_settle_seconds=_int_env("CAPTURE_SETTLE_SECONDS", default=4, minimum=0, maximum=60),
        )

    def validate(self) -> None:
        missing = []
        if not self.accounts:
            missing.append("TP_<USER>_USERNAME and TP_<USER>_PASSWORD")
        if not self.api_secret:
            missing.append("API_SECRET")
        if missing:
            missing_str = ", ".join(missing)
            raise ValueError(f"Missing required environment variables: {missing_str}")

    def account_keys(self) -> list[str]:
        return list(self.accounts.keys())
