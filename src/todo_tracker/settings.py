from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from .access import USER_ROLE


@dataclass(frozen=True)
class UserAccount:
    """A configured login: password plus granted roles."""
    password: str
    roles: FrozenSet[str]


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - APP_TITLE: title shown in the OpenAPI document (default: 'Todo Tracker')
    - LOG_LEVEL: root log level name (default: INFO)
    - LOG_FILE: optional path of a log file in addition to the console
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - AUTH_USERS: comma-separated 'username:password:ROLE1+ROLE2' entries used by
      HTTP Basic authentication, e.g. 'alice:secret:USER,root:toor:USER+ADMIN'.
      The role part may be omitted, in which case the user gets the USER role.
    """

    app_title: str = "Todo Tracker"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    users: Dict[str, UserAccount] = field(default_factory=dict)


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_users(users_value: str) -> Dict[str, UserAccount]:
    """
    Parse AUTH_USERS into a username -> UserAccount table. Entries without a
    username or password are skipped.
    """
    users: Dict[str, UserAccount] = {}
    for entry in users_value.split(","):
        parts = entry.strip().split(":", 2)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            continue
        username, password = parts[0], parts[1]
        role_part = parts[2] if len(parts) == 3 else ""
        roles = frozenset(r.strip().upper() for r in role_part.split("+") if r.strip())
        users[username] = UserAccount(password=password, roles=roles or frozenset({USER_ROLE}))
    return users


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    log_file = os.getenv("LOG_FILE") or None
    return Settings(
        app_title=_get_env("APP_TITLE", "Todo Tracker"),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        log_file=log_file,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        users=_parse_users(_get_env("AUTH_USERS", "")),
    )
