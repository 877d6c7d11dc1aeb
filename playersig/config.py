"""
Settings read from the environment (and a local .env file, if present).
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .executor import EXECUTORS
from .fetcher import DEFAULT_UA


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _choice_env(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


@dataclass
class Settings:
    timeout: int = 12                  # seconds, total per script fetch
    proxy: Optional[str] = None
    user_agent: str = DEFAULT_UA
    log_level: str = "INFO"
    executor: str = "node"             # "node" | "dukpy"
    node_path: str = "node"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        return cls(
            timeout=_int_env("PLAYERSIG_TIMEOUT", cls.timeout),
            proxy=os.getenv("PLAYERSIG_PROXY") or None,
            user_agent=os.getenv("PLAYERSIG_USER_AGENT") or DEFAULT_UA,
            log_level=(os.getenv("PLAYERSIG_LOG_LEVEL") or "INFO").upper(),
            executor=_choice_env("PLAYERSIG_EXECUTOR", "node", EXECUTORS),
            node_path=os.getenv("PLAYERSIG_NODE") or "node",
        )
