from __future__ import annotations

import os
from dataclasses import dataclass

VERSION = "0.1.0"
DEFAULT_MAX_DEPTH = 32


def _env_number(name: str, default, cast):
    raw = os.getenv(name, "")
    try:
        return cast(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    engine_url: str
    engine_token: str
    engine_timeout_s: float = 10
    # deepest path served; the JSON encoders recurse once per nesting level
    max_depth: int = DEFAULT_MAX_DEPTH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # read at call time so tests and reloaded .env files take effect
        return cls(
            engine_url=os.getenv("DEPLOYTREE_ENGINE_URL", "").rstrip("/"),
            engine_token=os.getenv("DEPLOYTREE_ENGINE_TOKEN", ""),
            engine_timeout_s=_env_number("DEPLOYTREE_ENGINE_TIMEOUT", 10, float),
            max_depth=max(1, min(_env_number("DEPLOYTREE_MAX_DEPTH", DEFAULT_MAX_DEPTH, int), DEFAULT_MAX_DEPTH)),
            log_level=os.getenv("DEPLOYTREE_LOG_LEVEL", "INFO").upper(),
        )

    def problems(self) -> list[str]:
        problems: list[str] = []
        if not self.engine_url:
            problems.append("DEPLOYTREE_ENGINE_URL missing")
        elif not self.engine_url.startswith(("http://", "https://")):
            problems.append("DEPLOYTREE_ENGINE_URL must be an http(s) URL")
        return problems
