from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    headless: bool = _env_bool("HEADLESS", True)
    browser: str = os.getenv("BROWSER", "chromium")  # chromium|firefox|webkit
    slow_mo_ms: int = int(os.getenv("SLOW_MO_MS", "0"))
    default_timeout_ms: int = int(os.getenv("DEFAULT_TIMEOUT_MS", "30000"))
    # Fixed pause after submitting a login form. A heuristic, not a guarantee
    # that the login finished.
    login_settle_ms: int = int(os.getenv("LOGIN_SETTLE_MS", "2000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
