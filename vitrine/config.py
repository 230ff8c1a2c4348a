from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from vitrine.services.storage import DEFAULT_STATE_FILENAME, DEFAULT_STORE_KEY


@dataclass(frozen=True)
class AppConfig:
    app_name: str = "Vitrine"
    user_agent: str = "Vitrine/1.0"
    fetch_timeout_s: int = 15
    state_filename: str = DEFAULT_STATE_FILENAME
    store_key: str = DEFAULT_STORE_KEY
    log_level: str = "INFO"


def is_android(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get("ANDROID_PRIVATE") or env.get("ANDROID_ARGUMENT"))


def _int_or(raw: str | None, default: int) -> int:
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Defaults, overridden by VITRINE_* environment variables when set."""
    env = os.environ if environ is None else environ
    cfg = AppConfig()
    return replace(
        cfg,
        user_agent=env.get("VITRINE_USER_AGENT") or cfg.user_agent,
        fetch_timeout_s=_int_or(env.get("VITRINE_FETCH_TIMEOUT"), cfg.fetch_timeout_s),
        state_filename=env.get("VITRINE_STATE_FILE") or cfg.state_filename,
        log_level=(env.get("VITRINE_LOG_LEVEL") or cfg.log_level).upper(),
    )
