from __future__ import annotations

import os

TRUTHY = ('1', 'true', 'yes', 'on')


def env_flag(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).lower() in TRUTHY


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


DEBUG = env_flag('TICTACGO_DEBUG')
DEFAULT_DIFFICULTY = os.getenv('TICTACGO_DIFFICULTY', 'medium')
# Fresh boards tried before the deterministic fallback layout is used.
BOARD_ATTEMPTS = max(1, env_int('TICTACGO_BOARD_ATTEMPTS', 5))
