"""
Repeat-guard configuration, read once from the environment at startup.
"""

import os

from pydantic import BaseModel, ConfigDict

DAY_MS = 24 * 3600 * 1000

# Fixed ceiling on how far back the exact-combination check looks.
EXACT_COMBO_LOOKBACK = 200


def _env_int(name: str, default: int, min_value: int, max_value: int) -> int:
    raw = os.getenv(name)
    try:
        value = int(raw) if raw not in (None, "") else default
    except Exception:
        value = default
    return max(min_value, min(max_value, value))


def _env_float(name: str, default: float, min_value: float, max_value: float) -> float:
    raw = os.getenv(name)
    try:
        value = float(raw) if raw not in (None, "") else default
    except Exception:
        value = default
    return max(min_value, min(max_value, value))


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


class GuardConfig(BaseModel):
    """Process-wide repeat-guard parameters. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    simhash_sim_threshold: float = 0.85
    max_recent: int = 15
    template_cooldown_ms: int = 7 * DAY_MS
    exact_combo_block_days: int = 30
    max_attempts: int = 3
    exact_combo_lookback: int = EXACT_COMBO_LOOKBACK
    # Only commit template marks from the attempt that produced the text.
    template_mark_on_accept_only: bool = False

    @property
    def exact_combo_block_ms(self) -> int:
        return self.exact_combo_block_days * DAY_MS

    @classmethod
    def from_env(cls) -> "GuardConfig":
        return cls(
            simhash_sim_threshold=_env_float("SIMHASH_SIM_THRESHOLD", 0.85, 0.0, 1.0),
            max_recent=_env_int("MAX_RECENT", 15, 1, 1000),
            template_cooldown_ms=_env_int("TEMPLATE_COOLDOWN_MS", 7 * DAY_MS, 0, 3650 * DAY_MS),
            exact_combo_block_days=_env_int("EXACT_COMBO_BLOCK_DAYS", 30, 0, 3650),
            max_attempts=_env_int("MAX_ATTEMPTS", 3, 1, 20),
            template_mark_on_accept_only=_env_bool("TEMPLATE_MARK_ON_ACCEPT_ONLY", False),
        )
