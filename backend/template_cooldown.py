"""Per-user, per-template last-use timestamps."""

import threading

from config import GuardConfig


class TemplateCooldown:
    def __init__(self, config: GuardConfig):
        self.config = config
        self._last_use: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def is_on_cooldown(self, user_id: str, template_id: str, now: int) -> bool:
        last = self._last_use.get((user_id, template_id))
        if last is None:
            return False
        return (now - last) < self.config.template_cooldown_ms

    def mark_used(self, user_id: str, template_id: str, now: int) -> None:
        with self._lock:
            self._last_use[(user_id, template_id)] = now

    def last_used(self, user_id: str, template_id: str):
        return self._last_use.get((user_id, template_id))
