"""Deterministic per-user-per-day seeds and reproducible random streams."""

import hashlib
import random
from datetime import date, datetime, timezone
from typing import Iterator, Optional


def utc_day(now_ms: int) -> date:
    return datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).date()


def daily_seed(user_id: str, day: Optional[date] = None) -> int:
    """32-bit seed that only changes when the user or the UTC date changes."""
    day = day or datetime.now(timezone.utc).date()
    payload = f"{user_id}:{day.isoformat()}"
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


def stream_from(seed: int) -> Iterator[float]:
    """Endless reals in [0, 1). Same seed, same sequence. Not for secrets."""
    rnd = random.Random(seed)
    while True:
        yield rnd.random()
