"""Reading outcome telemetry: one JSON line per generate call, plus a windowed summary."""

import hashlib
import json
import os
from collections import Counter, deque
from datetime import datetime, timezone, timedelta
from pathlib import Path
from typing import Iterator, Optional

OUTCOME_EVENTS = ("reading_accepted", "reading_fallback", "reading_error")

# Relative paths resolve against the working directory, never the install dir.
READING_TELEMETRY_PATH = Path(os.getenv("READING_TELEMETRY_LOG") or "reading_telemetry.log")


def telemetry_enabled() -> bool:
    return (os.getenv("READING_TELEMETRY_ENABLED", "1") or "1").strip().lower() in (
        "1", "true", "yes", "on",
    )


def user_hash(user_id: Optional[str]) -> str:
    return hashlib.sha256((user_id or "").encode("utf-8", errors="ignore")).hexdigest()[:12]


def record_reading_outcome(event: str, user_id: Optional[str], **fields) -> None:
    """Append one outcome line. Never raises; telemetry must not fail a request."""
    if event not in OUTCOME_EVENTS or not telemetry_enabled():
        return
    line = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "user_hash": user_hash(user_id),
        **fields,
    }
    try:
        READING_TELEMETRY_PATH.parent.mkdir(parents=True, exist_ok=True)
        with open(READING_TELEMETRY_PATH, "a", encoding="utf-8") as f:
            f.write(json.dumps(line, ensure_ascii=False) + "\n")
    except OSError:
        pass


def _outcomes_since(cutoff: datetime, errors: Counter) -> Iterator[dict]:
    with open(READING_TELEMETRY_PATH, "r", encoding="utf-8") as f:
        for raw in f:
            raw = raw.strip()
            if not raw:
                continue
            try:
                item = json.loads(raw)
                fresh = datetime.fromisoformat(item["ts"]) >= cutoff
            except (ValueError, KeyError, TypeError):
                errors["parse"] += 1
                continue
            if fresh and item.get("event") in OUTCOME_EVENTS:
                yield item


def read_telemetry_summary(hours: int = 24, limit: int = 6) -> dict:
    h = max(1, min(168, int(hours or 24)))
    n = max(1, min(25, int(limit or 6)))
    now_utc = datetime.now(timezone.utc)

    counts: Counter = Counter()
    errors: Counter = Counter()
    attempts_total = 0
    reversed_combos = 0
    recent: deque = deque(maxlen=n)

    file_exists = READING_TELEMETRY_PATH.exists()
    if file_exists:
        try:
            for item in _outcomes_since(now_utc - timedelta(hours=h), errors):
                counts[item["event"]] += 1
                attempts_total += int(item.get("attempts") or 0)
                reversed_combos += 1 if item.get("exact_combo_recent") else 0
                recent.append(item)
        except OSError:
            errors["io"] += 1

    served = counts["reading_accepted"] + counts["reading_fallback"]
    return {
        "status": "ok",
        "now_utc": now_utc.isoformat(),
        "window_hours": h,
        "telemetry_enabled": telemetry_enabled(),
        "file_exists": file_exists,
        "counts": {event: counts[event] for event in OUTCOME_EVENTS},
        "fallback_rate_percent": round(counts["reading_fallback"] / served * 100.0, 2) if served else 0.0,
        "avg_attempts": round(attempts_total / served, 2) if served else 0.0,
        "exact_combo_reversals": reversed_combos,
        "recent": list(recent),
        "parse_errors": errors["parse"],
    }
