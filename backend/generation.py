"""
Reading generation loop with repeat avoidance.

One request walks through ``Attempting(0..MAX_ATTEMPTS-1)`` and ends in
either ``ACCEPTED`` (a rendered text far enough from the user's recent
readings) or ``FALLBACK_ACCEPTED`` (the fixed per-language fallback). The
whole read-check-record cycle runs under the user's lock, and store
writes are staged until the final text is known.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional

from config import GuardConfig
from languages import (
    Lang,
    OPENING_LINE,
    closing_line,
    fallback_text,
    template_id,
    unresolved_fragment,
)
from seed import daily_seed, stream_from, utc_day
from similarity_store import ReadingEntry, SimilarityStore
from simhash import fingerprint
from symbol_catalog import GLOBAL_REGION, SymbolCatalog
from template_cooldown import TemplateCooldown
from text_utils import bullet_line

logger = logging.getLogger(__name__)

PERMUTATION_DELIMITER = ">"


class ReadingValidationError(ValueError):
    """The request is missing a user id or symbols."""


class GenerationState(str, Enum):
    ATTEMPTING = "attempting"
    ACCEPTED = "accepted"
    FALLBACK_ACCEPTED = "fallback_accepted"


@dataclass
class GenerationResult:
    text: str
    state: GenerationState
    attempts: int
    permutation_key: str
    exact_combo_recent: bool
    # symbol ordering rendered by each attempt, in attempt order
    attempt_orders: list[list[str]] = field(default_factory=list)


def now_ms() -> int:
    return int(time.time() * 1000)


def permutation_key(symbols: Iterable[str]) -> str:
    """Order-independent key for a symbol combination."""
    return PERMUTATION_DELIMITER.join(sorted(symbols))


class ReadingGenerator:
    def __init__(
        self,
        catalog: SymbolCatalog,
        store: SimilarityStore,
        cooldown: TemplateCooldown,
        config: GuardConfig,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.cooldown = cooldown
        self.config = config
        self.clock = clock or now_ms

    def generate(
        self,
        user_id: Optional[str],
        symbols: Optional[list[str]],
        culture_mode: bool = False,
        lang: Optional[str] = "tr",
        region: Optional[str] = GLOBAL_REGION,
    ) -> GenerationResult:
        if not user_id or not symbols:
            raise ReadingValidationError("missing user_id or symbols")

        with self.store.user_lock(user_id):
            return self._generate_locked(
                user_id,
                list(symbols),
                culture_mode,
                Lang.resolve(lang),
                region or GLOBAL_REGION,
            )

    def _generate_locked(
        self,
        user_id: str,
        symbols: list[str],
        culture_mode: bool,
        lang: Lang,
        region: str,
    ) -> GenerationResult:
        now = self.clock()
        perm = permutation_key(symbols)

        order = list(symbols)
        combo_recent = self.store.is_exact_combo_recent(user_id, perm, now)
        if combo_recent:
            logger.info("exact combination %r seen recently for %s; reversing order", perm, user_id)
            order.reverse()

        seed = daily_seed(user_id, utc_day(now))
        # tpl id -> timestamp, committed together with the reading
        staged_marks: dict[str, int] = {}
        attempt_orders: list[list[str]] = []

        for attempt in range(self.config.max_attempts):
            note_rng = stream_from(seed + attempt)
            attempt_marks: dict[str, int] = {}
            attempt_orders.append(list(order))
            text = self._render(
                user_id, order, lang, culture_mode, region, note_rng, now, staged_marks, attempt_marks
            )
            text_hash = fingerprint(text)

            if not self.store.is_too_similar(user_id, text_hash):
                staged_marks.update(attempt_marks)
                self._commit(user_id, ReadingEntry(now, text_hash, perm), staged_marks)
                return GenerationResult(
                    text=text,
                    state=GenerationState.ACCEPTED,
                    attempts=attempt + 1,
                    permutation_key=perm,
                    exact_combo_recent=combo_recent,
                    attempt_orders=attempt_orders,
                )

            logger.debug("attempt %d for %s too similar to recent readings", attempt, user_id)
            if not self.config.template_mark_on_accept_only:
                staged_marks.update(attempt_marks)
            order.reverse()

        logger.warning(
            "no novel reading for %s after %d attempts; serving fallback",
            user_id,
            self.config.max_attempts,
        )
        text = fallback_text(lang)
        self._commit(user_id, ReadingEntry(now, fingerprint(text), perm), staged_marks)
        return GenerationResult(
            text=text,
            state=GenerationState.FALLBACK_ACCEPTED,
            attempts=self.config.max_attempts,
            permutation_key=perm,
            exact_combo_recent=combo_recent,
            attempt_orders=attempt_orders,
        )

    def _render(
        self,
        user_id: str,
        order: list[str],
        lang: Lang,
        culture_mode: bool,
        region: str,
        note_rng: Iterator[float],
        now: int,
        staged_marks: dict[str, int],
        attempt_marks: dict[str, int],
    ) -> str:
        lines = [OPENING_LINE]
        for symbol in order:
            fragment = self.catalog.lookup(symbol, lang)
            if fragment is None:
                logger.info("unresolved symbol %r, using placeholder", symbol)
                lines.append(bullet_line(unresolved_fragment(symbol, lang)))
                continue

            if culture_mode:
                note = self.catalog.pick_culture_note(symbol, lang, region, note_rng)
                if note:
                    fragment = f"{fragment} ({note})"
            lines.append(bullet_line(fragment))

            tpl = template_id(symbol, lang)
            if self._template_usable(user_id, tpl, now, staged_marks, attempt_marks):
                attempt_marks[tpl] = now

        lines.append(closing_line(lang))
        return "\n".join(lines)

    def _template_usable(
        self,
        user_id: str,
        tpl: str,
        now: int,
        staged_marks: dict[str, int],
        attempt_marks: dict[str, int],
    ) -> bool:
        # Marks staged earlier in this request count as already applied.
        for marks in (attempt_marks, staged_marks):
            if tpl in marks:
                return (now - marks[tpl]) >= self.config.template_cooldown_ms
        return not self.cooldown.is_on_cooldown(user_id, tpl, now)

    def _commit(self, user_id: str, entry: ReadingEntry, marks: dict[str, int]) -> None:
        for tpl, ts in marks.items():
            self.cooldown.mark_used(user_id, tpl, ts)
        self.store.record_reading(user_id, entry)
