"""Shared FastAPI dependencies used across route modules."""

import os
from functools import lru_cache
from pathlib import Path

from config import GuardConfig
from generation import ReadingGenerator
from similarity_store import SimilarityStore
from symbol_catalog import DEFAULT_CULTURE_NOTES_PATH, DEFAULT_SYMBOLS_PATH, SymbolCatalog
from template_cooldown import TemplateCooldown


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    return Path(raw) if raw not in (None, "") else default


@lru_cache(maxsize=1)
def get_generator() -> ReadingGenerator:
    """One generator (and one set of stores) per process."""
    config = GuardConfig.from_env()
    catalog = SymbolCatalog.from_files(
        _env_path("SYMBOLS_PATH", DEFAULT_SYMBOLS_PATH),
        _env_path("CULTURE_NOTES_PATH", DEFAULT_CULTURE_NOTES_PATH),
    )
    return ReadingGenerator(
        catalog=catalog,
        store=SimilarityStore(config),
        cooldown=TemplateCooldown(config),
        config=config,
    )
