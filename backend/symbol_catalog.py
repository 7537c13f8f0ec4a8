"""Read-only symbol translations and culture notes, loaded once at startup."""

import json
import logging
import math
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Iterator, Optional

from languages import Lang

logger = logging.getLogger(__name__)

# Installed alongside the modules as package data.
DEFAULT_SYMBOLS_PATH = resources.files("fal_data").joinpath("symbols.json")
DEFAULT_CULTURE_NOTES_PATH = resources.files("fal_data").joinpath("culture_notes.json")

GLOBAL_REGION = "GLOBAL"


@dataclass(frozen=True)
class CultureNote:
    note_id: str
    texts: dict[str, str]
    allow: tuple[str, ...] = (GLOBAL_REGION,)

    def text_for(self, lang: Lang) -> str:
        return self.texts.get(lang.value) or ""


@dataclass
class SymbolCatalog:
    translations: dict[str, dict[str, str]] = field(default_factory=dict)
    notes: dict[str, list[CultureNote]] = field(default_factory=dict)

    def lookup(self, symbol: str, lang: Lang) -> Optional[str]:
        """Rendered fragment for *symbol*, or None when the symbol is unknown."""
        entry = self.translations.get(symbol)
        if entry is None:
            return None
        return entry.get(lang.value) or entry.get(Lang.TR.value) or None

    def culture_notes(self, symbol: str, region: Optional[str] = None) -> list[CultureNote]:
        region = region or GLOBAL_REGION
        return [n for n in self.notes.get(symbol, []) if region in n.allow]

    def pick_culture_note(self, symbol: str, lang: Lang, region: Optional[str], rng: Iterator[float]) -> str:
        filtered = self.culture_notes(symbol, region)
        if not filtered:
            return ""
        idx = min(len(filtered) - 1, math.floor(next(rng) * len(filtered)))
        return filtered[idx].text_for(lang)

    @classmethod
    def from_dicts(cls, symbols_doc: dict, notes_doc: Optional[dict] = None) -> "SymbolCatalog":
        translations: dict[str, dict[str, str]] = {}
        for item in symbols_doc.get("symbols") or []:
            translations[item["symbol"]] = dict(item.get("translations") or {})

        notes: dict[str, list[CultureNote]] = {}
        for item in (notes_doc or {}).get("symbols") or []:
            for raw in item.get("culture_notes") or []:
                texts = dict(raw.get("texts") or {})
                for code in (Lang.TR.value, Lang.EN.value):
                    if raw.get(f"note_{code}") and code not in texts:
                        texts[code] = raw[f"note_{code}"]
                notes.setdefault(item["symbol"], []).append(
                    CultureNote(
                        note_id=str(raw.get("note_id") or ""),
                        texts=texts,
                        allow=tuple(raw.get("allow") or (GLOBAL_REGION,)),
                    )
                )
        return cls(translations=translations, notes=notes)

    @classmethod
    def from_files(cls, symbols_path: Path, notes_path: Path) -> "SymbolCatalog":
        return cls.from_dicts(_read_json(symbols_path), _read_json(notes_path))


def _read_json(path: Path) -> dict:
    if not path.is_file():
        logger.warning("dataset not found: %s (continuing with empty data)", path)
        return {}
    return json.loads(path.read_text(encoding="utf-8"))
