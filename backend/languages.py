"""
Fixed reading phrases per supported language.
"""

from enum import Enum
from typing import Dict, Optional


class Lang(str, Enum):
    TR = "tr"
    EN = "en"
    ID = "id"

    @classmethod
    def resolve(cls, code: Optional[str]) -> "Lang":
        """Map a request language code onto a supported language.

        Unknown or empty codes fall back to English.
        """
        try:
            return cls((code or "").strip().lower())
        except ValueError:
            return FALLBACK_LANG


FALLBACK_LANG = Lang.EN

OPENING_LINE = "Fincandan görülenler"

LANG_TEXTS: Dict[Lang, Dict[str, str]] = {
    Lang.TR: {
        "closing": "Özetle: Haberler yeni kapılar açıyor; sezgin yolunu aydınlatıyor.",
        "fallback": "Fincanda net figür az; yine de iç sesinle ilerle.",
        "unresolved": "bir işaret belirdi.",
    },
    Lang.EN: {
        "closing": "In short: news opens doors; your intuition lights the way.",
        "fallback": "Few clear figures; follow your inner voice.",
        "unresolved": "a sign appeared.",
    },
    Lang.ID: {
        "closing": "Singkatnya: kabar membuka pintu; intuisi Anda menerangi langkah.",
        "fallback": "Figur jelas sedikit; ikuti suara hati.",
        "unresolved": "sebuah tanda muncul.",
    },
}


def get_lang_texts(lang: Lang) -> Dict[str, str]:
    return LANG_TEXTS.get(lang, LANG_TEXTS[FALLBACK_LANG])


def closing_line(lang: Lang) -> str:
    return get_lang_texts(lang)["closing"]


def fallback_text(lang: Lang) -> str:
    return get_lang_texts(lang)["fallback"]


def unresolved_fragment(symbol: str, lang: Lang) -> str:
    return f"{symbol} — {get_lang_texts(lang)['unresolved']}"


def template_id(symbol: str, lang: Lang) -> str:
    return f"{symbol}_v1_{lang.value}"


def get_all_lang_codes():
    return [lang.value for lang in Lang]
