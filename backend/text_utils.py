"""Low-level text helpers used by the reading engine.

No dependency on schemas, config, or any other project module.
"""

import re

# Letters outside ASCII that Turkish readings rely on.
TURKISH_LETTERS = "ğüşöçıİĞÜŞÖÇ"

_NON_TOKEN_RE = re.compile(rf"[^a-z0-9{TURKISH_LETTERS}\s]", re.IGNORECASE)


def tokenize(text: str) -> list[str]:
    """Lower-case *text*, blank out punctuation and split into tokens.

    Turkish letters survive the filter so that e.g. "Kuş" and "kuş" map to
    the same token while "kuş" and "kus" stay distinct.
    """
    lowered = (text or "").lower()
    return [tok for tok in _NON_TOKEN_RE.sub(" ", lowered).split() if tok]


def bullet_line(fragment: str) -> str:
    return f"• {fragment}"
