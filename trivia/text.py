from __future__ import annotations

import re
from collections.abc import Iterable


_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # pictographs, emoticons, transport, supplemental symbols
    "\U00002600-\U000027BF"  # misc symbols, dingbats
    "\U00002B00-\U00002BFF"  # arrows, stars
    "\U0000FE00-\U0000FE0F"  # variation selectors
    "\U000E0020-\U000E007F"  # tag characters
    "\u200d"  # zero width joiner
    "\u20e3"  # combining keycap
    "]+"
)


def strip_emoji(text: str) -> str:
    return _EMOJI_RE.sub("", text)


def clean_options(values: Iterable[str]) -> list[str]:
    """Strip emoji and whitespace, drop empties and duplicates (order kept)."""

    out: list[str] = []
    for v in values:
        cleaned = strip_emoji(v).strip()
        if cleaned and cleaned not in out:
            out.append(cleaned)
    return out
