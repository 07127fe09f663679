from __future__ import annotations

from typing import Tuple


DEFAULT_AVATAR = "👤"

# Checked in order; the first category with a matching keyword wins.
AVATAR_KEYWORDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("mom", "mother", "mama"), "👩"),
    (("dad", "father", "papa"), "👨"),
    (("kid", "child", "son"), "👦"),
    (("daughter", "girl"), "👧"),
    (("grandma", "grandmother"), "👵"),
    (("grandpa", "grandfather"), "👴"),
    (("student",), "🧑‍🎓"),
)


def avatar_for_name(name: str) -> str:
    lowered = (name or "").lower()
    for keywords, avatar in AVATAR_KEYWORDS:
        if any(word in lowered for word in keywords):
            return avatar
    return DEFAULT_AVATAR
