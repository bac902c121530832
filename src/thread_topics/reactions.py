"""
Reaction and agreement detection for short reply posts.

is_reaction is broad (amusement, surprise, emoji, any short lowercase text).
is_agreement is strict: only explicit agreement/endorsement, which is the only
kind of reply allowed to inherit its parent's topics.
"""
import re
from typing import List

from . import config

_SHARED_PATTERNS = [
    r"^(yes|yep|yeah|yup|agreed|exactly|absolutely|definitely|this|same|correct|100%|💯)",
    r"^(so good|great|amazing|incredible|love (it|this)|hell yeah|oh hell yeah)",
    r"^(came here to say this|this is (it|the one|mine)|good (call|choice|pick|answer))",
    r"^(underrated|overrated|classic|banger|legendary|goat|peak)",
    # music endorsements
    r"^(bop|tune|anthem|jam|slaps|bangs|certified|vibes?|mood)",
    r"^oh (hell|fuck) yes",
    r"^(yesss+|yasss+)",
    r"^this is the (answer|one|way)",
    r"^me too",
    r"^right\??!*$",
    r"^well,?\s*yes",
]

REACTION_PATTERNS: List["re.Pattern[str]"] = [
    re.compile(p, re.IGNORECASE)
    for p in _SHARED_PATTERNS + [
        r"^\W*$",
        r"^(lol|lmao|lmbo|omg|omfg|ha+|😂|🤣|👏|👍|🔥|💯|❤️|🎯|🎶|🎵)+$",
    ]
]

AGREEMENT_PATTERNS: List["re.Pattern[str]"] = [
    re.compile(p, re.IGNORECASE) for p in _SHARED_PATTERNS
] + [re.compile(r"^(👏|👍|💯|🎯|🤝|✅|🙌|🎶|🎵)+$")]

_TITLE_WORD_RE = re.compile(r"[A-Z][a-z]{2,}")


def is_reaction(text: str) -> bool:
    """Broad reaction test: don't look for titles in these posts."""
    trimmed = (text or "").strip()
    if not trimmed:
        return True
    if len(trimmed) < config.DEFAULT_REACTION_MAX_CHARS:
        if any(p.search(trimmed) for p in REACTION_PATTERNS):
            return True
    if len(trimmed) <= config.DEFAULT_REACTION_SHORT_CHARS and not _TITLE_WORD_RE.search(trimmed):
        return True
    return False


def is_agreement(text: str) -> bool:
    """Strict agreement test: the post endorses its parent, so it may inherit the parent's topics."""
    trimmed = (text or "").strip()
    if not trimmed:
        return False
    if len(trimmed) < config.DEFAULT_REACTION_MAX_CHARS:
        return any(p.search(trimmed) for p in AGREEMENT_PATTERNS)
    return False
