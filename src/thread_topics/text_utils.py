import re
from typing import Iterable, List, Optional

from wordfreq import zipf_frequency
from wordsegment import load as _ws_load, segment as _ws_segment

from .constants import ALIGNMENT_STOPWORDS, EMBED_STOP_WORDS, LEADING_ARTICLES, MERGE_LEADING_CONTRACTIONS, MERGE_STOPWORDS
from .data_models import CONFIDENCE_LEVELS, TextContent

_WORDSEGMENT_LOADED = False

_ws_re = re.compile(r"\s+")
_word_split_re = re.compile(r"[\s:,]+")
# Split camelCase, PascalCase, digit transitions, and acronym-to-Word (e.g., TheMatrix -> The | Matrix)
_camel_boundary_re = re.compile(
    r"(?<=[a-z0-9])(?=[A-Z])"          # lower/digit -> Upper
    r"|(?<=[A-Z])(?=[A-Z][a-z])"       # ACRONYM -> ProperCase boundary
    r"|(?<=[A-Za-z])(?=[0-9])"         # letter -> digit
    r"|(?<=[0-9])(?=[A-Za-z])"         # digit -> letter
)
_curly_quote_re = re.compile("[‘’′]")
_leading_article_re = re.compile(r"^(?:%s)\s+" % "|".join(LEADING_ARTICLES), re.IGNORECASE)
_leading_contraction_re = re.compile(
    r"^(?:%s)\s+" % "|".join(re.escape(c) for c in MERGE_LEADING_CONTRACTIONS), re.IGNORECASE
)
_trailing_punct_re = re.compile(r"[.,!?'\"]+$")


def normalize_space(s: str) -> str:
    return _ws_re.sub(" ", s).strip()


def word_count(s: str) -> int:
    return len(s.split())


def split_words(s: str) -> List[str]:
    """Lowercase words split on whitespace, colons and commas."""
    return [w for w in _word_split_re.split(s.lower()) if w]


def significant_words(title: str, stopwords: Iterable[str] = ALIGNMENT_STOPWORDS) -> List[str]:
    """Lowercase words of a title minus articles, prepositions and conjunctions."""
    stop = stopwords if isinstance(stopwords, (set, frozenset)) else set(stopwords)
    return [w for w in split_words(title) if w not in stop]


def merge_words(title: str) -> List[str]:
    """Significant words for duplicate detection; contractions are ignored too."""
    return significant_words(title, MERGE_STOPWORDS)


def strip_leading_article(s: str) -> str:
    return _leading_article_re.sub("", s).strip()


def strip_leading_the(s: str) -> str:
    return re.sub(r"^the\s+", "", s, flags=re.IGNORECASE).strip()


def to_title_case(s: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in s.split())


def normalize_for_merge(title: str) -> str:
    """
    Normalize a canonical title for duplicate grouping.

    "It's All Coming Back to Me Now" and "All Coming Back to Me Now" share a key,
    as do "The Thing" / "Thing" and "Paradise City" / "Paradise Citys".
    """
    n = _curly_quote_re.sub("'", title).lower()
    n = _leading_contraction_re.sub("", n)
    n = _leading_article_re.sub("", n)
    n = _trailing_punct_re.sub("", n)
    if n.endswith("s"):
        n = n[:-1]
    return normalize_space(n)


def normalize_loose(s: str) -> str:
    """Lowercase, article-stripped, punctuation-free form used for fuzzy list matching."""
    n = strip_leading_article(s.lower().strip())
    n = re.sub(r"[^\w\s]", "", n)
    return normalize_space(n)


def better_confidence(current: Optional[str], candidate: str) -> str:
    if current is None:
        return candidate
    if CONFIDENCE_LEVELS.index(candidate) < CONFIDENCE_LEVELS.index(current):
        return candidate
    return current


def build_search_text(content: TextContent, root_uri: str) -> str:
    """
    Own text + quoted text + quoted alt text, one block per line.
    Text quoted from the root post is left out: it restates the prompt, not an answer.
    """
    parts = [content.own_text or ""]
    if content.quoted_text and content.quoted_uri != root_uri:
        parts.append(content.quoted_text)
    if content.quoted_alt_text:
        parts.append("\n".join(content.quoted_alt_text))
    return "\n".join(parts)


def split_camel_and_digits(token: str) -> List[str]:
    """
    Split camel/pascal case and letter-digit boundaries.
    Preserves all-uppercase short acronyms as a single token.
    """
    if not token:
        return []
    if token.isupper() and len(token) <= 5:
        return [token]
    parts = _camel_boundary_re.split(token)
    out = []
    for p in parts:
        if not p:
            continue
        out.extend(re.split(r"[^0-9A-Za-z']+", p))
    return [x for x in out if x]


def _ensure_wordsegment_loaded() -> None:
    global _WORDSEGMENT_LOADED
    if not _WORDSEGMENT_LOADED:
        _ws_load()
        _WORDSEGMENT_LOADED = True


def segment_token_lower(token: str, min_len: int = 9) -> List[str]:
    """
    Segment a glued lowercase token into words (e.g., 'diehardwithavengeance').
    Short or non-alphabetic tokens are returned unchanged.
    """
    if not token or not token.isalpha() or not token.islower() or len(token) < min_len:
        return [token]
    _ensure_wordsegment_loaded()
    segs = [s.lower() for s in _ws_segment(token) if s]
    return segs or [token]


def is_common_word(pattern: str, zipf_threshold: float) -> bool:
    """A single lowercase word too common to scan for as a song name, like "just"."""
    if " " in pattern:
        return False
    if pattern in EMBED_STOP_WORDS:
        return True
    if zipf_threshold > 0:
        return zipf_frequency(pattern, "en") >= zipf_threshold
    return False


def spans_overlap(start: int, end: int, spans: Iterable[tuple]) -> bool:
    return any(start < e and end > s for s, e in spans)
