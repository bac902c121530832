"""
Validation lookup builders.

A lookup maps a lowercase candidate to {canonical, confidence}. Three producers:
  - oracle records from an external title database (build_validation_lookup)
  - a user-supplied list of canonical answers (build_list_validated_lookup)
  - structural self-validation: trust the thread, cluster candidates by
    normalized surface form (build_self_validated_lookup)
"""
import re
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Set

from . import config
from .constants import FUNCTION_WORDS, PROMPT_ADJECTIVES, SELF_VALIDATION_STOPWORDS
from .data_models import CONFIDENCE_LEVELS, ValidationEntry
from .text_utils import normalize_loose, strip_leading_article, to_title_case

ValidationLookup = Dict[str, ValidationEntry]

# "your (adjectives)* WORDS": the noun phrase a prompt asks about
_PROMPT_RE = re.compile(
    r"\byour\s+(?:(?:home|favorite|fav|go-to|all-time|top|first|best|worst|least\s+favorite"
    r"|most\s+hated|childhood|guilty\s+pleasure)\s+)*(\w+(?:\s+\w+){0,4})",
    re.IGNORECASE,
)


def build_validation_lookup(records: Iterable[Mapping]) -> ValidationLookup:
    """
    Build a lookup from oracle validation records:
      {"title": ..., "validated": bool, "validated_title": ..., "validation_confidence": ...}
    Unvalidated or incomplete records are skipped.
    """
    lookup: ValidationLookup = {}
    for r in records:
        title = r.get("title")
        canonical = r.get("validated_title")
        confidence = r.get("validation_confidence")
        if not (r.get("validated") and title and canonical and confidence in CONFIDENCE_LEVELS):
            continue
        lookup[title.lower()] = ValidationEntry(canonical=canonical, confidence=confidence)
    return lookup


def load_lookup(mapping: Mapping) -> ValidationLookup:
    """
    Lookup from a plain mapping. Values may be a canonical string (high confidence)
    or {"canonical": ..., "confidence": ...}.
    """
    lookup: ValidationLookup = {}
    for candidate, value in mapping.items():
        if isinstance(value, str):
            entry = ValidationEntry(canonical=value)
        elif isinstance(value, Mapping) and value.get("canonical"):
            confidence = value.get("confidence") or "high"
            if confidence not in CONFIDENCE_LEVELS:
                continue
            entry = ValidationEntry(canonical=value["canonical"], confidence=confidence)
        else:
            continue
        lookup[str(candidate).lower()] = entry
    return lookup


def build_list_validated_lookup(candidates: Iterable[str], list_items: List[str]) -> ValidationLookup:
    """
    Fuzzy-match candidates against a user-provided list of canonical answers.

    Both sides are normalized (lowercase, punctuation removed, leading article
    stripped). A candidate matches the first list item it equals, contains, or
    is contained in, and gets that item as its canonical with high confidence.
    """
    normalized = [(item, normalize_loose(item)) for item in list_items]
    normalized = [(item, n) for item, n in normalized if n]
    lookup: ValidationLookup = {}
    for candidate in candidates:
        norm = normalize_loose(candidate)
        if not norm:
            continue
        for item, item_norm in normalized:
            if norm == item_norm or norm in item_norm or item_norm in norm:
                lookup[candidate.lower()] = ValidationEntry(canonical=item, confidence="high")
                break
    return lookup


def extract_category_words(root_text: str, max_words: int = config.DEFAULT_CATEGORY_MAX_WORDS) -> List[str]:
    """
    Category words of a prompt, e.g.:
      "what is your home river?"           -> ["river"]
      "share your favorite board game"     -> ["board", "game"]
      "what's your go-to comfort food?"    -> ["comfort", "food"]
      "hello world"                        -> []
    """
    m = _PROMPT_RE.search(root_text or "")
    if not m or not m.group(1):
        return []
    words = [w for w in re.sub(r"[^\w\s]", "", m.group(1).lower()).split() if w not in PROMPT_ADJECTIVES]
    result: List[str] = []
    for w in words:
        if w in FUNCTION_WORDS:
            break
        result.append(w)
        if len(result) >= max_words:
            break
    return result


def _category_forms(words: Iterable[str]) -> Set[str]:
    forms: Set[str] = set()
    for w in words:
        forms.update((w, w + "s", w + "es"))
        if w.endswith("y"):
            forms.add(w[:-1] + "ies")
    return forms


def build_self_validated_lookup(
    candidates: Iterable[str],
    root_text: str,
    max_words: int = config.DEFAULT_SELF_MAX_WORDS,
    min_key_chars: int = config.DEFAULT_SELF_MIN_KEY_CHARS,
) -> ValidationLookup:
    """
    Build a lookup without any external source.

    Candidates are grouped by normalized form; the most common surface form
    (article stripped, title-cased; ties go to the shortest) becomes the
    canonical. Keys that only echo the prompt's category ("river" in a thread
    asking for your home river) or consist only of stop words are dropped.
    """
    category = _category_forms(extract_category_words(root_text))

    groups: Dict[str, List[str]] = {}
    for candidate in candidates:
        if len(candidate.split()) > max_words:
            continue
        key = normalize_loose(candidate)
        if len(key) < min_key_chars or key in category:
            continue
        if all(
            w in SELF_VALIDATION_STOPWORDS or w in FUNCTION_WORDS or w in PROMPT_ADJECTIVES or w in category
            for w in key.split()
        ):
            continue
        groups.setdefault(key, []).append(candidate)

    lookup: ValidationLookup = {}
    for key, members in groups.items():
        forms = Counter(to_title_case(strip_leading_article(m.lower())) for m in members)
        canonical = _pick_canonical(forms) or to_title_case(key)
        for m in members:
            lookup[m.lower()] = ValidationEntry(canonical=canonical, confidence="high")
    return lookup


def _pick_canonical(forms: Counter) -> Optional[str]:
    best: Optional[str] = None
    best_count = 0
    # Counter preserves first-seen order, so ties are broken deterministically
    for form, count in forms.items():
        if count > best_count or (count == best_count and len(form) < len(best or "")):
            best, best_count = form, count
    return best
