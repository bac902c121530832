"""
Candidate phrase extraction from post text.

Several independent strategies each propose surface forms that might name a
title; the union (deduplicated, first-seen order) is the candidate list for a
post. Nothing here knows which candidates are real titles; the validation
lookup decides that.
"""
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from . import config
from .constants import (
    ACRONYMS,
    HASHTAG_NOISE,
    QUOTED_NOISE,
    QUOTED_PREFIXES,
    REACTION_STOPWORDS,
    SENTENCE_PREFIXES,
    TITLE_CONNECTORS,
    TITLE_NOISE,
)
from .data_models import Post, TextContent
from .text_utils import build_search_text, normalize_space, segment_token_lower, split_camel_and_digits

_ALL_CAPS_RE = re.compile(r"\b([A-Z]{2,}(?:\s+[A-Z]{2,})+)\b")
_IMAGE_ALT_RE = re.compile(r"\[image alt: ([^\]]+)\]")
_HASHTAG_RE = re.compile(r"(?<![\w#])#([A-Za-z][A-Za-z0-9]+)")
_TRAILING_LINE_PUNCT_RE = re.compile(r"[.!?,;:]+$")
_UPPER_ONLY_RE = re.compile(r"^[A-Z]+$")
_EMOJI_RE = re.compile("[\U0001F000-\U0001FFFF]")
_TAG_OR_MENTION_RE = re.compile(r"[#@]\S+")
_URL_RE = re.compile(r"https?://\S+")
_SHORT_POST_JUNK_RE = re.compile(r"[^\w\s'’:\-&]")


@dataclass(frozen=True)
class ExtractorTables:
    """Static word lists used by the extractor; swap in smaller ones for tests."""
    connectors: Tuple[str, ...] = TITLE_CONNECTORS
    title_noise: FrozenSet[str] = TITLE_NOISE
    quoted_noise: FrozenSet[str] = QUOTED_NOISE
    quoted_prefixes: Tuple[str, ...] = QUOTED_PREFIXES
    acronyms: FrozenSet[str] = ACRONYMS
    sentence_prefixes: Tuple[str, ...] = SENTENCE_PREFIXES
    reaction_stopwords: FrozenSet[str] = REACTION_STOPWORDS
    hashtag_noise: FrozenSet[str] = HASHTAG_NOISE


def _title_case_pattern(connectors: Sequence[str]) -> "re.Pattern[str]":
    joiner = r"(?:\s+|:\s*|-\s*)"
    conn = "|".join(re.escape(c) for c in connectors) + r"|&|vs\.?|v\.?"
    word = r"[A-Z][a-z']+"
    return re.compile(
        r"\b(%s(?:%s(?:(?:%s)%s)*%s)+)" % (word, joiner, conn, joiner, word)
    )


class CandidateExtractor:
    def __init__(
        self,
        tables: Optional[ExtractorTables] = None,
        segment_hashtags: bool = False,
    ):
        self.tables = tables or ExtractorTables()
        self.segment_hashtags = segment_hashtags
        self._title_case_re = _title_case_pattern(self.tables.connectors)
        self._quoted_re = re.compile(
            r"[\"“]([^\"”]{%d,%d})[\"”]"
            % (config.DEFAULT_QUOTED_MIN_CHARS, config.DEFAULT_QUOTED_MAX_CHARS)
        )
        self._quoted_prefix_re = re.compile(
            r"^(?:%s) " % "|".join(re.escape(p) for p in self.tables.quoted_prefixes),
            re.IGNORECASE,
        )

    def is_sentence_start(self, text: str) -> bool:
        return text.lower().startswith(self.tables.sentence_prefixes)

    def extract(self, text: str) -> List[str]:
        """Extract candidate title strings from text using every strategy."""
        if not text or not text.strip():
            return []
        found: Dict[str, None] = {}

        for t in self._quoted(text):
            found.setdefault(t)

        # Per line: Title Case runs must not join "Mersey\nDee" into "Mersey Dee"
        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue
            for t in self._title_case(line):
                found.setdefault(t)
            for t in self._all_caps(line):
                found.setdefault(t)
            t = self._line_answer(line)
            if t:
                found.setdefault(t)

        for t in self._image_alt(text):
            found.setdefault(t)
        if self.segment_hashtags:
            for t in self._hashtags(text):
                found.setdefault(t)
        return list(found)

    def _quoted(self, text: str) -> Iterable[str]:
        for m in self._quoted_re.finditer(text):
            t = m.group(1).strip()
            n_words = len(t.split())
            if len(t) < config.DEFAULT_QUOTED_MIN_CHARS or n_words > config.DEFAULT_QUOTED_MAX_WORDS:
                continue
            if t.lower() in self.tables.quoted_noise or self._quoted_prefix_re.match(t):
                continue
            # single words only when capitalized ("Heat", not "heat")
            if n_words >= 2 or t[:1].isupper():
                yield t

    def _title_case(self, line: str) -> Iterable[str]:
        for m in self._title_case_re.finditer(line):
            t = m.group(1).strip()
            if t not in self.tables.title_noise and len(t) >= config.DEFAULT_TITLE_CASE_MIN_CHARS:
                yield t

    def _all_caps(self, line: str) -> Iterable[str]:
        for m in _ALL_CAPS_RE.finditer(line):
            raw = m.group(1).strip()
            if len(raw) < config.DEFAULT_ALL_CAPS_MIN_CHARS:
                continue
            words = raw.split()
            if all(w in self.tables.acronyms for w in words):
                continue
            yield " ".join(w[0] + w[1:].lower() for w in words)

    def _line_answer(self, line: str) -> Optional[str]:
        """A short line that reads as a standalone answer ("Severn", "East River")."""
        if len(line) < 2 or len(line) > config.DEFAULT_LINE_MAX_CHARS:
            return None
        cleaned = _TRAILING_LINE_PUNCT_RE.sub("", line).strip()
        n_words = len(cleaned.split())
        if n_words < 1 or n_words > config.DEFAULT_LINE_MAX_WORDS or len(cleaned) < 2:
            return None
        if not ("A" <= cleaned[0] <= "Z"):
            return None
        if (
            self.is_sentence_start(cleaned)
            or cleaned in self.tables.title_noise
            or cleaned.lower() in self.tables.reaction_stopwords
            or cleaned in self.tables.acronyms
            or _UPPER_ONLY_RE.match(cleaned)
        ):
            return None
        return cleaned

    def _image_alt(self, text: str) -> Iterable[str]:
        for m in _IMAGE_ALT_RE.finditer(text):
            alt = m.group(1).strip()
            if len(alt) <= config.DEFAULT_ALT_MAX_CHARS and len(alt.split()) <= config.DEFAULT_ALT_MAX_WORDS:
                yield alt

    def _hashtags(self, text: str) -> Iterable[str]:
        for m in _HASHTAG_RE.finditer(text):
            tag = m.group(1)
            if tag.islower():
                words = segment_token_lower(tag, config.DEFAULT_HASHTAG_SEGMENT_MIN_CHARS)
                words = [w[:1].upper() + w[1:] for w in words]
            else:
                words = split_camel_and_digits(tag)
            if not 2 <= len(words) <= config.DEFAULT_HASHTAG_MAX_WORDS:
                continue
            phrase = " ".join(words)
            if phrase in self.tables.title_noise or phrase.lower() in self.tables.hashtag_noise:
                continue
            yield phrase

    def short_text(self, text: str) -> Optional[str]:
        """Treat a short post (≤80 chars on its first line) as one whole-text candidate."""
        if not text or not text.strip():
            return None
        effective = text
        # Later lines are covered by the per-line strategy
        if "\n" in text:
            lines = [l.strip() for l in text.split("\n") if l.strip()]
            if not lines:
                return None
            effective = lines[0]
        if len(effective) > config.DEFAULT_SHORT_POST_MAX_CHARS:
            return None
        cleaned = _EMOJI_RE.sub("", effective)
        cleaned = _TAG_OR_MENTION_RE.sub("", cleaned)
        cleaned = _URL_RE.sub("", cleaned)
        cleaned = _SHORT_POST_JUNK_RE.sub("", cleaned)
        cleaned = normalize_space(cleaned)
        if len(cleaned) < 2 or len(cleaned.split()) > config.DEFAULT_SHORT_POST_MAX_WORDS:
            return None
        if cleaned.lower() in self.tables.reaction_stopwords or self.is_sentence_start(cleaned):
            return None
        return cleaned

    def for_post(self, post: Post, content: TextContent, root_uri: str) -> List[str]:
        """
        Candidates for one post, longest first, as consumed by discovery and labeling:
        every strategy over the search text plus the whole-short-post candidate.
        """
        candidates = self.extract(build_search_text(content, root_uri))
        short = self.short_text(post.text)
        if short:
            candidates.append(short)
        # stable: equal-length candidates keep extraction order
        return sorted(candidates, key=len, reverse=True)


_DEFAULT_EXTRACTOR: Optional[CandidateExtractor] = None


def default_extractor() -> CandidateExtractor:
    global _DEFAULT_EXTRACTOR
    if _DEFAULT_EXTRACTOR is None:
        _DEFAULT_EXTRACTOR = CandidateExtractor()
    return _DEFAULT_EXTRACTOR


def extract_candidates(text: str) -> List[str]:
    return default_extractor().extract(text)


def extract_short_text_candidate(text: str) -> Optional[str]:
    return default_extractor().short_text(text)


def post_candidates(
    post: Post,
    content: TextContent,
    root_uri: str,
    extractor: Optional[CandidateExtractor] = None,
) -> List[str]:
    return (extractor or default_extractor()).for_post(post, content, root_uri)


def thread_candidates(
    posts: Sequence[Post],
    post_texts: Dict[str, TextContent],
    root_uri: str,
    extractor: Optional[CandidateExtractor] = None,
) -> List[str]:
    """Unique candidates across all non-root posts, in thread order (the candidate universe)."""
    extractor = extractor or default_extractor()
    seen: Dict[str, None] = {}
    for post in posts:
        if post.uri == root_uri:
            continue
        content = post_texts.get(post.uri)
        if content is None:
            continue
        for c in extractor.extract(build_search_text(content, root_uri)):
            seen.setdefault(c)
        short = extractor.short_text(post.text)
        if short:
            seen.setdefault(short)
    return list(seen)
