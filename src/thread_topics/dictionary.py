"""
Phase 1: discover the set of titles being discussed in a thread.

Broadly extract candidates from every non-root post, resolve them through the
validation lookup, aggregate evidence per canonical title, then disambiguate:

  1. evidence: confident mentions (structured extraction, longest match wins)
     and incidental mentions (raw substring scan for long lookup keys)
  2. filtering: minimum confident mentions, low-confidence guard, short-title
     guard, alias/canonical alignment
  3. fragment dedup: drop a title whose every mention sits inside a longer one
  4. prefix-fragment filter: drop a short title that is consistently preceded
     by the same word ("Stop Me Now" inside "Don't Stop Me Now")
  5. canonical merge: fold different canonical forms of one title together and
     patch the lookup so labeling resolves to the survivor

Every step under-assigns rather than over-assigns: a false topic pollutes the
visible list, a missed one only loses a post.
"""
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from . import config
from .candidates import CandidateExtractor, default_extractor
from .constants import PREFIX_SKIP_WORDS
from .data_models import DictionaryEntry, EmbedTitleEntry, Post, TextContent, ThreadDictionary, ValidationEntry
from .text_utils import (
    better_confidence,
    build_search_text,
    is_common_word,
    merge_words,
    normalize_for_merge,
    significant_words,
    strip_leading_the,
    word_count,
)


@dataclass(frozen=True)
class DiscoveryOptions:
    min_confident_for_short_title: int = config.DEFAULT_MIN_CONFIDENT_FOR_SHORT_TITLE
    min_confident_overall: int = config.DEFAULT_MIN_CONFIDENT_OVERALL
    # Pre-resolved link titles: post uri -> parsed embed title
    embed_titles: Optional[Mapping[str, EmbedTitleEntry]] = None
    short_title_max_words: int = config.DEFAULT_SHORT_TITLE_MAX_WORDS
    low_confidence_min_words: int = config.DEFAULT_LOW_CONFIDENCE_MIN_WORDS
    incidental_min_chars: int = config.DEFAULT_INCIDENTAL_MIN_CHARS
    incidental_min_words: int = config.DEFAULT_INCIDENTAL_MIN_WORDS
    alias_alignment_ratio: float = config.DEFAULT_ALIAS_ALIGNMENT_RATIO
    prefix_fragment_ratio: float = config.DEFAULT_PREFIX_FRAGMENT_RATIO
    prefix_fragment_min_posts: int = config.DEFAULT_PREFIX_FRAGMENT_MIN_POSTS
    prefix_fragment_max_words: int = config.DEFAULT_PREFIX_FRAGMENT_MAX_WORDS
    merge_overlap_ratio: float = config.DEFAULT_MERGE_OVERLAP_RATIO
    merge_min_words: int = config.DEFAULT_MERGE_MIN_WORDS
    embed_pattern_min_chars: int = config.DEFAULT_EMBED_PATTERN_MIN_CHARS
    embed_word_boundary_chars: int = config.DEFAULT_EMBED_WORD_BOUNDARY_CHARS
    embed_common_word_zipf: float = config.DEFAULT_EMBED_COMMON_WORD_ZIPF


class _TitleEvidence:
    __slots__ = ("aliases", "confident", "incidental", "best_confidence")

    def __init__(self, confidence: str):
        self.aliases: Set[str] = set()
        # dicts as ordered sets
        self.confident: Dict[str, None] = {}
        self.incidental: Dict[str, None] = {}
        self.best_confidence = confidence


class EvidenceCollector:
    """Per-canonical evidence tallies; confident and incidental mentions are kept apart."""

    def __init__(self) -> None:
        self.titles: Dict[str, _TitleEvidence] = {}

    def _ensure(self, canonical: str, confidence: str) -> _TitleEvidence:
        info = self.titles.get(canonical)
        if info is None:
            info = _TitleEvidence(confidence)
            self.titles[canonical] = info
        info.best_confidence = better_confidence(info.best_confidence, confidence)
        return info

    def record_confident(self, canonical: str, alias: str, post_uri: str, confidence: str) -> None:
        info = self._ensure(canonical, confidence)
        info.aliases.add(alias.lower())
        info.confident.setdefault(post_uri)
        info.incidental.pop(post_uri, None)

    def record_incidental(self, canonical: str, alias: str, post_uri: str, confidence: str) -> None:
        info = self._ensure(canonical, confidence)
        info.aliases.add(alias.lower())
        if post_uri not in info.confident:
            info.incidental.setdefault(post_uri)


def discover_dictionary(
    posts: Sequence[Post],
    post_texts: Mapping[str, TextContent],
    lookup: Mapping[str, ValidationEntry],
    root_uri: str,
    root_text: str,
    options: Optional[DiscoveryOptions] = None,
    extractor: Optional[CandidateExtractor] = None,
) -> ThreadDictionary:
    """
    Discover the titles discussed in a thread.

    posts: every post in the thread (the root is skipped by uri)
    post_texts: extracted text per post uri; posts without an entry are skipped
    lookup: lowercase candidate -> ValidationEntry
    root_text: the root post's text; anything it contains is prompt, not answer
    """
    opts = options or DiscoveryOptions()
    extractor = extractor or default_extractor()
    evidence = EvidenceCollector()
    lower_root = (root_text or "").lower()

    # Reverse-scan patterns are the same for every post
    incidental_patterns: List[Tuple[str, ValidationEntry]] = []
    for candidate, entry in lookup.items():
        if entry.confidence == "low":
            continue
        pattern = candidate.lower()
        if pattern in lower_root:
            continue
        if len(pattern) < opts.incidental_min_chars and word_count(pattern) < opts.incidental_min_words:
            continue
        incidental_patterns.append((pattern, entry))

    for post in posts:
        if post.uri == root_uri:
            continue
        content = post_texts.get(post.uri)
        if content is None:
            continue

        # Confident: structured extraction, longest match wins
        consumed: List[str] = []
        for candidate in extractor.for_post(post, content, root_uri):
            lower = candidate.lower()
            entry = lookup.get(lower)
            if entry is None:
                continue
            if any(lower in span for span in consumed):
                continue
            evidence.record_confident(entry.canonical, candidate, post.uri, entry.confidence)
            consumed.append(lower)

        # Incidental: raw substring scan
        lower_text = build_search_text(content, root_uri).lower()
        for pattern, entry in incidental_patterns:
            if pattern in lower_text:
                evidence.record_incidental(entry.canonical, pattern, post.uri, entry.confidence)

    if opts.embed_titles:
        _seed_embed_titles(evidence, posts, post_texts, opts, root_uri, lower_root)

    dictionary = _filter_titles(evidence, opts)
    remove_fragment_duplicates(dictionary)
    filter_prefix_fragments(dictionary, post_texts, root_uri, opts)
    redirects = merge_duplicate_canonicals(dictionary, opts.merge_overlap_ratio, opts.merge_min_words)

    patched: Dict[str, ValidationEntry] = {}
    for candidate, entry in lookup.items():
        target = redirects.get(entry.canonical)
        patched[candidate] = ValidationEntry(canonical=target, confidence=entry.confidence) if target else entry

    return ThreadDictionary(entries=dictionary, patched_lookup=patched, redirects=redirects)


def _seed_embed_titles(
    evidence: EvidenceCollector,
    posts: Sequence[Post],
    post_texts: Mapping[str, TextContent],
    opts: DiscoveryOptions,
    root_uri: str,
    lower_root: str,
) -> None:
    """
    Link titles resolved before discovery. The linking post gets a confident
    mention outright; other posts naming the song in text get incidental ones.
    """
    embed_titles = opts.embed_titles or {}
    for post_uri, entry in embed_titles.items():
        if post_uri == root_uri:
            continue
        evidence.record_confident(entry.canonical, entry.song, post_uri, "high")
        evidence.record_confident(entry.canonical, entry.canonical, post_uri, "high")

    matchers: Dict[str, str] = {}
    for entry in embed_titles.values():
        pattern = entry.song.lower()
        if len(pattern) < opts.embed_pattern_min_chars or pattern in lower_root:
            continue
        # "Just" by Radiohead would match every post containing "just"
        if is_common_word(pattern, opts.embed_common_word_zipf):
            continue
        matchers.setdefault(pattern, entry.canonical)
    ordered = sorted(matchers.items(), key=lambda kv: len(kv[0]), reverse=True)

    for post in posts:
        if post.uri == root_uri or post.uri in embed_titles:
            continue
        content = post_texts.get(post.uri)
        if content is None:
            continue
        text = (content.own_text or "").lower()
        for pattern, canonical in ordered:
            idx = text.find(pattern)
            if idx == -1:
                continue
            if len(pattern) < opts.embed_word_boundary_chars:
                before = text[idx - 1] if idx > 0 else " "
                end = idx + len(pattern)
                after = text[end] if end < len(text) else " "
                if before.isalnum() or after.isalnum():
                    continue
            evidence.record_incidental(canonical, pattern, post.uri, "high")


def _aligned(canonical: str, aliases: Set[str], ratio: float) -> bool:
    """Some alias must share enough of the canonical's significant words."""
    canon_words = significant_words(canonical)
    if not canon_words:
        return False
    for alias in aliases:
        alias_words = set(significant_words(alias))
        matched = sum(1 for w in canon_words if w in alias_words)
        if matched / len(canon_words) >= ratio:
            return True
    return False


def _exact_multiword_alias(canonical: str, aliases: Set[str], min_words: int) -> bool:
    if word_count(canonical) < min_words:
        return False
    target = strip_leading_the(canonical.lower())
    return any(strip_leading_the(a) == target for a in aliases)


def _filter_titles(evidence: EvidenceCollector, opts: DiscoveryOptions) -> Dict[str, DictionaryEntry]:
    dictionary: Dict[str, DictionaryEntry] = {}
    for canonical, info in evidence.titles.items():
        confident_count = len(info.confident)
        if confident_count < max(1, opts.min_confident_overall):
            continue
        # Low-confidence oracle matches only count as exact multi-word names
        if info.best_confidence == "low" and not _exact_multiword_alias(
            canonical, info.aliases, opts.low_confidence_min_words
        ):
            continue
        if (
            len(significant_words(canonical)) <= opts.short_title_max_words
            and confident_count < opts.min_confident_for_short_title
        ):
            continue
        if not _aligned(canonical, info.aliases, opts.alias_alignment_ratio):
            continue

        post_uris = list(info.confident) + [u for u in info.incidental if u not in info.confident]
        dictionary[canonical] = DictionaryEntry(
            canonical=canonical,
            aliases=set(info.aliases),
            frequency=len(post_uris),
            confidence=info.best_confidence,
            confident_count=confident_count,
            incidental_count=len(info.incidental),
            post_uris=set(post_uris),
        )
    return dictionary


def _titles_overlap(short: DictionaryEntry, long: DictionaryEntry) -> bool:
    short_norm = strip_leading_the(short.canonical.lower())
    long_norm = strip_leading_the(long.canonical.lower())
    if len(long_norm) > len(short_norm) and short_norm in long_norm:
        return True
    for sa in short.aliases:
        for la in long.aliases:
            if len(la) > len(sa) and sa in la:
                return True
    return False


def remove_fragment_duplicates(dictionary: Dict[str, DictionaryEntry]) -> List[str]:
    """
    Drop a title contained in a longer one when it has no independent mention:
    every post mentioning the short title also mentions the long one.
    Returns the removed canonicals.
    """
    removed: List[str] = []
    canonicals = list(dictionary)
    for short in canonicals:
        if short not in dictionary:
            continue
        for long in canonicals:
            if short == long or long not in dictionary:
                continue
            short_entry, long_entry = dictionary[short], dictionary[long]
            if not _titles_overlap(short_entry, long_entry):
                continue
            independent = sum(1 for uri in short_entry.post_uris if uri not in long_entry.post_uris)
            if independent == 0:
                del dictionary[short]
                removed.append(short)
                break
    return removed


def filter_prefix_fragments(
    dictionary: Dict[str, DictionaryEntry],
    post_texts: Mapping[str, TextContent],
    root_uri: str,
    opts: Optional[DiscoveryOptions] = None,
) -> List[str]:
    """
    Drop short titles that are truncations of a longer unlabeled phrase.

    If one specific word precedes the title in most of its occurrences it is a
    fragment: "Stop Me Now" preceded by "don't" in 80% of posts. "Apollo 13"
    preceded by "watch"/"love"/"saw" is not.
    """
    opts = opts or DiscoveryOptions()
    to_remove: List[str] = []
    for canonical, entry in dictionary.items():
        if word_count(canonical) > opts.prefix_fragment_max_words:
            continue
        lower_canonical = canonical.lower()
        prefix_counts: Counter = Counter()
        matched_posts = 0
        for uri in sorted(entry.post_uris):
            if uri == root_uri:
                continue
            content = post_texts.get(uri)
            if content is None or not content.own_text:
                continue
            lower_text = content.own_text.lower()
            idx = lower_text.find(lower_canonical)
            if idx == -1:
                continue
            matched_posts += 1
            if idx > 1:
                before = lower_text[max(0, idx - 20):idx].rstrip().split()
                last = before[-1] if before else ""
                if last and all(c.isalpha() or c == "'" for c in last) and last not in PREFIX_SKIP_WORDS:
                    prefix_counts[last] += 1

        if matched_posts < opts.prefix_fragment_min_posts:
            continue
        if any(count / matched_posts > opts.prefix_fragment_ratio for count in prefix_counts.values()):
            to_remove.append(canonical)

    for canonical in to_remove:
        del dictionary[canonical]
    return to_remove


def merge_duplicate_canonicals(
    dictionary: Dict[str, DictionaryEntry],
    overlap_ratio: float = config.DEFAULT_MERGE_OVERLAP_RATIO,
    min_words: int = config.DEFAULT_MERGE_MIN_WORDS,
) -> Dict[str, str]:
    """
    Merge entries that are the same title under different canonical forms
    ("It's All Coming Back to Me Now" / "All Coming Back to Me Now").

    Two bounded passes: exact normalized-key groups, then pairwise
    significant-word overlap in both directions. Returns loser -> winner.
    """
    redirects: Dict[str, str] = {}

    groups: Dict[str, List[str]] = {}
    for canonical in dictionary:
        groups.setdefault(normalize_for_merge(canonical), []).append(canonical)
    for group in groups.values():
        if len(group) > 1:
            _merge_group(dictionary, group, redirects)

    # "Paradise by the Dashboard Light" vs "Paradise by the Dashboard Lights"
    remaining = list(dictionary)
    words = {c: merge_words(c) for c in remaining}
    merged: Set[str] = set()
    for i, a in enumerate(remaining):
        if a in merged or len(words[a]) < min_words:
            continue
        a_words = words[a]
        group = [a]
        for b in remaining[i + 1:]:
            if b in merged or len(words[b]) < min_words:
                continue
            b_words = words[b]
            a_in_b = sum(1 for w in a_words if w in b_words) / len(a_words)
            b_in_a = sum(1 for w in b_words if w in a_words) / len(b_words)
            if a_in_b >= overlap_ratio and b_in_a >= overlap_ratio:
                group.append(b)
                merged.add(b)
        if len(group) > 1:
            merged.add(a)
            _merge_group(dictionary, group, redirects)

    # A first-pass winner can lose in the second pass; point everything at the survivor
    for loser in list(redirects):
        target = redirects[loser]
        seen = {loser}
        while target in redirects and target not in seen:
            seen.add(target)
            target = redirects[target]
        redirects[loser] = target
    return redirects


def _merge_group(dictionary: Dict[str, DictionaryEntry], group: List[str], redirects: Dict[str, str]) -> None:
    members = [dictionary[c] for c in group if c in dictionary]
    if len(members) <= 1:
        return
    # Most confident mentions wins; ties go to the longer, more specific name
    members.sort(key=lambda e: (-e.confident_count, -len(e.canonical)))
    winner = members[0]

    aliases = set(winner.aliases)
    post_uris = set(winner.post_uris)
    for other in members[1:]:
        aliases |= other.aliases
        post_uris |= other.post_uris
        del dictionary[other.canonical]
        redirects[other.canonical] = winner.canonical
    aliases |= {m.canonical.lower() for m in members}

    # Confident/incidental can't be separated after the union; keep the winner's ratio
    confident = winner.confident_count
    incidental = winner.incidental_count
    total_prev = confident + incidental
    if total_prev > 0:
        confident = int(math.floor(len(post_uris) * confident / total_prev + 0.5))
        incidental = len(post_uris) - confident

    dictionary[winner.canonical] = DictionaryEntry(
        canonical=winner.canonical,
        aliases=aliases,
        frequency=len(post_uris),
        confidence=winner.confidence,
        confident_count=confident,
        incidental_count=incidental,
        post_uris=post_uris,
    )
