"""
Phase 2: label each post against the discovered dictionary.

Matching against confirmed titles is far more precise than raw extraction.
Agreement replies ("yes!", "this 👏") with no topic of their own inherit
their nearest labeled ancestor's topics.
"""
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from . import config
from .candidates import CandidateExtractor, default_extractor
from .data_models import (
    LABEL_DIRECT,
    LABEL_INHERITED,
    LABEL_UNLABELED,
    EmbedTitleEntry,
    LabelResult,
    Post,
    TextContent,
    ThreadDictionary,
    ValidationEntry,
)
from .reactions import is_agreement
from .text_utils import build_search_text, is_common_word, spans_overlap


def _build_matchers(dictionary: ThreadDictionary) -> List[Tuple[str, List[str]]]:
    matchers: List[Tuple[str, List[str]]] = []
    for canonical, entry in dictionary.entries.items():
        patterns = sorted(entry.aliases, key=lambda a: (-len(a), a))
        if patterns:
            matchers.append((canonical, patterns))
    matchers.sort(key=lambda m: (-len(m[1][0]), m[0]))
    return matchers


def _direct_topics(
    post: Post,
    content: TextContent,
    dictionary: ThreadDictionary,
    lookup: Mapping[str, ValidationEntry],
    matchers: List[Tuple[str, List[str]]],
    root_uri: str,
    lower_root: str,
    embed_entry: Optional[EmbedTitleEntry],
    extractor: CandidateExtractor,
    screened: Set[str],
) -> Set[str]:
    found: Dict[str, None] = {}

    if embed_entry is not None and embed_entry.canonical in dictionary.entries:
        found.setdefault(embed_entry.canonical)

    # Forward: candidate -> lookup, longest match wins
    consumed: List[str] = []
    for candidate in extractor.for_post(post, content, root_uri):
        lower = candidate.lower()
        if any(lower in span for span in consumed):
            continue
        entry = lookup.get(lower)
        if entry is not None and entry.canonical in dictionary.entries:
            found.setdefault(entry.canonical)
            consumed.append(lower)

    # Reverse: dictionary aliases in the text, longest first, by character span
    lower_text = build_search_text(content, root_uri).lower()
    spans: List[Tuple[int, int]] = []
    # A title already found still claims its span so its fragments can't match inside it
    for canonical, patterns in matchers:
        for pattern in patterns:
            if pattern in lower_root or pattern in screened:
                continue
            idx = lower_text.find(pattern)
            if idx == -1:
                continue
            end = idx + len(pattern)
            if spans_overlap(idx, end, spans):
                continue
            found.setdefault(canonical)
            spans.append((idx, end))
            break

    return set(found)


def _inherited_topics(
    post: Post,
    posts_by_uri: Mapping[str, Post],
    direct: Mapping[str, Set[str]],
    root_uri: str,
    max_depth: int,
) -> Optional[Set[str]]:
    """
    Topics of the nearest directly-labeled ancestor within max_depth hops.
    Only an ancestor that is itself an agreement may be passed through.
    """
    visited = {post.uri}
    parent_uri = post.parent_uri
    depth = 1
    while parent_uri and depth <= max_depth:
        if parent_uri in visited or parent_uri == root_uri:
            return None
        visited.add(parent_uri)
        labels = direct.get(parent_uri)
        if labels:
            return labels
        parent = posts_by_uri.get(parent_uri)
        if parent is None or not is_agreement(parent.text):
            return None
        parent_uri = parent.parent_uri
        depth += 1
    return None


def label_posts_detailed(
    posts: Sequence[Post],
    post_texts: Mapping[str, TextContent],
    dictionary: ThreadDictionary,
    lookup: Mapping[str, ValidationEntry],
    root_uri: str,
    root_text: str,
    embed_titles: Optional[Mapping[str, EmbedTitleEntry]] = None,
    max_inherit_depth: int = config.DEFAULT_MAX_INHERIT_DEPTH,
    extractor: Optional[CandidateExtractor] = None,
    embed_common_word_zipf: float = config.DEFAULT_EMBED_COMMON_WORD_ZIPF,
) -> LabelResult:
    """Label posts and report each post's terminal state."""
    extractor = extractor or default_extractor()
    effective_lookup = dictionary.patched_lookup if dictionary.patched_lookup is not None else lookup
    lower_root = (root_text or "").lower()
    matchers = _build_matchers(dictionary)
    embed_titles = embed_titles or {}
    # Common single-word song names ("Just") are only labeled on the linking post
    screened = {
        e.song.lower() for e in embed_titles.values() if is_common_word(e.song.lower(), embed_common_word_zipf)
    }

    labels: Dict[str, Set[str]] = {}
    states: Dict[str, str] = {}

    for post in posts:
        if post.uri == root_uri:
            continue
        content = post_texts.get(post.uri)
        if content is None:
            continue
        topics = _direct_topics(
            post,
            content,
            dictionary,
            effective_lookup,
            matchers,
            root_uri,
            lower_root,
            embed_titles.get(post.uri),
            extractor,
            screened,
        )
        if topics:
            labels[post.uri] = topics
            states[post.uri] = LABEL_DIRECT

    # Inherit from direct labels only, so the result doesn't depend on post order
    direct = {uri: set(topics) for uri, topics in labels.items()}
    posts_by_uri = {p.uri: p for p in posts}
    for post in posts:
        if post.uri == root_uri or post.uri in direct:
            continue
        if not is_agreement(post.text):
            continue
        inherited = _inherited_topics(post, posts_by_uri, direct, root_uri, max_inherit_depth)
        if inherited:
            labels[post.uri] = set(inherited)
            states[post.uri] = LABEL_INHERITED

    for post in posts:
        if post.uri != root_uri:
            states.setdefault(post.uri, LABEL_UNLABELED)
    return LabelResult(labels=labels, states=states)


def label_posts(
    posts: Sequence[Post],
    post_texts: Mapping[str, TextContent],
    dictionary: ThreadDictionary,
    lookup: Mapping[str, ValidationEntry],
    root_uri: str,
    root_text: str,
    embed_titles: Optional[Mapping[str, EmbedTitleEntry]] = None,
    max_inherit_depth: int = config.DEFAULT_MAX_INHERIT_DEPTH,
    extractor: Optional[CandidateExtractor] = None,
    embed_common_word_zipf: float = config.DEFAULT_EMBED_COMMON_WORD_ZIPF,
) -> Dict[str, Set[str]]:
    """
    Label each post with the canonical titles it mentions.

    Returns post uri -> set of canonicals; unlabeled posts are absent.
    Every canonical returned is a key of dictionary.entries.
    """
    return label_posts_detailed(
        posts,
        post_texts,
        dictionary,
        lookup,
        root_uri,
        root_text,
        embed_titles=embed_titles,
        max_inherit_depth=max_inherit_depth,
        extractor=extractor,
        embed_common_word_zipf=embed_common_word_zipf,
    ).labels
