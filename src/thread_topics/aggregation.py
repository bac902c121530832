"""
Per-topic mention counts from a label map.
"""
from typing import Dict, List, Mapping, Sequence, Set, Tuple

from .data_models import MentionCount, Post


def count_mentions(
    labels: Mapping[str, Set[str]],
    posts: Sequence[Post],
    root_uri: str,
) -> Tuple[List[MentionCount], List[str]]:
    """
    Count labeled posts per canonical.
    Returns (mention counts sorted by count desc then canonical, uncategorized post uris).
    weight = count / total assignments, so weights sum to 1.0 when anything is labeled.
    """
    by_title: Dict[str, List[str]] = {}
    for post in posts:
        for title in sorted(labels.get(post.uri, ())):
            by_title.setdefault(title, []).append(post.uri)

    total = sum(len(uris) for uris in by_title.values()) or 1
    counts = [
        MentionCount(canonical=title, count=len(uris), post_uris=uris, weight=len(uris) / total)
        for title, uris in by_title.items()
    ]
    counts.sort(key=lambda m: (-m.count, m.canonical))

    uncategorized = [p.uri for p in posts if p.uri != root_uri and not labels.get(p.uri)]
    return counts, uncategorized
