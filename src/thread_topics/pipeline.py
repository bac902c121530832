"""
End-to-end thread analysis: candidates -> lookup -> dictionary -> labels -> counts.
"""
import dataclasses
import sys
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .aggregation import count_mentions
from .candidates import CandidateExtractor, default_extractor, thread_candidates
from .data_models import EmbedTitleEntry, Post, TextContent, ThreadAnalysis, ValidationEntry
from .dictionary import DiscoveryOptions, discover_dictionary
from .embed_titles import build_embed_titles
from .labeler import label_posts_detailed
from .lookup import build_list_validated_lookup, build_self_validated_lookup, build_validation_lookup
from .post_text import extract_post_text, post_from_view

MODE_ORACLE = "oracle"
MODE_LIST = "list"
MODE_SELF = "self"


class ThreadError(ValueError):
    pass


def choose_validation_mode(
    lookup: Optional[Mapping[str, ValidationEntry]] = None,
    oracle_records: Optional[Iterable[Mapping]] = None,
    list_items: Optional[Sequence[str]] = None,
) -> str:
    if lookup is not None or oracle_records is not None:
        return MODE_ORACLE
    if list_items:
        return MODE_LIST
    return MODE_SELF


def mode_options(mode: str) -> DiscoveryOptions:
    """
    Discovery thresholds per validation mode:
      list: a user-provided list is trusted, so one confident mention suffices for short titles
      self: nothing external vouches for a title, so require two confident mentions overall
    """
    if mode == MODE_LIST:
        return DiscoveryOptions(min_confident_for_short_title=config.DEFAULT_LIST_MIN_CONFIDENT_FOR_SHORT_TITLE)
    if mode == MODE_SELF:
        return DiscoveryOptions(min_confident_overall=config.DEFAULT_SELF_MIN_CONFIDENT_OVERALL)
    return DiscoveryOptions()


def _log(verbose: bool, msg: str) -> None:
    if verbose:
        print(msg, file=sys.stderr)


def analyze_thread(
    posts: Sequence[Post],
    post_texts: Mapping[str, TextContent],
    lookup: Optional[Mapping[str, ValidationEntry]] = None,
    oracle_records: Optional[Iterable[Mapping]] = None,
    list_items: Optional[Sequence[str]] = None,
    embed_titles: Optional[Mapping[str, EmbedTitleEntry]] = None,
    options: Optional[DiscoveryOptions] = None,
    max_inherit_depth: int = config.DEFAULT_MAX_INHERIT_DEPTH,
    extractor: Optional[CandidateExtractor] = None,
    verbose: bool = False,
) -> ThreadAnalysis:
    """
    Analyze one thread. posts[0] is the root.

    Validation: an explicit lookup or oracle records win; else list_items;
    else self-validation from the thread itself. options overrides the
    per-mode discovery thresholds. embed_titles defaults to the link titles
    parsed from post_texts.
    """
    if not posts:
        raise ThreadError("no posts found in thread")
    extractor = extractor or default_extractor()
    root = posts[0]
    root_uri = root.uri
    root_content = post_texts.get(root_uri)
    root_text = root.text or (root_content.own_text if root_content else "")

    candidates = thread_candidates(posts, post_texts, root_uri, extractor)
    _log(verbose, f"[extract] posts={len(posts)} candidates={len(candidates)}")

    if embed_titles is None:
        embed_titles = build_embed_titles(post_texts, root_uri)
    if embed_titles:
        _log(verbose, f"[embeds] titles={len(embed_titles)}")

    mode = choose_validation_mode(lookup, oracle_records, list_items)
    if mode == MODE_ORACLE:
        effective = dict(lookup) if lookup is not None else {}
        if oracle_records is not None:
            effective.update(build_validation_lookup(oracle_records))
    elif mode == MODE_LIST:
        effective = build_list_validated_lookup(candidates, list(list_items or []))
    else:
        effective = build_self_validated_lookup(candidates, root_text.lower())
    _log(verbose, f"[validate] mode={mode} lookup={len(effective)}")

    opts = options or mode_options(mode)
    opts = dataclasses.replace(opts, embed_titles=embed_titles or None)
    dictionary = discover_dictionary(posts, post_texts, effective, root_uri, root_text, opts, extractor)
    _log(verbose, f"[dictionary] titles={len(dictionary.entries)} merged={len(dictionary.redirects)}")

    result = label_posts_detailed(
        posts,
        post_texts,
        dictionary,
        effective,
        root_uri,
        root_text,
        embed_titles=embed_titles,
        max_inherit_depth=max_inherit_depth,
        extractor=extractor,
        embed_common_word_zipf=opts.embed_common_word_zipf,
    )
    mention_counts, uncategorized = count_mentions(result.labels, posts, root_uri)
    _log(verbose, f"[label] labeled={len(result.labels)} uncategorized={len(uncategorized)}")

    return ThreadAnalysis(
        root_uri=root_uri,
        post_count=len(posts),
        validation_mode=mode,
        dictionary=dictionary,
        labels=result.labels,
        states=result.states,
        mention_counts=mention_counts,
        uncategorized=uncategorized,
    )


def posts_and_texts(views: Sequence[Mapping]) -> Tuple[List[Post], Dict[str, TextContent]]:
    """Posts and their extracted text from raw post views, in order; duplicate uris are dropped."""
    posts: List[Post] = []
    texts: Dict[str, TextContent] = {}
    for view in views:
        post = post_from_view(view)
        if not post.uri or post.uri in texts:
            continue
        posts.append(post)
        texts[post.uri] = extract_post_text(view)
    return posts, texts
