"""
Text extraction from Bluesky post views (app.bsky.feed.defs#postView dicts).

The embed union is resolved once into a small tagged variant; everything
downstream reads TextContent and never looks at raw embed shapes.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from .constants import PLATFORM_HOSTS
from .data_models import EmbedLink, Post, TextContent

RECORD_VIEW = "app.bsky.embed.record#view"
RECORD_WITH_MEDIA_VIEW = "app.bsky.embed.recordWithMedia#view"


@dataclass(frozen=True)
class Images:
    alts: Tuple[str, ...]


@dataclass(frozen=True)
class RecordQuote:
    uri: Optional[str]
    text: Optional[str]
    alts: Tuple[str, ...]


@dataclass(frozen=True)
class RecordWithMedia:
    uri: Optional[str]
    text: Optional[str]
    media_alts: Tuple[str, ...]
    external: Optional[EmbedLink]


@dataclass(frozen=True)
class External:
    link: EmbedLink


Embed = Union[Images, RecordQuote, RecordWithMedia, External]


def _as_dict(obj: Any) -> Dict[str, Any]:
    return obj if isinstance(obj, dict) else {}


def _image_alts(obj: Any) -> List[str]:
    """Alt texts of obj.images and obj.media.images, empty ones dropped."""
    o = _as_dict(obj)
    images = list(o.get("images") or [])
    images += list(_as_dict(o.get("media")).get("images") or [])
    return [img["alt"] for img in images if isinstance(img, dict) and img.get("alt")]


def detect_platform(url: str) -> str:
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return "unknown"
    for platform, hosts in PLATFORM_HOSTS:
        if any(h in host for h in hosts):
            return platform
    return "unknown"


def _external_link(obj: Any) -> Optional[EmbedLink]:
    o = _as_dict(obj)
    url = o.get("uri")
    title = o.get("title")
    title = title.strip() if isinstance(title, str) else ""
    if not isinstance(url, str) or not url or not title:
        return None
    return EmbedLink(url=url, title=title, platform=detect_platform(url))


def classify_embed(embed: Any) -> Optional[Embed]:
    """Resolve a view-level embed into one variant, or None when it carries nothing usable."""
    e = _as_dict(embed)
    if not e:
        return None
    kind = e.get("$type")

    if kind == RECORD_VIEW:
        record = _as_dict(e.get("record"))
        value = _as_dict(record.get("value"))
        alts: List[str] = []
        for inner in record.get("embeds") or []:
            alts.extend(_image_alts(inner))
        text = value.get("text")
        return RecordQuote(
            uri=record.get("uri") if isinstance(record.get("uri"), str) else None,
            text=text if isinstance(text, str) else None,
            alts=tuple(alts),
        )

    if kind == RECORD_WITH_MEDIA_VIEW:
        inner = _as_dict(_as_dict(e.get("record")).get("record"))
        value = _as_dict(inner.get("value"))
        media = _as_dict(e.get("media"))
        text = value.get("text")
        return RecordWithMedia(
            uri=inner.get("uri") if isinstance(inner.get("uri"), str) else None,
            text=text if isinstance(text, str) else None,
            media_alts=tuple(img["alt"] for img in media.get("images") or [] if isinstance(img, dict) and img.get("alt")),
            external=_external_link(media.get("external")),
        )

    if e.get("external"):
        link = _external_link(e.get("external"))
        return External(link) if link else None

    alts = _image_alts(e)
    if alts:
        return Images(tuple(alts))
    return None


def _own_text(view: Mapping[str, Any]) -> str:
    record = _as_dict(view.get("record"))
    parts: List[str] = []
    if record.get("text"):
        parts.append(record["text"])
    seen: Dict[str, None] = {}
    for embed in (record.get("embed"), view.get("embed")):
        for alt in _image_alts(embed):
            seen.setdefault(alt)
    parts.extend("[image alt: %s]" % alt for alt in seen)
    return "\n".join(parts)


def extract_post_text(view: Mapping[str, Any]) -> TextContent:
    """All text of a post view: own text and alts, quoted post, link cards."""
    own = _own_text(view)
    embed = classify_embed(view.get("embed"))

    if isinstance(embed, RecordQuote):
        return TextContent(
            own_text=own,
            quoted_text=embed.text,
            quoted_uri=embed.uri,
            quoted_alt_text=embed.alts,
        )
    if isinstance(embed, RecordWithMedia):
        return TextContent(
            own_text=own,
            quoted_text=embed.text,
            quoted_uri=embed.uri,
            quoted_alt_text=embed.media_alts,
            embed_links=(embed.external,) if embed.external else (),
        )
    if isinstance(embed, External):
        return TextContent(own_text=own, embed_links=(embed.link,))
    return TextContent(own_text=own)


def post_from_view(view: Mapping[str, Any]) -> Post:
    record = _as_dict(view.get("record"))
    parent = _as_dict(_as_dict(record.get("reply")).get("parent"))
    return Post(
        uri=view.get("uri") or "",
        text=record.get("text") or "",
        parent_uri=parent.get("uri") or None,
    )


def flatten_thread(node: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """
    Post views of a getPostThread tree ({"post": ..., "replies": [...]}),
    root first then depth-first. Blocked and not-found nodes carry no post and are skipped.
    """
    views: List[Mapping[str, Any]] = []
    stack = [node]
    while stack:
        current = _as_dict(stack.pop())
        post = current.get("post")
        if isinstance(post, dict) and post.get("uri"):
            views.append(post)
        replies = current.get("replies") or []
        stack.extend(reversed(replies))
    return views
