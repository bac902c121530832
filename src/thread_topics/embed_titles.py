"""
Song/artist parsing from link-card titles (YouTube, Spotify, Apple Music, ...).
"""
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from . import config
from .constants import EMBED_PLATFORM_NAMES
from .data_models import EmbedLink, EmbedTitleEntry, TextContent


@dataclass(frozen=True)
class ParsedEmbedTitle:
    song: str
    artist: Optional[str]
    # "Song - Artist" or just "Song"
    canonical: str


_QUOTE_CHARS = "\"“”"
_SURROUNDING_QUOTES_RE = re.compile(r"^[%s]+|[%s]+$" % (_QUOTE_CHARS, _QUOTE_CHARS))
_APPLE_MUSIC_SUFFIX_RE = re.compile(r"\s+on\s+Apple\s+Music$", re.IGNORECASE)

# Applied in order
_CLEANUP_RES = [
    # parenthetical video metadata; year parentheticals like "(1978)" survive
    re.compile(
        r"\s*\((Official\s*(Music\s*)?Video|Official\s*Audio|Audio|Lyric\s*Video|Lyrics?|Visualizer"
        r"|Performance\s*Video|Full\s*Album|Animated\s*Video|Music\s*Video|Live|Acoustic|Remix"
        r"|Remaster(ed)?|Explicit|Clean|Radio\s*Edit)\)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\s*\[(Official\s*(Music\s*)?Video|Official\s*Audio|Audio|Lyric\s*Video|Lyrics?|Visualizer"
        r"|Live|Acoustic|Remix)\]",
        re.IGNORECASE,
    ),
    re.compile(r"\s*/{1,2}\s*Lyrics?$", re.IGNORECASE),
    re.compile(r"\s*-\s*Lyrics?$", re.IGNORECASE),
    re.compile(r"\s*\(\d+p\s+Remaster[^)]*\)", re.IGNORECASE),
    re.compile(r"\s*\(Remastered(\s*\d*)?\)", re.IGNORECASE),
    re.compile(r"\s*\[Remastered(\s*\d*)?\]", re.IGNORECASE),
    _APPLE_MUSIC_SUFFIX_RE,
    re.compile(r"\s+on\s+Spotify$", re.IGNORECASE),
    re.compile(r"\s+-\s+YouTube$", re.IGNORECASE),
    re.compile(r"\s+-\s+YouTube\s+Music$", re.IGNORECASE),
    _SURROUNDING_QUOTES_RE,
]

_DESCRIPTION_RE = re.compile(r"^a\s+(person|man|woman|group|cat|dog|gif|clip)", re.IGNORECASE)
_SONG_BY_ARTIST_RE = re.compile(r"^(.+?)\s+by\s+([A-Z].{2,})$")


def clean_embed_title(title: str) -> str:
    """Strip platform metadata ("(Official Video)", "on Spotify", ...) from a link title."""
    cleaned = title or ""
    for r in _CLEANUP_RES:
        cleaned = r.sub("", cleaned)
    return cleaned.strip()


def is_garbage_title(title: str) -> bool:
    """Reject entries that are clearly not real song/media titles."""
    if len(title) > config.DEFAULT_EMBED_TITLE_MAX_CHARS:
        return True
    if len(title.split()) > config.DEFAULT_EMBED_TITLE_MAX_WORDS:
        return True
    if len(title) < 2:
        return True
    # GIF / image descriptions
    if _DESCRIPTION_RE.match(title):
        return True
    if " ".join(title.lower().split()) in EMBED_PLATFORM_NAMES:
        return True
    return False


def parse_embed_title(link: EmbedLink) -> Optional[ParsedEmbedTitle]:
    """
    Parse a link title into song and artist.

    Handles "Artist - Song" (most YouTube titles), "Song by Artist"
    (Apple Music, lyrics sites) and a bare "Song".
    """
    cleaned = clean_embed_title(link.title)
    if is_garbage_title(cleaned):
        return None

    artist: Optional[str] = None
    song = cleaned
    dash = cleaned.find(" - ")
    if 0 < dash < len(cleaned) - 3:
        artist = cleaned[:dash].strip()
        song = cleaned[dash + 3:].strip()
        if len(artist) < 2 or len(song) < 2:
            song, artist = cleaned, None

    if artist is None and " by " in song:
        m = _SONG_BY_ARTIST_RE.match(song)
        if m:
            potential_song = _SURROUNDING_QUOTES_RE.sub("", m.group(1)).strip()
            potential_artist = _APPLE_MUSIC_SUFFIX_RE.sub("", m.group(2)).strip()
            if len(potential_song) >= 2 and len(potential_artist) >= 2:
                song, artist = potential_song, potential_artist

    if artist:
        artist = _APPLE_MUSIC_SUFFIX_RE.sub("", artist).strip()

    if is_garbage_title(song):
        return None
    canonical = "%s - %s" % (song, artist) if artist else song
    return ParsedEmbedTitle(song=song, artist=artist or None, canonical=canonical)


def build_embed_titles(post_texts: Mapping[str, TextContent], root_uri: str) -> Dict[str, EmbedTitleEntry]:
    """Last parseable link title per non-root post: post uri -> EmbedTitleEntry."""
    out: Dict[str, EmbedTitleEntry] = {}
    for uri, content in post_texts.items():
        if uri == root_uri:
            continue
        for link in content.embed_links:
            parsed = parse_embed_title(link)
            if parsed is not None:
                out[uri] = EmbedTitleEntry(canonical=parsed.canonical, song=parsed.song)
    return out
