"""
Dataclasses for thread topic discovery and labeling.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

# Validation confidence levels, best first
CONFIDENCE_LEVELS = ("high", "medium", "low")

LABEL_UNLABELED = "unlabeled"
LABEL_DIRECT = "labeled-direct"
LABEL_INHERITED = "labeled-inherited"


@dataclass(frozen=True)
class Post:
    uri: str
    text: str = ""
    parent_uri: Optional[str] = None


@dataclass(frozen=True)
class EmbedLink:
    url: str
    title: str
    platform: str = "unknown"


@dataclass(frozen=True)
class TextContent:
    own_text: str
    quoted_text: Optional[str] = None
    quoted_uri: Optional[str] = None
    quoted_alt_text: Tuple[str, ...] = ()
    embed_links: Tuple[EmbedLink, ...] = ()


@dataclass(frozen=True)
class ValidationEntry:
    canonical: str
    confidence: str = "high"


@dataclass(frozen=True)
class EmbedTitleEntry:
    # "Song - Artist" or just "Song"
    canonical: str
    # The song name alone, used as a text pattern
    song: str


@dataclass
class DictionaryEntry:
    canonical: str
    aliases: Set[str]
    frequency: int
    confidence: str
    confident_count: int
    incidental_count: int
    post_uris: Set[str]


@dataclass
class ThreadDictionary:
    entries: Dict[str, DictionaryEntry]
    # Lookup with merged canonicals redirected; labeling should prefer it
    patched_lookup: Optional[Dict[str, ValidationEntry]] = None
    redirects: Dict[str, str] = field(default_factory=dict)


@dataclass
class LabelResult:
    labels: Dict[str, Set[str]]
    states: Dict[str, str]

    def state_of(self, uri: str) -> str:
        return self.states.get(uri, LABEL_UNLABELED)


@dataclass
class MentionCount:
    canonical: str
    count: int
    post_uris: List[str]
    weight: float = 0.0


@dataclass
class ThreadAnalysis:
    root_uri: str
    post_count: int
    validation_mode: str
    dictionary: ThreadDictionary
    labels: Dict[str, Set[str]]
    states: Dict[str, str]
    mention_counts: List[MentionCount]
    uncategorized: List[str]
