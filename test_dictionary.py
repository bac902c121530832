#!/usr/bin/env python3
"""
Dictionary discovery: evidence, filters, fragment dedup, prefix filter, merge.
"""
from thread_topics.data_models import DictionaryEntry, EmbedTitleEntry, Post, TextContent, ValidationEntry
from thread_topics.dictionary import (
    DiscoveryOptions,
    discover_dictionary,
    merge_duplicate_canonicals,
    remove_fragment_duplicates,
)

ROOT = "at://root"


def _thread(root_text, replies):
    """replies: list of own texts (all replying to the root) or TextContent objects."""
    posts = [Post(ROOT, root_text)]
    texts = {ROOT: TextContent(own_text=root_text)}
    for i, reply in enumerate(replies, 1):
        uri = f"at://r{i}"
        content = reply if isinstance(reply, TextContent) else TextContent(own_text=reply)
        posts.append(Post(uri, content.own_text, ROOT))
        texts[uri] = content
    return posts, texts


def _lookup(**pairs):
    out = {}
    for key, value in pairs.items():
        canonical, confidence = value if isinstance(value, tuple) else (value, "high")
        out[key.replace("_", " ")] = ValidationEntry(canonical, confidence)
    return out


def _discover(root_text, replies, lookup, options=None):
    posts, texts = _thread(root_text, replies)
    return discover_dictionary(posts, texts, lookup, ROOT, root_text, options)


def _entry(canonical, posts, confident=None, aliases=None):
    return DictionaryEntry(
        canonical=canonical,
        aliases=set(aliases or {canonical.lower()}),
        frequency=len(posts),
        confidence="high",
        confident_count=len(posts) if confident is None else confident,
        incidental_count=0 if confident is None else len(posts) - confident,
        post_uris=set(posts),
    )


def test_repeated_title_is_discovered():
    d = _discover(
        "what is your favorite christmas movie?",
        ["Die Hard", "Die Hard obviously", "Die Hard!"],
        _lookup(die_hard="Die Hard"),
    )
    assert list(d.entries) == ["Die Hard"]
    entry = d.entries["Die Hard"]
    assert entry.confident_count == 3
    assert entry.post_uris == {"at://r1", "at://r2", "at://r3"}


def test_quoted_root_prompt_is_not_a_topic():
    root = "What is your favorite Dad Movie?"
    reply = TextContent(own_text="Die Hard", quoted_text=root, quoted_uri=ROOT)
    d = _discover(root, [reply, "Die Hard"], _lookup(dad_movie="Dad Movie", die_hard="Die Hard"))
    assert "Dad Movie" not in d.entries
    assert "Die Hard" in d.entries


def test_short_title_needs_two_confident_mentions():
    lookup = _lookup(red_october="Red October")
    assert _discover("movies?", ["Red October"], lookup).entries == {}
    d = _discover("movies?", ["Red October"], lookup, DiscoveryOptions(min_confident_for_short_title=1))
    assert "Red October" in d.entries


def test_short_title_rule_counts_significant_words():
    # "The Big Lebowski" has two significant words, so one mention is not enough
    lookup = _lookup(the_big_lebowski="The Big Lebowski", the_hunt_for_red_october="The Hunt for Red October")
    d = _discover("movies?", ["The Big Lebowski", "The Hunt for Red October"], lookup)
    assert list(d.entries) == ["The Hunt for Red October"]


def test_min_confident_overall():
    lookup = _lookup(the_hunt_for_red_october="The Hunt for Red October")
    d = _discover("movies?", ["The Hunt for Red October"], lookup, DiscoveryOptions(min_confident_overall=2))
    assert d.entries == {}


def test_low_confidence_single_word_is_dropped():
    d = _discover("movies?", ["Heat", "Heat", "Heat"], _lookup(heat=("Heat", "low")))
    assert d.entries == {}


def test_low_confidence_exact_multiword_is_kept():
    lookup = {"the hunt for red october": ValidationEntry("The Hunt for Red October", "low")}
    d = _discover("movies?", ["The Hunt for Red October"], lookup)
    assert "The Hunt for Red October" in d.entries
    assert d.entries["The Hunt for Red October"].confidence == "low"


def test_misaligned_alias_is_dropped():
    lookup = _lookup(jaws="Some Other Film Title")
    d = _discover("movies?", ["Jaws", "Jaws"], lookup)
    assert d.entries == {}


def test_long_title_inside_short_title_both_survive_with_disjoint_mentions():
    lookup = _lookup(
        the_hunt_for_red_october="The Hunt for Red October",
        hunt_for_red_october="The Hunt for Red October",
        red_october="Red October",
    )
    d = _discover(
        "movies?",
        ["The Hunt for Red October", "The Hunt for Red October is great", "Red October", "Red October"],
        lookup,
    )
    assert set(d.entries) == {"The Hunt for Red October", "Red October"}
    assert d.entries["Red October"].post_uris == {"at://r3", "at://r4"}


def test_incidental_mentions_count_toward_frequency_only():
    lookup = _lookup(the_hunt_for_red_october="The Hunt for Red October")
    d = _discover(
        "movies?",
        ["The Hunt for Red October", "The Hunt for Red October", "i rewatched the hunt for red october yesterday"],
        lookup,
    )
    entry = d.entries["The Hunt for Red October"]
    assert entry.confident_count == 2
    assert entry.incidental_count == 1
    assert entry.frequency == 3


def test_short_single_word_keys_are_not_scanned_incidentally():
    d = _discover("movies?", ["Heat", "Heat", "i could watch heat forever"], _lookup(heat="Heat"))
    entry = d.entries["Heat"]
    assert entry.incidental_count == 0
    assert entry.post_uris == {"at://r1", "at://r2"}


def test_short_keys_need_three_words_to_be_scanned():
    # both keys are 11 characters; only the three-word one is scanned
    lookup = _lookup(up_in_smoke="Up in Smoke", red_october="Red October")
    d = _discover(
        "movies?",
        ["Up in Smoke", "Up in Smoke", "Red October", "Red October", "up in smoke and red october both rule"],
        lookup,
    )
    assert d.entries["Up in Smoke"].incidental_count == 1
    assert "at://r5" in d.entries["Up in Smoke"].post_uris
    assert d.entries["Red October"].incidental_count == 0
    assert d.entries["Red October"].post_uris == {"at://r3", "at://r4"}


def test_keys_in_root_text_are_not_scanned_incidentally():
    root = "is anything better than the hunt for red october?"
    lookup = _lookup(the_hunt_for_red_october="The Hunt for Red October")
    d = _discover(
        root,
        ["The Hunt for Red October", "The Hunt for Red October", "i rewatched the hunt for red october yesterday"],
        lookup,
    )
    entry = d.entries["The Hunt for Red October"]
    assert entry.incidental_count == 0
    assert entry.post_uris == {"at://r1", "at://r2"}


def test_low_confidence_keys_are_not_scanned_incidentally():
    lookup = _lookup(the_hunt_for_red_october=("The Hunt for Red October", "low"))
    d = _discover(
        "movies?",
        ["The Hunt for Red October", "The Hunt for Red October", "i rewatched the hunt for red october yesterday"],
        lookup,
    )
    entry = d.entries["The Hunt for Red October"]
    assert entry.confident_count == 2
    assert entry.incidental_count == 0


def test_prefix_fragment_is_dropped():
    lookup = _lookup(stop_me_now="Stop Me Now")
    d = _discover(
        "karaoke songs?",
        ["don't Stop Me Now", "don't Stop Me Now please", "honestly don't Stop Me Now"],
        lookup,
    )
    assert d.entries == {}


def test_varied_prefixes_are_kept():
    lookup = _lookup(red_october="Red October")
    d = _discover(
        "movies?",
        ["watch Red October", "love Red October", "saw Red October"],
        lookup,
    )
    assert "Red October" in d.entries


def test_contraction_variants_merge():
    lookup = _lookup(
        **{
            "it's_all_coming_back_to_me_now": "It's All Coming Back to Me Now",
            "all_coming_back_to_me_now": "All Coming Back to Me Now",
        }
    )
    d = _discover(
        "karaoke songs?",
        ["It's All Coming Back to Me Now", "It's All Coming Back to Me Now", "All Coming Back to Me Now"],
        lookup,
    )
    assert list(d.entries) == ["It's All Coming Back to Me Now"]
    winner = d.entries["It's All Coming Back to Me Now"]
    assert winner.post_uris == {"at://r1", "at://r2", "at://r3"}
    assert "all coming back to me now" in winner.aliases
    assert d.redirects == {"All Coming Back to Me Now": "It's All Coming Back to Me Now"}
    assert d.patched_lookup["all coming back to me now"].canonical == "It's All Coming Back to Me Now"


def test_embed_title_seeds_confident_and_incidental_mentions():
    embeds = {"at://r1": EmbedTitleEntry("Bohemian Rhapsody - Queen", "Bohemian Rhapsody")}
    d = _discover(
        "karaoke songs?",
        ["🎶", "bohemian rhapsody all the way"],
        {},
        DiscoveryOptions(embed_titles=embeds),
    )
    entry = d.entries["Bohemian Rhapsody - Queen"]
    assert entry.confident_count == 1
    assert entry.incidental_count == 1
    assert "bohemian rhapsody" in entry.aliases


def test_common_single_word_songs_are_not_scanned():
    embeds = {"at://r1": EmbedTitleEntry("Just - Radiohead", "Just")}
    d = _discover("karaoke songs?", ["🎶", "just ok honestly"], {}, DiscoveryOptions(embed_titles=embeds))
    assert d.entries["Just - Radiohead"].post_uris == {"at://r1"}


def test_common_word_frequency_threshold():
    embeds = {"at://r1": EmbedTitleEntry("People - Libianca", "People")}
    replies = ["🎶", "people are wild"]
    d = _discover("karaoke songs?", replies, {}, DiscoveryOptions(embed_titles=embeds))
    assert d.entries["People - Libianca"].post_uris == {"at://r1"}
    d = _discover(
        "karaoke songs?", replies, {}, DiscoveryOptions(embed_titles=embeds, embed_common_word_zipf=0)
    )
    assert d.entries["People - Libianca"].post_uris == {"at://r1", "at://r2"}


def test_fragment_without_independent_mentions_is_removed():
    dictionary = {
        "Red October": _entry("Red October", ["a"]),
        "The Hunt for Red October": _entry("The Hunt for Red October", ["a", "b"]),
    }
    assert remove_fragment_duplicates(dictionary) == ["Red October"]
    assert list(dictionary) == ["The Hunt for Red October"]


def test_fragment_with_independent_mentions_is_kept():
    dictionary = {
        "Red October": _entry("Red October", ["a", "c"]),
        "The Hunt for Red October": _entry("The Hunt for Red October", ["a", "b"]),
    }
    assert remove_fragment_duplicates(dictionary) == []
    assert len(dictionary) == 2


def test_merge_prefers_more_confident_mentions():
    dictionary = {
        "Thing": _entry("Thing", ["a"]),
        "The Thing": _entry("The Thing", ["b", "c", "d"]),
    }
    redirects = merge_duplicate_canonicals(dictionary)
    assert redirects == {"Thing": "The Thing"}
    merged = dictionary["The Thing"]
    assert merged.post_uris == {"a", "b", "c", "d"}
    assert merged.confident_count == 4
    assert {"thing", "the thing"} <= merged.aliases


def test_merge_by_word_overlap():
    dictionary = {
        "Paradise by the Dashboard Light": _entry("Paradise by the Dashboard Light", ["a", "b"]),
        "Paradise By Dashboard Light": _entry("Paradise By Dashboard Light", ["c"]),
    }
    redirects = merge_duplicate_canonicals(dictionary)
    assert redirects == {"Paradise By Dashboard Light": "Paradise by the Dashboard Light"}
    assert dictionary["Paradise by the Dashboard Light"].post_uris == {"a", "b", "c"}


def test_discovery_is_deterministic():
    lookup = _lookup(die_hard="Die Hard", the_hunt_for_red_october="The Hunt for Red October")
    replies = ["Die Hard", "Die Hard", "The Hunt for Red October"]
    a = _discover("movies?", replies, lookup)
    b = _discover("movies?", replies, lookup)
    assert list(a.entries) == list(b.entries)
    assert a.entries == b.entries


if __name__ == "__main__":
    test_repeated_title_is_discovered()
    test_contraction_variants_merge()
    print("ok")
