#!/usr/bin/env python3
"""
End-to-end analysis, aggregation, file helpers and the CLI.
"""
import json
import os

import pytest

from thread_topics.__main__ import main
from thread_topics.aggregation import count_mentions
from thread_topics.candidates import CandidateExtractor
from thread_topics.data_models import Post, TextContent, ValidationEntry
from thread_topics.file_utils import load_list_items, load_lookup_file, out_path_for_input, thread_views_from_json
from thread_topics.pipeline import (
    MODE_LIST,
    MODE_ORACLE,
    MODE_SELF,
    ThreadError,
    analyze_thread,
    choose_validation_mode,
    posts_and_texts,
)

ROOT = "at://root"


def _view(uri, text, parent=None, embed=None):
    record = {"text": text}
    if parent:
        record["reply"] = {"parent": {"uri": parent}, "root": {"uri": ROOT}}
    view = {"uri": uri, "record": record}
    if embed:
        view["embed"] = embed
    return view


def _thread(root_text, *replies):
    views = [_view(ROOT, root_text)] + [_view(*r) for r in replies]
    return posts_and_texts(views)


def test_empty_thread_raises():
    with pytest.raises(ThreadError):
        analyze_thread([], {})


def test_choose_validation_mode():
    assert choose_validation_mode({}, None, ["Severn"]) == MODE_ORACLE
    assert choose_validation_mode(None, [], None) == MODE_ORACLE
    assert choose_validation_mode(None, None, ["Severn"]) == MODE_LIST
    assert choose_validation_mode(None, None, []) == MODE_SELF


def test_oracle_mode_with_inheritance():
    posts, texts = _thread(
        "What is your favorite Christmas movie?",
        ("at://r1", "Die Hard", ROOT),
        ("at://r2", "Die Hard obviously", ROOT),
        ("at://r3", "yes absolutely", "at://r1"),
        ("at://r4", "I don't watch movies", ROOT),
    )
    analysis = analyze_thread(posts, texts, lookup={"die hard": ValidationEntry("Die Hard")})
    assert analysis.validation_mode == MODE_ORACLE
    assert analysis.post_count == 5
    assert analysis.labels["at://r3"] == {"Die Hard"}
    assert [(m.canonical, m.count) for m in analysis.mention_counts] == [("Die Hard", 3)]
    assert analysis.uncategorized == ["at://r4"]


def test_oracle_records():
    posts, texts = _thread(
        "movies?",
        ("at://r1", "Die Hard", ROOT),
        ("at://r2", "Die Hard", ROOT),
    )
    records = [{"title": "Die Hard", "validated": True, "validated_title": "Die Hard", "validation_confidence": "high"}]
    analysis = analyze_thread(posts, texts, oracle_records=records)
    assert set(analysis.dictionary.entries) == {"Die Hard"}


def test_self_validation_mode():
    posts, texts = _thread(
        "What is your home river?",
        ("at://r1", "Severn", ROOT),
        ("at://r2", "Severn", ROOT),
        ("at://r3", "The Severn", ROOT),
        ("at://r4", "River", ROOT),
    )
    analysis = analyze_thread(posts, texts)
    assert analysis.validation_mode == MODE_SELF
    assert set(analysis.dictionary.entries) == {"Severn"}
    assert set(analysis.labels) == {"at://r1", "at://r2", "at://r3"}
    assert analysis.uncategorized == ["at://r4"]


def test_self_validation_needs_two_confident_mentions():
    posts, texts = _thread(
        "What is your home river?",
        ("at://r1", "Severn", ROOT),
        ("at://r2", "Severn", ROOT),
        ("at://r3", "Thames", ROOT),
    )
    assert set(analyze_thread(posts, texts).dictionary.entries) == {"Severn"}


def test_list_mode_accepts_single_mentions():
    posts, texts = _thread(
        "What is your home river?",
        ("at://r1", "Severn", ROOT),
        ("at://r2", "the Thames", ROOT),
    )
    analysis = analyze_thread(posts, texts, list_items=["Severn", "Thames", "Mersey"])
    assert analysis.validation_mode == MODE_LIST
    assert set(analysis.dictionary.entries) == {"Severn", "Thames"}


def test_link_titles_are_picked_up_from_post_text():
    link = {
        "$type": "app.bsky.embed.external#view",
        "external": {"uri": "https://www.youtube.com/watch?v=x", "title": "Queen - Bohemian Rhapsody (Official Video)"},
    }
    posts, texts = _thread(
        "Your go-to karaoke song?",
        ("at://r1", "", ROOT, link),
        ("at://r2", "bohemian rhapsody every time", ROOT),
    )
    analysis = analyze_thread(posts, texts, lookup={})
    assert analysis.labels == {
        "at://r1": {"Bohemian Rhapsody - Queen"},
        "at://r2": {"Bohemian Rhapsody - Queen"},
    }


def test_repeated_tagging_hashtag_is_not_a_topic():
    posts, texts = _thread(
        "What are you listening to right now?",
        ("at://r1", "#NowPlaying", ROOT),
        ("at://r2", "#NowPlaying", ROOT),
        ("at://r3", "#nowplaying", ROOT),
    )
    assert analyze_thread(posts, texts).dictionary.entries == {}
    segmenting = CandidateExtractor(segment_hashtags=True)
    analysis = analyze_thread(posts, texts, extractor=segmenting)
    assert analysis.dictionary.entries == {}
    assert analysis.labels == {}


def test_count_mentions():
    posts = [Post(ROOT), Post("a"), Post("b"), Post("c"), Post("d")]
    labels = {"a": {"Heat", "Die Hard"}, "b": {"Die Hard"}, "c": {"Heat"}}
    counts, uncategorized = count_mentions(labels, posts, ROOT)
    assert [(m.canonical, m.count, m.post_uris) for m in counts] == [
        ("Die Hard", 2, ["a", "b"]),
        ("Heat", 2, ["a", "c"]),
    ]
    assert sum(m.weight for m in counts) == pytest.approx(1.0)
    assert uncategorized == ["d"]


def test_thread_json_shapes():
    views = [_view(ROOT, "q"), _view("at://r1", "a", ROOT)]
    assert thread_views_from_json(views) == views
    assert thread_views_from_json({"posts": views}) == views
    tree = {"thread": {"post": views[0], "replies": [{"post": views[1], "replies": []}]}}
    assert thread_views_from_json(tree) == views
    with pytest.raises(ValueError):
        thread_views_from_json("nope")


def test_side_file_loaders(tmp_path):
    list_path = tmp_path / "rivers.txt"
    list_path.write_text("# rivers\nSevern\n\n  Thames  \n", encoding="utf-8")
    assert load_list_items(str(list_path)) == ["Severn", "Thames"]

    lookup_path = tmp_path / "lookup.json"
    lookup_path.write_text(json.dumps({"Die Hard": "Die Hard"}), encoding="utf-8")
    assert load_lookup_file(str(lookup_path)) == {"die hard": ValidationEntry("Die Hard")}


def test_out_path_for_input():
    assert out_path_for_input("out", "threads/karaoke.json") == os.path.join("out", "karaoke.topics.json")


def test_cli_writes_topics(tmp_path):
    views = [
        _view(ROOT, "What is your favorite Christmas movie?"),
        _view("at://r1", "Die Hard", ROOT),
        _view("at://r2", "Die Hard!", ROOT),
        _view("at://r3", "same", "at://r2"),
    ]
    input_path = tmp_path / "xmas.json"
    input_path.write_text(json.dumps({"posts": views}), encoding="utf-8")
    lookup_path = tmp_path / "lookup.json"
    lookup_path.write_text(json.dumps({"die hard": "Die Hard"}), encoding="utf-8")
    out_dir = tmp_path / "out"

    code = main([
        "--input-file", str(input_path),
        "--lookup-file", str(lookup_path),
        "--output-dir", str(out_dir),
        "--quiet",
    ])
    assert code == 0
    with open(out_dir / "xmas.topics.json", encoding="utf-8") as f:
        result = json.load(f)
    assert result["validation_mode"] == "oracle"
    assert [e["canonical"] for e in result["dictionary"]] == ["Die Hard"]
    assert result["labels"]["at://r3"] == ["Die Hard"]
    assert result["states"]["at://r3"] == "labeled-inherited"
    assert result["mentions"][0]["count"] == 3


def test_cli_segment_hashtags_flag(tmp_path):
    views = [
        _view(ROOT, "What is your favorite Christmas movie?"),
        _view("at://r1", "#DieHard", ROOT),
        _view("at://r2", "#DieHard every year", ROOT),
    ]
    input_path = tmp_path / "xmas.json"
    input_path.write_text(json.dumps(views), encoding="utf-8")
    lookup_path = tmp_path / "lookup.json"
    lookup_path.write_text(json.dumps({"die hard": "Die Hard"}), encoding="utf-8")
    out_dir = tmp_path / "out"
    args = ["--input-file", str(input_path), "--lookup-file", str(lookup_path), "--output-dir", str(out_dir), "--quiet"]

    assert main(args) == 0
    with open(out_dir / "xmas.topics.json", encoding="utf-8") as f:
        assert json.load(f)["dictionary"] == []

    assert main(args + ["--segment-hashtags"]) == 0
    with open(out_dir / "xmas.topics.json", encoding="utf-8") as f:
        result = json.load(f)
    assert [e["canonical"] for e in result["dictionary"]] == ["Die Hard"]
    assert sorted(result["labels"]) == ["at://r1", "at://r2"]


def test_cli_missing_input_file(tmp_path):
    assert main(["--input-file", str(tmp_path / "missing.json"), "--quiet"]) != 0


def test_cli_unreadable_thread_is_reported(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["--input-file", str(bad), "--output-dir", str(tmp_path / "out")]) == 1
    assert "[thread] failed to read" in capsys.readouterr().err


if __name__ == "__main__":
    test_oracle_mode_with_inheritance()
    test_self_validation_mode()
    print("ok")
