#!/usr/bin/env python3
"""
Topic discovery and post labeling for Bluesky reply threads.

- Reads one or many thread JSON files (post views, {"posts": [...]}, or a getPostThread tree)
- Discovers the titles the thread is talking about and labels each reply with them
- Validation comes from a lookup file, a list of expected answers, or the thread itself

Usage examples:
  python3 -m thread_topics --input-file threads/karaoke.json
  python3 -m thread_topics --input-file threads/rivers.json --list-file rivers.txt
  python3 -m thread_topics --input-glob "threads/*.json" --lookup-file validated.json --output-dir output/topics

Output:
  For each input file path/to/NAME.json, writes:
    output/topics/NAME.topics.json
  containing:
    {
      "root_uri": "at://...",
      "validation_mode": "self",
      "dictionary": [{ "canonical": "Die Hard", "aliases": ["die hard"], "confident_count": 3, ... }],
      "labels": { "at://.../post/1": ["Die Hard"], ... },
      "mentions": [{ "canonical": "Die Hard", "count": 4, "weight": 0.25, "post_uris": [...] }],
      "uncategorized": [...]
    }
"""
from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from glob import glob
from typing import List, Optional

from . import config
from .candidates import CandidateExtractor
from .file_utils import ensure_dir, load_list_items, load_lookup_file, load_thread_views, out_path_for_input, write_analysis
from .lookup import ValidationLookup
from .pipeline import ThreadError, analyze_thread, choose_validation_mode, mode_options, posts_and_texts


def process_inputs(
    input_paths: List[str],
    output_dir: str,
    lookup_path: Optional[str] = None,
    list_path: Optional[str] = None,
    min_confident_overall: Optional[int] = None,
    min_confident_for_short_title: Optional[int] = None,
    max_inherit_depth: int = config.DEFAULT_MAX_INHERIT_DEPTH,
    embed_common_word_zipf: float = config.DEFAULT_EMBED_COMMON_WORD_ZIPF,
    segment_hashtags: bool = False,
    verbose: bool = True,
) -> int:
    """Analyze each input thread and write its .topics.json. Returns the number of failed inputs."""
    if not input_paths:
        print("No input files matched.", file=sys.stderr)
        return 1

    ensure_dir(output_dir)

    # Optional side files: a failed load is reported and ignored
    lookup: Optional[ValidationLookup] = None
    if lookup_path:
        try:
            lookup = load_lookup_file(lookup_path)
            if verbose:
                print(f"[lookup] loaded {len(lookup)} entries from {lookup_path}", file=sys.stderr)
        except (OSError, ValueError) as e:
            print(f"[lookup] failed to load {lookup_path}: {e}", file=sys.stderr)

    list_items: Optional[List[str]] = None
    if list_path:
        try:
            list_items = load_list_items(list_path)
            if verbose:
                print(f"[list] loaded {len(list_items)} item(s) from {list_path}", file=sys.stderr)
        except OSError as e:
            print(f"[list] failed to load {list_path}: {e}", file=sys.stderr)

    options = mode_options(choose_validation_mode(lookup, None, list_items))
    if min_confident_overall is not None:
        options = dataclasses.replace(options, min_confident_overall=min_confident_overall)
    if min_confident_for_short_title is not None:
        options = dataclasses.replace(options, min_confident_for_short_title=min_confident_for_short_title)
    options = dataclasses.replace(options, embed_common_word_zipf=embed_common_word_zipf)
    extractor = CandidateExtractor(segment_hashtags=True) if segment_hashtags else None

    failures = 0
    for inp in input_paths:
        outp = out_path_for_input(output_dir, inp)
        if verbose:
            print(f"[thread] processing {inp} -> {outp}", file=sys.stderr)
        try:
            views = load_thread_views(inp)
        except (OSError, ValueError) as e:
            print(f"[thread] failed to read {inp}: {e}", file=sys.stderr)
            failures += 1
            continue

        posts, texts = posts_and_texts(views)
        try:
            analysis = analyze_thread(
                posts,
                texts,
                lookup=lookup,
                list_items=list_items,
                options=options,
                max_inherit_depth=max_inherit_depth,
                extractor=extractor,
                verbose=verbose,
            )
        except ThreadError as e:
            print(f"[thread] {inp}: {e}", file=sys.stderr)
            failures += 1
            continue

        write_analysis(outp, analysis)
        if verbose:
            print(
                f"[done] wrote {len(analysis.mention_counts)} topic(s), "
                f"{len(analysis.labels)} labeled post(s) to {outp}",
                file=sys.stderr,
            )
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Discover the titles a reply thread talks about and label each post with them.")
    g = ap.add_mutually_exclusive_group(required=True)
    g.add_argument("--input-file", type=str, help="Path to one thread JSON file")
    g.add_argument("--input-glob", type=str, help="Glob for many thread JSON files, e.g., 'threads/*.json'")
    v = ap.add_mutually_exclusive_group()
    v.add_argument("--lookup-file", type=str, default=None, help="JSON mapping candidate -> canonical (or {canonical, confidence}), or a list of validation records")
    v.add_argument("--list-file", type=str, default=None, help="Newline-delimited list of expected answers (# comments allowed)")
    ap.add_argument("--output-dir", type=str, default=config.DEFAULT_OUTPUT_DIR, help="Directory for output .topics.json files")
    ap.add_argument("--min-confident-overall", type=int, default=None, help="Minimum confident mentions for any title (default depends on validation mode)")
    ap.add_argument("--min-confident-short-title", type=int, default=None, help="Minimum confident mentions for titles of <=2 significant words (default depends on validation mode)")
    ap.add_argument("--max-inherit-depth", type=int, default=config.DEFAULT_MAX_INHERIT_DEPTH, help="Reply hops an agreement post may look up for a labeled ancestor")
    ap.add_argument("--embed-common-word-zipf", type=float, default=config.DEFAULT_EMBED_COMMON_WORD_ZIPF, help="Skip single-word link song names at or above this Zipf frequency (<=0 disables)")
    ap.add_argument("--segment-hashtags", action="store_true", help="Also read CamelCase / glued hashtags as title candidates (#DieHard -> Die Hard)")
    ap.add_argument("--quiet", action="store_true", help="Suppress progress output on stderr")

    args = ap.parse_args(argv)

    if args.input_file:
        if not os.path.isfile(args.input_file):
            print(f"[thread] input file not found: {args.input_file}", file=sys.stderr)
            return 2
        inputs = [args.input_file]
    else:
        inputs = sorted(glob(args.input_glob))

    failures = process_inputs(
        input_paths=inputs,
        output_dir=args.output_dir,
        lookup_path=args.lookup_file,
        list_path=args.list_file,
        min_confident_overall=args.min_confident_overall,
        min_confident_for_short_title=args.min_confident_short_title,
        max_inherit_depth=args.max_inherit_depth,
        embed_common_word_zipf=args.embed_common_word_zipf,
        segment_hashtags=args.segment_hashtags,
        verbose=not args.quiet,
    )
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
