import json
import os
import re
from typing import Any, Dict, List, Mapping

from .data_models import ThreadAnalysis
from .lookup import ValidationLookup, build_validation_lookup, load_lookup
from .post_text import flatten_thread


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def out_path_for_input(output_dir: str, input_path: str) -> str:
    base = os.path.basename(input_path)
    base = re.sub(r"\.json$", "", base, flags=re.IGNORECASE)
    return os.path.join(output_dir, f"{base}.topics.json")


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def thread_views_from_json(data: Any) -> List[Mapping[str, Any]]:
    """
    Post views from any of the accepted thread shapes:
      [postView, ...]
      {"posts": [postView, ...]}
      {"thread": {"post": ..., "replies": [...]}}   (getPostThread output)
    """
    if isinstance(data, list):
        return [v for v in data if isinstance(v, dict)]
    if isinstance(data, dict):
        if isinstance(data.get("posts"), list):
            return [v for v in data["posts"] if isinstance(v, dict)]
        if isinstance(data.get("thread"), dict):
            return flatten_thread(data["thread"])
    raise ValueError("unrecognized thread JSON: expected a list, {'posts': [...]} or {'thread': {...}}")


def load_thread_views(path: str) -> List[Mapping[str, Any]]:
    return thread_views_from_json(_read_json(path))


def load_lookup_file(path: str) -> ValidationLookup:
    """A JSON mapping (candidate -> canonical) or a list of oracle validation records."""
    data = _read_json(path)
    if isinstance(data, list):
        return build_validation_lookup(r for r in data if isinstance(r, dict))
    if isinstance(data, dict):
        return load_lookup(data)
    raise ValueError(f"unrecognized lookup JSON in {path}")


def load_list_items(path: str) -> List[str]:
    """Newline-delimited answers; blank lines and # comments are skipped."""
    items: List[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = re.sub(r"\s+", " ", line).strip()
            if not line or line.startswith("#"):
                continue
            items.append(line)
    return items


def analysis_to_dict(analysis: ThreadAnalysis) -> Dict[str, Any]:
    dictionary = analysis.dictionary
    return {
        "root_uri": analysis.root_uri,
        "post_count": analysis.post_count,
        "validation_mode": analysis.validation_mode,
        "dictionary": [
            {
                "canonical": e.canonical,
                "aliases": sorted(e.aliases),
                "frequency": e.frequency,
                "confidence": e.confidence,
                "confident_count": e.confident_count,
                "incidental_count": e.incidental_count,
                "post_uris": sorted(e.post_uris),
            }
            for e in sorted(dictionary.entries.values(), key=lambda e: (-e.frequency, e.canonical))
        ],
        "redirects": dict(sorted(dictionary.redirects.items())),
        "labels": {uri: sorted(titles) for uri, titles in analysis.labels.items()},
        "states": analysis.states,
        "mentions": [
            {"canonical": m.canonical, "count": m.count, "weight": round(m.weight, 6), "post_uris": m.post_uris}
            for m in analysis.mention_counts
        ],
        "uncategorized": analysis.uncategorized,
    }


def write_analysis(path: str, analysis: ThreadAnalysis) -> None:
    ensure_dir(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as fout:
        json.dump(analysis_to_dict(analysis), fout, ensure_ascii=False, indent=2)
        fout.write("\n")
