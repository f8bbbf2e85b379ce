"""
Wraps difflib to:
- count lines added and removed by a source transformation
- measure encoded content size

Ensures the rest of the analyzer never has to deal with diff opcodes.
"""
import difflib


def compute_diff_counts(content_from: str | None, content_to: str | None) -> dict:
    if not content_from or not content_to or content_from == content_to:
        return {"diff_added": 0, "diff_removed": 0}

    lines_from = content_from.splitlines(keepends=True)
    lines_to = content_to.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, lines_from, lines_to, autojunk=False)

    added = removed = 0
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            removed += i2 - i1
        if tag in ("replace", "insert"):
            added += j2 - j1

    return {"diff_added": added, "diff_removed": removed}


def content_byte_size(content: str | None) -> int:
    if content is None:
        return 0
    return len(content.encode("utf-8"))
