"""
Responsible for reading the event log emitted by the bundler instrumentation.
Converts raw JSONL lines into plain event records, one per line, in file order.

Blank lines are ignored and lines that do not parse as a JSON object are
skipped, so a truncated final line from a crashed build never aborts a run.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator

from rolldown_analyzer.errors import LogSourceError


@dataclass
class LogReadStats:
    lines: int = 0
    blank: int = 0
    skipped: int = 0

    @property
    def parsed(self) -> int:
        return self.lines - self.blank - self.skipped


def open_build_log(path) -> IO[str]:
    path = Path(path)
    try:
        return path.open("r", encoding="utf-8", errors="replace", newline=None)
    except FileNotFoundError as e:
        raise LogSourceError(path, "event log not found") from e
    except OSError as e:
        raise LogSourceError(path, f"cannot open event log ({e.strerror})") from e


def iter_log_records(lines: Iterable[str], stats: LogReadStats | None = None) -> Iterator[dict]:
    stats = stats if stats is not None else LogReadStats()
    for line in lines:
        stats.lines += 1
        line = line.strip()
        if not line:
            stats.blank += 1
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            stats.skipped += 1
            continue
        if not isinstance(record, dict):
            stats.skipped += 1
            continue
        yield record


def read_build_log(path, stats: LogReadStats | None = None) -> Iterator[dict]:
    """ Stream event records from a JSON-lines log file. """
    with open_build_log(path) as f:
        try:
            yield from iter_log_records(f, stats)
        except OSError as e:
            raise LogSourceError(path, f"error while reading event log ({e.strerror})") from e
