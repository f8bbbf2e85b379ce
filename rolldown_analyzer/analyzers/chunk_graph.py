"""
Finalizes the chunk table once the whole event log has been consumed:
- marks chunks reachable from user-defined entries as initial
- gives unnamed chunks a deterministic name derived from their modules
- attaches the emitted asset recorded for each chunk

Runs after the reduction pass because all three need the complete chunk set.
"""
import re
from collections import deque

from rolldown_analyzer.analyzers.logger_config import setup_logger
from rolldown_analyzer.errors import EventIntegrityError

logger = setup_logger(__name__)

MAX_NAME_PARTS = 5
UNNAMED_CHUNK = "[unnamed]"

_DIR_PREFIX = re.compile(r"^.*(\.pnpm|\.yarn|node_modules|src|app|packages)/", re.IGNORECASE)
_NOISE_WORDS = re.compile(r"\b(index|main|dist|test|component|components)\b", re.IGNORECASE)


def _list_field(chunk: dict, key: str) -> list:
    value = chunk.get(key)
    return value if isinstance(value, list) else []


def chunk_module_ids(chunk: dict) -> list[str]:
    """ Module ids of a chunk, ignoring entries that are not paths. """
    return [module_id for module_id in _list_field(chunk, "modules") if isinstance(module_id, str)]


def get_initial_chunk_ids(chunks: list[dict], strict: bool = False) -> set:
    """ Breadth-first walk of chunk imports starting from every user-defined entry. """
    chunk_map = {chunk.get("chunk_id"): chunk for chunk in chunks}
    entry_ids = [chunk.get("chunk_id") for chunk in chunks if chunk.get("is_user_defined_entry")]

    initial_ids = set(entry_ids)
    visited = set()
    queue = deque(entry_ids)
    while queue:
        chunk_id = queue.popleft()
        if chunk_id is None or chunk_id in visited:
            continue
        visited.add(chunk_id)

        chunk = chunk_map.get(chunk_id)
        if chunk is None:
            if strict:
                raise EventIntegrityError(f"chunk import references unknown chunk {chunk_id!r}")
            continue
        for chunk_import in _list_field(chunk, "imports"):
            if not isinstance(chunk_import, dict):
                continue
            imported_id = chunk_import.get("chunk_id")
            if isinstance(imported_id, (int, str)) and imported_id not in initial_ids:
                initial_ids.add(imported_id)
                queue.append(imported_id)

    return initial_ids


def simplify_module_name(module_id: str) -> str:
    name = _DIR_PREFIX.sub("", module_id)
    name = _NOISE_WORDS.sub("", name)
    name = re.sub(r"/+", "/", name)
    name = re.sub(r"\?.*$", "", name)
    name = re.sub(r"\.\w+$", "", name)
    name = re.sub(r"\W", "_", name)
    name = re.sub(r"_+", "_", name)
    name = name.strip("_")
    name = re.sub(r"([a-z])([A-Z])", r"\1_\2", name).lower()

    parts = list(dict.fromkeys(part for part in name.split("_") if part))
    return "_".join(parts[:MAX_NAME_PARTS])


def guess_chunk_name(chunk: dict) -> str:
    if chunk.get("name"):
        return chunk["name"]
    modules = chunk_module_ids(chunk)
    if len(modules) == 1:
        return f"[{simplify_module_name(modules[0])}]"
    if len(modules) > 1:
        return f"[{simplify_module_name(modules[0])}_{len(modules)}]"
    return UNNAMED_CHUNK


def finalize_chunks(chunks: dict, chunk_assets: dict, strict: bool = False) -> dict:
    """ Fill the derived chunk fields in place and return the same table. """
    initial_ids = get_initial_chunk_ids(list(chunks.values()), strict=strict)

    for chunk_id, chunk in chunks.items():
        chunk["is_initial"] = chunk_id in initial_ids
        chunk["name"] = guess_chunk_name(chunk)
        chunk["asset"] = chunk_assets.get(chunk_id)

    logger.debug(f"Finalized {len(chunks)} chunks, {len(initial_ids & chunks.keys())} initial.")
    return chunks
