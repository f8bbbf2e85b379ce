"""
Reads the build metadata file (meta.json) written next to the event log:
- project root (`cwd`), used to tell direct from transitive packages
- plugin registry (`plugins`), used to label plugins that produced no metrics

The document is otherwise opaque and passed through to the output unchanged.
"""
import json
from pathlib import Path

from rolldown_analyzer.analyzers.logger_config import setup_logger
from rolldown_analyzer.errors import MetadataError

logger = setup_logger(__name__)


def load_meta(path) -> dict:
    """ Load and parse the metadata document, failing loudly on bad input. """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as e:
        raise MetadataError(path, "metadata file not found") from e
    except OSError as e:
        raise MetadataError(path, f"cannot read metadata file ({e.strerror})") from e

    try:
        meta = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataError(path, f"invalid JSON in metadata file (line {e.lineno})") from e

    if not isinstance(meta, dict):
        raise MetadataError(path, "metadata file must contain a JSON object")

    logger.debug(f"Loaded metadata from {path} (cwd={meta.get('cwd')!r}).")
    return meta


def plugin_name_from_registry(meta: dict, plugin_id) -> str:
    for plugin in meta.get("plugins") or []:
        if isinstance(plugin, dict) and plugin.get("plugin_id") == plugin_id:
            return plugin.get("name") or ""
    return ""
