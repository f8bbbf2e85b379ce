"""
Builds the package-level view of the bundle from the finalized chunk table:
- attributes node_modules files to a package name and install directory
- reads each package's version from its package.json
- classifies packages as direct (imported from project source) or transitive
- flags package names installed in more than one location

Packages that never produced transformed output are left out.
"""
import json
import re
from pathlib import Path

import pandas as pd

from rolldown_analyzer.analyzers.chunk_graph import chunk_module_ids
from rolldown_analyzer.analyzers.logger_config import setup_logger

logger = setup_logger(__name__)

PACKAGE_FILE_COLUMNS = ["name", "dir", "path", "transformedCodeSize", "importers", "is_direct"]

_NODE_MODULES_SEGMENT = re.compile(r"[/\\]node_modules[/\\]")
_AFTER_LAST_NODE_MODULES = re.compile(r".*/node_modules/(.*)$")
_UP_TO_LAST_NODE_MODULES = re.compile(r"^(.+/node_modules/)")


def is_node_module_path(path: str) -> bool:
    return bool(_NODE_MODULES_SEGMENT.search(path))


def get_module_name_from_path(path: str) -> str | None:
    match = _AFTER_LAST_NODE_MODULES.match(path.replace("\\", "/"))
    if not match or not match.group(1):
        return None
    rest = match.group(1)
    if rest.startswith("@"):
        return "/".join(rest.split("/")[:2])
    return rest.split("/")[0]


def get_package_dir_path(path: str) -> str | None:
    normalized = path.replace("%2F", "/").replace("\\", "/")
    match = _UP_TO_LAST_NODE_MODULES.match(normalized)
    name = get_module_name_from_path(path)
    if not match or not name:
        return None
    return match.group(1) + name


def read_package_version(package_dir: str) -> str:
    manifest = Path(package_dir) / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return ""
    if not isinstance(data, dict):
        return ""
    version = data.get("version")
    return version if isinstance(version, str) else ""


def collect_package_files(chunks, modules: dict, cwd: str | None) -> pd.DataFrame:
    """ One row per (chunk, node_modules file) pair, in chunk order. """
    records = []
    for chunk in chunks:
        for module_id in chunk_module_ids(chunk):
            if not is_node_module_path(module_id):
                continue
            name = get_module_name_from_path(module_id)
            package_dir = get_package_dir_path(module_id)
            if not name or not package_dir:
                continue

            module = modules.get(module_id)
            importers = list(module.importers) if module is not None else []
            records.append({
                "name": name,
                "dir": package_dir,
                "path": module_id,
                "transformedCodeSize": module.build_metrics.last_transformed_code_size() if module else 0,
                "importers": importers,
                "is_direct": isinstance(cwd, str) and any(cwd in importer for importer in importers),
            })

    return pd.DataFrame.from_records(records, columns=PACKAGE_FILE_COLUMNS)


def classify_packages(chunks, modules: dict, meta: dict) -> list[dict]:
    files = collect_package_files(chunks, modules, meta.get("cwd"))
    if files.empty:
        return []

    groups = files.groupby(["name", "dir"], sort=False)
    installs_per_name = groups.size().reset_index()["name"].value_counts()

    packages = []
    for (name, package_dir), group in groups:
        total_size = int(group["transformedCodeSize"].sum())
        if total_size <= 0:
            logger.debug(f"Skipping package {name} at {package_dir}: no transformed output.")
            continue
        packages.append({
            "name": name,
            "version": read_package_version(package_dir),
            "dir": package_dir,
            "type": "direct" if group["is_direct"].any() else "transitive",
            "transformedCodeSize": total_size,
            "files": [
                {
                    "path": row.path,
                    "transformedCodeSize": int(row.transformedCodeSize),
                    "importers": [{"path": importer, "version": ""} for importer in row.importers],
                }
                for row in group.itertuples(index=False)
            ],
            "duplicated": bool(installs_per_name[name] > 1),
        })

    logger.debug(f"Classified {len(packages)} packages from {len(files)} package files.")
    return packages
