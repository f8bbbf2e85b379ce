"""
Read-only lookups over a finished analysis document:
- module details with the chunks and assets that contain it
- transforms of a module in plugin order
- asset details with importer/imported assets
- chunk, package and plugin details

Works on the serialized form (a dict as loaded from rolldown-data.json) so it
can be pointed at documents produced by earlier runs.
"""
import json
from pathlib import Path

from rolldown_analyzer.telemetry.meta import plugin_name_from_registry

EMPTY_BUILD_METRICS = {"resolve_ids": [], "loads": [], "transforms": []}


def _by_plugin_id(calls: list[dict]) -> list[dict]:
    return sorted(calls, key=lambda call: (call.get("plugin_id") is None, call.get("plugin_id") or 0))


class AnalysisQueries:
    def __init__(self, data: dict):
        self.data = data

    @classmethod
    def from_file(cls, path) -> "AnalysisQueries":
        return cls(json.loads(Path(path).read_text(encoding="utf-8")))

    @property
    def modules(self) -> list[dict]:
        return self.data.get("modules") or []

    @property
    def chunks(self) -> list[dict]:
        return self.data.get("chunks") or []

    @property
    def assets(self) -> list[dict]:
        return self.data.get("assets") or []

    @property
    def packages(self) -> list[dict]:
        return self.data.get("packages") or []

    def _find_module(self, module_id: str) -> dict | None:
        return next((module for module in self.modules if module.get("id") == module_id), None)

    def _asset_of_chunk(self, chunk_id) -> dict | None:
        return next((asset for asset in self.assets if asset.get("chunk_id") == chunk_id), None)

    def module_info(self, module_id: str) -> dict | None:
        module = self._find_module(module_id)
        if module is None:
            return None

        module_chunks = [
            {"type": "chunk", **chunk}
            for chunk in self.chunks if module_id in (chunk.get("modules") or [])
        ]
        chunk_ids = {chunk.get("chunk_id") for chunk in module_chunks}
        module_assets = [
            {"type": "asset", **asset}
            for asset in self.assets if asset.get("chunk_id") in chunk_ids
        ]
        build_metrics = module.get("build_metrics") or EMPTY_BUILD_METRICS

        return {
            "id": module_id,
            "imports": module.get("imports") or [],
            "importers": module.get("importers") or [],
            "chunks": module_chunks,
            "assets": module_assets,
            "build_metrics": build_metrics,
            "loads": _by_plugin_id(build_metrics.get("loads") or []),
            "resolve_ids": _by_plugin_id(build_metrics.get("resolve_ids") or []),
        }

    def module_transforms(self, module_id: str) -> list[dict]:
        module = self._find_module(module_id)
        if module is None:
            return []
        transforms = (module.get("build_metrics") or {}).get("transforms") or []
        return _by_plugin_id([
            {**transform,
             "diff_added": transform.get("diff_added") or 0,
             "diff_removed": transform.get("diff_removed") or 0}
            for transform in transforms
        ])

    def asset_details(self, filename: str) -> dict | None:
        asset = next((asset for asset in self.assets if asset.get("filename") == filename), None)
        if asset is None:
            return None

        details = {"asset": {**asset, "type": "asset"}, "chunks": [], "importers": [], "imports": []}
        chunk_id = asset.get("chunk_id")
        if chunk_id is None:
            return details

        chunk = next((chunk for chunk in self.chunks if chunk.get("chunk_id") == chunk_id), None)
        importer_chunks = [
            other for other in self.chunks
            if any(item.get("chunk_id") == chunk_id for item in other.get("imports") or [])
        ]
        imported_ids = [item.get("chunk_id") for item in (chunk or {}).get("imports") or []]

        if chunk is not None:
            details["chunks"] = [{**chunk, "type": "chunk"}]
        details["importers"] = [a for a in map(self._asset_of_chunk, (c.get("chunk_id") for c in importer_chunks)) if a]
        details["imports"] = [a for a in map(self._asset_of_chunk, imported_ids) if a]
        return details

    def chunk_info(self, chunk_id) -> dict | None:
        chunk = next((chunk for chunk in self.chunks if chunk.get("chunk_id") == chunk_id), None)
        if chunk is None:
            return None
        return {**chunk, "asset": self._asset_of_chunk(chunk_id)}

    def package_details(self, package_id: str) -> dict | None:
        """ Look up a package by its `name@version` label. """
        return next(
            (pkg for pkg in self.packages if f"{pkg.get('name')}@{pkg.get('version')}" == package_id),
            None,
        )

    def plugin_details(self, plugin_id) -> dict:
        all_metrics = self.data.get("plugin_build_metrics") or {}
        metrics = all_metrics.get(str(plugin_id)) or all_metrics.get(plugin_id)
        if not metrics:
            return {
                "plugin_name": plugin_name_from_registry(self.data.get("meta") or {}, plugin_id),
                "plugin_id": plugin_id,
                "calls": [],
                "resolveIdMetrics": [],
                "loadMetrics": [],
                "transformMetrics": [],
            }

        calls = metrics.get("calls") or []
        return {
            **metrics,
            "resolveIdMetrics": [call for call in calls if call.get("type") == "resolve"],
            "loadMetrics": [call for call in calls if call.get("type") == "load"],
            "transformMetrics": [call for call in calls if call.get("type") == "transform"],
        }
