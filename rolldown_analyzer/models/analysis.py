"""
Standard representation of the analysis document (rolldown-data.json):
- build metadata, passed through
- modules sorted by id, each with its build metrics
- chunks, assets and packages
- per-plugin call metrics keyed by plugin id

This is the only thing the presentation layer reads; field names are stable.
"""
import json
from dataclasses import dataclass, field


@dataclass
class RolldownData:
    meta: dict
    modules: list[dict] = field(default_factory=list)
    build_duration: int = 0
    assets: list[dict] = field(default_factory=list)
    chunks: list[dict] = field(default_factory=list)
    packages: list[dict] = field(default_factory=list)
    plugin_build_metrics: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "meta": self.meta,
            "modules": self.modules,
            "build_duration": self.build_duration,
            "assets": self.assets,
            "chunks": self.chunks,
            "packages": self.packages,
            "plugin_build_metrics": self.plugin_build_metrics,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def write(self, path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())
