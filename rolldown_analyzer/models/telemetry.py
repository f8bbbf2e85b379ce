"""
Defines the per-module and per-plugin build metrics derived from hook calls:
- one record per completed resolveId / load / transform call
- module-scoped records carry full content, plugin-scoped ones only sizes/flags
- the module record that owns the module-scoped metrics

These models are the contract between event correlation and the output document.
"""
from dataclasses import asdict, dataclass, field


@dataclass
class CallInfo:
    id: str
    timestamp_start: int
    timestamp_end: int
    duration: int
    plugin_id: int | None
    plugin_name: str | None


@dataclass
class ResolveIdMetric(CallInfo):
    importer: str | None = None
    module_request: str | None = None
    import_kind: str | None = None
    resolved_id: str | None = None
    type: str = "resolve"


@dataclass
class LoadMetric(CallInfo):
    content: str | None = None
    type: str = "load"


@dataclass
class TransformMetric(CallInfo):
    content_from: str | None = None
    content_to: str | None = None
    diff_added: int = 0
    diff_removed: int = 0
    source_code_size: int = 0
    transformed_code_size: int = 0
    type: str = "transform"


@dataclass
class PluginCall(CallInfo):
    type: str = "resolve"
    module: str | None = None
    unchanged: bool | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        # resolve calls have no notion of unchanged content
        if self.unchanged is None:
            data.pop("unchanged")
        return data


@dataclass
class ModuleBuildMetrics:
    resolve_ids: list[ResolveIdMetric] = field(default_factory=list)
    loads: list[LoadMetric] = field(default_factory=list)
    transforms: list[TransformMetric] = field(default_factory=list)

    def last_transformed_code_size(self) -> int:
        if not self.transforms:
            return 0
        return self.transforms[-1].transformed_code_size or 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PluginBuildMetrics:
    plugin_id: int | None
    plugin_name: str | None
    calls: list[PluginCall] = field(default_factory=list)

    def calls_of_type(self, call_type: str) -> list[dict]:
        return [call.to_dict() for call in self.calls if call.type == call_type]

    def to_dict(self) -> dict:
        return {
            "plugin_id": self.plugin_id,
            "plugin_name": self.plugin_name,
            "calls": [call.to_dict() for call in self.calls],
            "resolveIdMetrics": self.calls_of_type("resolve"),
            "loadMetrics": self.calls_of_type("load"),
            "transformMetrics": self.calls_of_type("transform"),
        }


@dataclass
class ModuleRecord:
    id: str
    is_external: bool = False
    imports: list[dict] = field(default_factory=list)
    importers: list[str] = field(default_factory=list)
    build_metrics: ModuleBuildMetrics = field(default_factory=ModuleBuildMetrics)

    @classmethod
    def from_graph(cls, raw: dict, metrics: ModuleBuildMetrics | None) -> "ModuleRecord":
        """Build the authoritative record from a ModuleGraphReady entry."""
        return cls(
            id=raw["id"],
            is_external=bool(raw.get("is_external", False)),
            imports=sort_imports(raw.get("imports") or []),
            importers=sorted({importer for importer in raw.get("importers") or [] if isinstance(importer, str)}),
            build_metrics=metrics or ModuleBuildMetrics(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "imports": self.imports,
            "importers": self.importers,
            "build_metrics": self.build_metrics.to_dict(),
        }


def sort_imports(imports: list[dict]) -> list[dict]:
    unique = []
    for item in imports:
        if isinstance(item, dict) and item not in unique:
            unique.append(item)
    return sorted(unique, key=lambda item: str(item.get("module_id", "")))
