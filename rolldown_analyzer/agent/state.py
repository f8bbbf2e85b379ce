"""
Manages the state owned by a single reduction pass:
- interned strings referenced by `$ref:<id>` markers
- module, chunk and asset tables keyed by their ids
- the chunk -> asset association patched into chunks after the pass
- build window bounds

Keeps all "memory" logic in one place. Nothing here outlives the pass.
"""
from dataclasses import dataclass, field

from rolldown_analyzer.models.events import REF_MARKER
from rolldown_analyzer.models.telemetry import ModuleBuildMetrics, ModuleRecord


@dataclass
class ReducerState:
    string_refs: dict[str, str] = field(default_factory=dict)
    modules: dict[str, ModuleRecord] = field(default_factory=dict)
    chunks: dict = field(default_factory=dict)
    assets: dict[str, dict] = field(default_factory=dict)
    chunk_assets: dict = field(default_factory=dict)
    build_start_time: int = 0
    build_end_time: int = 0
    event_count: int = 0
    skipped_events: int = 0

    @property
    def build_duration(self) -> int:
        return self.build_end_time - self.build_start_time

    def intern(self, ref_id, content) -> None:
        self.string_refs[str(ref_id)] = content

    def resolve_ref(self, value):
        """ Substitute a `$ref:<id>` marker with its interned content, if known. """
        if not isinstance(value, str) or not value.startswith(REF_MARKER):
            return value
        ref_id = value[len(REF_MARKER):]
        return self.string_refs.get(ref_id, value)

    def ensure_module(self, module_id: str, metrics: ModuleBuildMetrics | None = None) -> ModuleRecord:
        if module_id not in self.modules:
            self.modules[module_id] = ModuleRecord(
                id=module_id, build_metrics=metrics or ModuleBuildMetrics())
        return self.modules[module_id]
