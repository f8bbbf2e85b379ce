"""
Associates hook-call start and end events into completed calls:
- start events are parked by call_id until their end arrives
- each completed call becomes one module-scoped and one plugin-scoped metric
- transform calls get line diff counts and content sizes

Keeps correlation logic in one place. An end without a start is unobservable
and simply dropped.
"""
from rolldown_analyzer.errors import EventIntegrityError
from rolldown_analyzer.models.events import BuildEvent, EventAction
from rolldown_analyzer.models.telemetry import (
    LoadMetric,
    ModuleBuildMetrics,
    PluginBuildMetrics,
    PluginCall,
    ResolveIdMetric,
    TransformMetric,
)
from rolldown_analyzer.tools.line_diff import compute_diff_counts, content_byte_size


class HookCallCorrelator:
    def __init__(self, strict: bool = False):
        self.strict = strict
        self.pending: dict = {}
        self.module_metrics: dict[str, ModuleBuildMetrics] = {}
        self.plugin_metrics: dict = {}
        self.orphaned_ends = 0
        self.unattributed_ends = 0

    def record(self, event: BuildEvent) -> None:
        if event.is_call_start:
            self.pending[event.call_id] = event
        elif event.is_call_end:
            self._complete(event)

    def clear_pending(self) -> None:
        self.pending.clear()

    def metrics_slot(self, module_id: str) -> ModuleBuildMetrics:
        """The metrics record shared by a module and every call attributed to it."""
        return self.module_metrics.setdefault(module_id, ModuleBuildMetrics())

    def _complete(self, end: BuildEvent) -> None:
        start = self.pending.get(end.call_id)
        if start is None:
            self.orphaned_ends += 1
            if self.strict:
                raise EventIntegrityError(
                    f"{end.action.value} {end.event_id} has no start for call_id {end.call_id!r}")
            return

        if end.action is EventAction.RESOLVE_ID_END:
            module_id = end.get("resolved_id")
        else:
            module_id = end.get("module_id")
        if not module_id:
            self.unattributed_ends += 1
            return

        plugin_id = end.get("plugin_id")
        info = dict(
            id=end.event_id,
            timestamp_start=start.timestamp,
            timestamp_end=end.timestamp,
            duration=end.timestamp - start.timestamp,
            plugin_id=plugin_id,
            plugin_name=end.get("plugin_name"),
        )
        if end.action is EventAction.TRANSFORM_END:
            # sized before any table is touched so a bad payload leaves no partial entry
            content_from = start.get("content")
            content_to = end.get("content")
            transform_stats = dict(
                **compute_diff_counts(content_from, content_to),
                source_code_size=content_byte_size(content_from),
                transformed_code_size=content_byte_size(content_to),
            )

        module_metrics = self.metrics_slot(module_id)
        plugin_metrics = self.plugin_metrics.setdefault(
            plugin_id, PluginBuildMetrics(plugin_id=plugin_id, plugin_name=end.get("plugin_name")))

        if end.action is EventAction.RESOLVE_ID_END:
            module_metrics.resolve_ids.append(ResolveIdMetric(
                **info,
                importer=start.get("importer"),
                module_request=start.get("module_request"),
                import_kind=start.get("import_kind"),
                resolved_id=module_id,
            ))
            plugin_metrics.calls.append(PluginCall(
                **info, type="resolve", module=start.get("module_request")))

        elif end.action is EventAction.LOAD_END:
            content = end.get("content")
            module_metrics.loads.append(LoadMetric(**info, content=content))
            plugin_metrics.calls.append(PluginCall(
                **info, type="load", module=module_id, unchanged=not content))

        elif end.action is EventAction.TRANSFORM_END:
            module_metrics.transforms.append(TransformMetric(
                **info,
                content_from=content_from,
                content_to=content_to,
                **transform_stats,
            ))
            plugin_metrics.calls.append(PluginCall(
                **info, type="transform", module=module_id, unchanged=content_from == content_to))
