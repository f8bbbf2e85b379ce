"""
Main orchestration:
- loads build metadata
- folds every event of the log into the reducer state, in file order
- finalizes the chunk graph and classifies packages
- assembles the analysis document

Input problems that make the run meaningless (missing metadata, unreadable
log) are raised before any event is folded; everything else is tolerated.
"""
from rolldown_analyzer.agent.state import ReducerState
from rolldown_analyzer.analyzers.chunk_graph import finalize_chunks
from rolldown_analyzer.analyzers.logger_config import setup_logger
from rolldown_analyzer.analyzers.packages import classify_packages
from rolldown_analyzer.errors import EventIntegrityError
from rolldown_analyzer.models.analysis import RolldownData
from rolldown_analyzer.models.events import BuildEvent, EventAction
from rolldown_analyzer.models.telemetry import ModuleRecord
from rolldown_analyzer.telemetry.build_logs import LogReadStats, read_build_log
from rolldown_analyzer.telemetry.correlator import HookCallCorrelator
from rolldown_analyzer.telemetry.meta import load_meta

logger = setup_logger(__name__)


class EventReducer:
    """Single-pass fold of build events into module, chunk, asset and metric tables.

    With ``strict=True`` the reducer raises :class:`EventIntegrityError` for
    orphaned hook-call ends, assets of unknown chunks and imports of unknown
    chunks instead of silently tolerating them.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.state = ReducerState()
        self.correlator = HookCallCorrelator(strict=strict)
        self._handlers = {
            EventAction.BUILD_START: self._on_build_start,
            EventAction.BUILD_END: self._on_build_end,
            EventAction.MODULE_GRAPH_READY: self._on_module_graph_ready,
            EventAction.ASSETS_READY: self._on_assets_ready,
        }

    def feed(self, records) -> "EventReducer":
        for record in records:
            self.handle(record)
        return self

    def handle(self, record: dict) -> None:
        event = BuildEvent.from_record(record, self.state.event_count)
        self.state.event_count += 1
        try:
            self._fold(event)
        except (TypeError, ValueError, AttributeError, KeyError) as e:
            # a well-formed line with an unexpected payload shape
            self.state.skipped_events += 1
            logger.debug(f"Skipping event {event.event_id} ({event.get('action')!r}): {e!r}")

    def _fold(self, event: BuildEvent) -> None:
        if event.action is EventAction.STRING_REF:
            self.state.intern(event.get("id"), event.get("content"))
            return
        if event.action is EventAction.CHUNK_GRAPH_READY:
            self._on_chunk_graph_ready(event)
            return

        if "content" in event.payload:
            event.payload["content"] = self.state.resolve_ref(event.payload["content"])

        self.correlator.record(event)

        module_id = event.get("module_id")
        if isinstance(module_id, str) and module_id:
            self.state.ensure_module(module_id, self.correlator.metrics_slot(module_id))

        handler = self._handlers.get(event.action)
        if handler is not None:
            handler(event)

    def _on_build_start(self, event: BuildEvent) -> None:
        self.state.build_start_time = event.timestamp

    def _on_build_end(self, event: BuildEvent) -> None:
        self.state.build_end_time = event.timestamp

    def _on_chunk_graph_ready(self, event: BuildEvent) -> None:
        self.state.chunks = {
            chunk.get("chunk_id"): dict(chunk)
            for chunk in event.get("chunks") or []
            if isinstance(chunk, dict)
        }

    def _on_module_graph_ready(self, event: BuildEvent) -> None:
        self.correlator.clear_pending()
        for raw in event.get("modules") or []:
            if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
                continue
            metrics = self.correlator.metrics_slot(raw["id"])
            self.state.modules[raw["id"]] = ModuleRecord.from_graph(raw, metrics)

    def _on_assets_ready(self, event: BuildEvent) -> None:
        for asset in event.get("assets") or []:
            if not isinstance(asset, dict) or "filename" not in asset:
                continue
            chunk_id = asset.get("chunk_id")
            chunk = self.state.chunks.get(chunk_id)
            if chunk is None and chunk_id is not None and self.strict:
                raise EventIntegrityError(
                    f"asset {asset['filename']!r} references unknown chunk {chunk_id!r}")
            self.state.assets[asset["filename"]] = {**asset, "chunk": chunk}
            self.state.chunk_assets[chunk_id] = asset

    def finish(self, meta: dict) -> RolldownData:
        """ Run the post-pass stages and assemble the analysis document. """
        state = self.state
        chunks = finalize_chunks(state.chunks, state.chunk_assets, strict=self.strict)
        packages = classify_packages(chunks.values(), state.modules, meta)

        modules = sorted(state.modules.values(), key=lambda module: module.id)
        return RolldownData(
            meta=meta,
            modules=[module.to_dict() for module in modules],
            build_duration=state.build_duration,
            assets=list(state.assets.values()),
            chunks=list(chunks.values()),
            packages=packages,
            plugin_build_metrics={
                plugin_id: metrics.to_dict()
                for plugin_id, metrics in self.correlator.plugin_metrics.items()
            },
        )


def generate_data(logs_path, meta_path, strict: bool = False) -> RolldownData:
    meta = load_meta(meta_path)

    stats = LogReadStats()
    reducer = EventReducer(strict=strict)
    reducer.feed(read_build_log(logs_path, stats))

    state = reducer.state
    logger.debug(f"Processed {state.event_count} events ({stats.skipped} malformed lines skipped, "
                 f"{state.skipped_events} events with unexpected payloads skipped).")
    logger.debug(f"Orphaned call ends: {reducer.correlator.orphaned_ends}, "
                 f"unattributed call ends: {reducer.correlator.unattributed_ends}.")
    logger.debug(f"Modules: {len(state.modules)}, Chunks: {len(state.chunks)}, Assets: {len(state.assets)}")

    data = reducer.finish(meta)

    logger.debug(f"Packages: {len(data.packages)}, Plugin Build Metrics: {len(data.plugin_build_metrics)}")
    return data
