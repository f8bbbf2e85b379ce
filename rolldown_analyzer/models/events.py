"""
Defines the build events emitted by the bundler instrumentation layer.

Every line of the event log is one JSON object tagged by its `action` field.
The payload is kept as the raw mapping so fields we do not interpret (chunk
and asset details, module records) pass through untouched to the output.
"""
from dataclasses import dataclass, field
from enum import Enum

REF_MARKER = "$ref:"


class EventAction(str, Enum):
    BUILD_START = "BuildStart"
    BUILD_END = "BuildEnd"
    STRING_REF = "StringRef"
    CHUNK_GRAPH_READY = "ChunkGraphReady"
    MODULE_GRAPH_READY = "ModuleGraphReady"
    ASSETS_READY = "AssetsReady"
    RESOLVE_ID_START = "HookResolveIdCallStart"
    RESOLVE_ID_END = "HookResolveIdCallEnd"
    LOAD_START = "HookLoadCallStart"
    LOAD_END = "HookLoadCallEnd"
    TRANSFORM_START = "HookTransformCallStart"
    TRANSFORM_END = "HookTransformCallEnd"

    @classmethod
    def parse(cls, value) -> "EventAction | None":
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


HOOK_CALL_STARTS = frozenset({
    EventAction.RESOLVE_ID_START,
    EventAction.LOAD_START,
    EventAction.TRANSFORM_START,
})

HOOK_CALL_ENDS = frozenset({
    EventAction.RESOLVE_ID_END,
    EventAction.LOAD_END,
    EventAction.TRANSFORM_END,
})


def to_timestamp(value) -> int:
    """Timestamps arrive as integers or as integer strings (serialized bigints)."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


@dataclass
class BuildEvent:
    action: EventAction | None
    event_id: str
    payload: dict = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict, index: int) -> "BuildEvent":
        stamp = record["timestamp"] if "timestamp" in record else "x"
        if isinstance(stamp, float) and stamp.is_integer():
            stamp = int(stamp)
        return cls(
            action=EventAction.parse(record.get("action")),
            event_id=f"{stamp}#{index}",
            payload=record,
        )

    def get(self, key, default=None):
        return self.payload.get(key, default)

    @property
    def timestamp(self) -> int:
        return to_timestamp(self.payload.get("timestamp"))

    @property
    def call_id(self):
        return self.payload.get("call_id")

    @property
    def is_call_start(self) -> bool:
        return self.action in HOOK_CALL_STARTS

    @property
    def is_call_end(self) -> bool:
        return self.action in HOOK_CALL_ENDS
