import json

import pytest

PROJECT_ROOT = "/proj"
FOO_MODULE = "/proj/node_modules/foo/index.js"


def hook_pair(kind, call_id, start_ts, end_ts, module_id, plugin_id=0, plugin_name="test-plugin",
              content_from=None, content_to=None):
    """A matching start/end pair for one resolveId, load or transform call."""
    common = {"call_id": call_id, "plugin_id": plugin_id, "plugin_name": plugin_name}
    if kind == "resolve":
        start = {"action": "HookResolveIdCallStart", "timestamp": start_ts, "importer": None,
                 "module_request": module_id, "import_kind": "import-statement", **common}
        end = {"action": "HookResolveIdCallEnd", "timestamp": end_ts, "resolved_id": module_id, **common}
    elif kind == "load":
        start = {"action": "HookLoadCallStart", "timestamp": start_ts, "module_id": module_id, **common}
        end = {"action": "HookLoadCallEnd", "timestamp": end_ts, "module_id": module_id,
               "content": content_to, **common}
    else:
        start = {"action": "HookTransformCallStart", "timestamp": start_ts, "module_id": module_id,
                 "content": content_from, **common}
        end = {"action": "HookTransformCallEnd", "timestamp": end_ts, "module_id": module_id,
               "content": content_to, **common}
    return [start, end]


@pytest.fixture
def make_hook_pair():
    return hook_pair


@pytest.fixture
def sample_events():
    """The small build described in the README: one entry chunk holding one npm module."""
    source = "export const foo = 1\n"
    return [
        {"action": "BuildStart", "timestamp": 0},
        *hook_pair("resolve", 1, 5, 10, FOO_MODULE),
        *hook_pair("load", 2, 10, 20, FOO_MODULE, content_to=source),
        *hook_pair("transform", 3, 20, 35, FOO_MODULE, plugin_id=1, plugin_name="transformer",
                   content_from=source, content_to=source + "export default foo\n"),
        {"action": "ModuleGraphReady", "timestamp": 40,
         "modules": [{"id": FOO_MODULE, "is_external": False, "imports": [], "importers": []}]},
        {"action": "ChunkGraphReady", "timestamp": 50,
         "chunks": [{"chunk_id": 0, "name": None, "modules": [FOO_MODULE],
                     "is_user_defined_entry": True, "imports": []}]},
        {"action": "AssetsReady", "timestamp": 60,
         "assets": [{"filename": "foo.js", "chunk_id": 0, "size": 42}]},
        {"action": "BuildEnd", "timestamp": 100},
    ]


@pytest.fixture
def write_inputs(tmp_path):
    def _write(events, meta=None, extra_lines=()):
        logs_path = tmp_path / "logs.json"
        meta_path = tmp_path / "meta.json"
        lines = [json.dumps(event) for event in events]
        lines.extend(extra_lines)
        logs_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        meta_path.write_text(json.dumps(meta if meta is not None else {"cwd": PROJECT_ROOT, "plugins": []}),
                             encoding="utf-8")
        return logs_path, meta_path

    return _write
