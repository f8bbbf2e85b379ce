import pytest

from rolldown_analyzer.analyzers.chunk_graph import (
    finalize_chunks,
    get_initial_chunk_ids,
    guess_chunk_name,
    simplify_module_name,
)
from rolldown_analyzer.errors import EventIntegrityError


def chunk(chunk_id, imports=(), entry=False, modules=(), name=None):
    return {
        "chunk_id": chunk_id,
        "name": name,
        "modules": list(modules),
        "is_user_defined_entry": entry,
        "imports": [{"chunk_id": imported, "kind": "import-statement"} for imported in imports],
    }


def test_initial_chunks_follow_imports_transitively():
    chunks = [chunk(0, imports=[1], entry=True), chunk(1, imports=[2]), chunk(2), chunk(3, imports=[0])]

    assert get_initial_chunk_ids(chunks) == {0, 1, 2}


def test_initial_chunk_traversal_terminates_on_cycles():
    chunks = [chunk(0, imports=[1], entry=True), chunk(1, imports=[2]), chunk(2, imports=[0, 1]), chunk(4)]

    assert get_initial_chunk_ids(chunks) == {0, 1, 2}


def test_every_entry_is_initial():
    chunks = [chunk(0, entry=True), chunk(1, entry=True), chunk(2)]

    assert get_initial_chunk_ids(chunks) == {0, 1}


def test_import_of_unknown_chunk_does_not_extend_traversal():
    chunks = [chunk(0, imports=[99], entry=True)]

    assert get_initial_chunk_ids(chunks) == {0, 99}
    with pytest.raises(EventIntegrityError):
        get_initial_chunk_ids(chunks, strict=True)


@pytest.mark.parametrize("module_id, expected", [
    ("/proj/src/components/UserProfile.vue", "user_profile"),
    ("/proj/node_modules/lodash-es/debounce.js", "lodash_es_debounce"),
    ("/proj/src/pages/index.ts?vue&type=script", "pages"),
    ("/proj/node_modules/.pnpm/react@18.2.0/node_modules/react/index.js", "react"),
    ("/proj/src/a/b/c/d/e/f/g.js", "a_b_c_d_e"),
    ("/proj/src/foo/foo.js", "foo"),
])
def test_simplify_module_name(module_id, expected):
    assert simplify_module_name(module_id) == expected


def test_guess_chunk_name():
    assert guess_chunk_name(chunk(0, name="main")) == "main"
    assert guess_chunk_name(chunk(0, modules=["/proj/src/utils/format.ts"])) == "[utils_format]"
    assert guess_chunk_name(chunk(0, modules=["/proj/src/utils/format.ts", "/proj/src/b.ts"])) == "[utils_format_2]"
    assert guess_chunk_name(chunk(0)) == "[unnamed]"


def test_finalize_chunks_attaches_assets_and_flags():
    chunks = {0: chunk(0, imports=[1], entry=True, name="entry"), 1: chunk(1, modules=["/proj/src/lazy.ts"]), 2: chunk(2)}
    asset = {"filename": "entry.js", "chunk_id": 0}

    finalize_chunks(chunks, {0: asset})

    assert chunks[0]["asset"] is asset
    assert chunks[1]["asset"] is None
    assert [chunks[i]["is_initial"] for i in range(3)] == [True, True, False]
    assert chunks[1]["name"] == "[lazy]"


def test_malformed_chunk_imports_are_ignored():
    chunks = [
        {"chunk_id": 0, "is_user_defined_entry": True, "imports": ["bad", None, {"chunk_id": [1]}, {"chunk_id": 2}]},
        {"chunk_id": 2, "imports": "not-a-list"},
    ]

    assert get_initial_chunk_ids(chunks) == {0, 2}


def test_non_string_modules_do_not_name_chunks():
    assert guess_chunk_name({"modules": [None, 3, "/proj/src/a.ts"]}) == "[a]"
    assert guess_chunk_name({"modules": [None]}) == "[unnamed]"
    assert guess_chunk_name({"modules": "oops"}) == "[unnamed]"
