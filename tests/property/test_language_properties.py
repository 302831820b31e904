from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from codebench.errors import CodebenchError
from codebench.languages import EXTENSION_LANGUAGES, Language, classify
from codebench.workspace import WorkspaceStore

_NAME_CHARS = st.characters(min_codepoint=33, max_codepoint=126, exclude_characters=".")


@given(st.text(alphabet=_NAME_CHARS, min_size=1, max_size=20), st.sampled_from(sorted(EXTENSION_LANGUAGES)))
def test_known_extension_always_maps(stem: str, extension: str) -> None:
    assert classify(f"{stem}.{extension}") == EXTENSION_LANGUAGES[extension]


@given(st.text(alphabet=_NAME_CHARS, min_size=0, max_size=30))
def test_names_without_dot_are_plaintext(name: str) -> None:
    assert classify(name) == Language.PLAINTEXT


@given(st.text(max_size=40))
def test_classify_is_total(name: str) -> None:
    assert isinstance(classify(name), Language)


@given(st.lists(st.text(alphabet=_NAME_CHARS, min_size=1, max_size=8), min_size=1, max_size=25))
def test_workspace_names_stay_unique_and_active_exists(names: list[str]) -> None:
    store = WorkspaceStore()
    for name in names:
        try:
            store.create_file(name)
        except CodebenchError:
            assert name.strip() in store
        assert store.active_name in store

    listed = [item.name for item in store.files()]
    assert len(listed) == len(set(listed)) == len(set(names))
