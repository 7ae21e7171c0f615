"""Test the commands acting on whole tables."""

from tablespan.commands import delete_table, go_to_next_cell
from tablespan.commands.table import find_next_cell
from tablespan.selection import TextSelection
from tablespan.state import EditorState
from tablespan.util import cell_around, text_position_in

from ..testing_utils import (
    apply_command, assert_no_logs, cell_pos, cursor_in, doc, p, table, td, tr)


# Absolute positions of the cells, the empty row makes the table map
# malformed
A, B, C, D = 2, 7, 16, 21


def _document():
    return doc(table(
        tr(td('a'), td('b')),
        tr(),
        tr(td('c'), td('d'))))


def _cursor(document, pos):
    return EditorState.create(document, text_position_in(document, pos))


def _selected_text(state):
    selection = state.selection
    paragraph = selection.resolved_anchor.parent
    start = selection.resolved_anchor.start()
    return paragraph.text_content[
        selection.from_ - start:selection.to - start]


@assert_no_logs
def test_find_next_cell():
    document = _document()
    resolved = cell_around(_cursor(document, A).selection.resolved_head)
    assert resolved.pos == A
    assert find_next_cell(resolved, 1) == B
    assert find_next_cell(resolved, -1) is None
    # The empty row is skipped
    assert find_next_cell(document.resolve(B), 1) == C
    assert find_next_cell(document.resolve(C), -1) == B
    assert find_next_cell(document.resolve(D), 1) is None


@assert_no_logs
def test_go_to_next_cell():
    document = _document()
    state = apply_command(go_to_next_cell(1), _cursor(document, A))
    assert isinstance(state.selection, TextSelection)
    assert _selected_text(state) == 'b'
    state = apply_command(go_to_next_cell(1), state)
    assert _selected_text(state) == 'c'
    state = apply_command(go_to_next_cell(-1), state)
    assert _selected_text(state) == 'b'
    assert state.doc is document


@assert_no_logs
def test_go_to_next_cell_refused():
    document = _document()
    assert not go_to_next_cell(-1)(_cursor(document, A))
    assert not go_to_next_cell(1)(_cursor(document, D))
    assert not go_to_next_cell(1)(EditorState(doc(p('a'))))


@assert_no_logs
def test_go_to_empty_cell():
    document = doc(table(tr(td('a'), td())))
    state = apply_command(go_to_next_cell(1), cursor_in(document, 0, 0))
    assert state.selection.empty
    assert state.selection.head == cell_pos(document, 0, 1) + 2


@assert_no_logs
def test_delete_table():
    document = doc(p('a'), table(tr(td('b'))), p('c'))
    state = EditorState.create(document, 6)
    state = apply_command(delete_table, state)
    assert [child.type.name for child in state.doc.children] == [
        'paragraph', 'paragraph']
    assert not delete_table(EditorState.create(document, 1))
