"""Test the commands merging, splitting and changing cells."""

from tablespan.commands import (
    delete_cell_selection, merge_cells, set_cell_attr, split_cell,
    split_cell_with_type)
from tablespan.model.nodes import SCHEMA
from tablespan.selection import CellSelection
from tablespan.state import EditorState
from tablespan.tablemap import TableMap

from ..testing_utils import (
    apply_command, assert_no_logs, capture_logs, cursor_in, doc, get_table,
    select_cells, serialize, table, td, th, tr)


@assert_no_logs
def test_merge_cells():
    document = doc(table(tr(td('a'), td('b')), tr(td('c'), td('d'))))
    state = apply_command(merge_cells, select_cells(document, (0, 0), (1, 1)))
    table_node = get_table(state.doc)
    assert serialize(table_node) == [['abcd:2x2'], []]
    merged = table_node.child(0).child(0)
    assert [paragraph.text_content for paragraph in merged.children] == [
        'a', 'b', 'c', 'd']
    assert isinstance(state.selection, CellSelection)
    assert state.selection.anchor_cell.pos == 2


@assert_no_logs
def test_merge_cells_row():
    document = doc(table(
        tr(td('a'), td('b'), td('c')), tr(td('d'), td('e'), td('f'))))
    state = apply_command(merge_cells, select_cells(document, (1, 1), (1, 2)))
    assert serialize(get_table(state.doc)) == [
        ['a', 'b', 'c'], ['d', 'ef:2x1']]


@assert_no_logs
def test_merge_cells_skips_empty_content():
    document = doc(table(tr(td(), td('b'), td()), tr(td('c'), td(), td())))
    state = apply_command(merge_cells, select_cells(document, (0, 0), (0, 2)))
    table_node = get_table(state.doc)
    assert serialize(table_node) == [['b:3x1'], ['c', '', '']]
    assert table_node.child(0).child(0).child_count == 1


@assert_no_logs
def test_merge_cells_keeps_colwidth():
    document = doc(table(
        tr(td('a', colwidth=[40]), td('b', colwidth=[60])),
        tr(td('c'), td('d'))))
    state = apply_command(merge_cells, select_cells(document, (0, 0), (0, 1)))
    merged = get_table(state.doc).child(0).child(0)
    assert merged.attrs['colwidth'] == [40, 0]


@assert_no_logs
def test_merge_cells_spanning():
    document = doc(table(
        tr(td('a', rowspan=2), td('b')),
        tr(td('c')),
        tr(td('d'), td('e'))))
    state = apply_command(merge_cells, select_cells(document, (0, 0), (1, 1)))
    assert serialize(get_table(state.doc)) == [
        ['abc:2x2'], [], ['d', 'e']]


@assert_no_logs
def test_merge_cells_overlapping():
    document = doc(table(
        tr(td('a', colspan=2), td('b')),
        tr(td('c'), td('d'), td('e'))))
    state = select_cells(document, (0, 2), (1, 1))
    assert not merge_cells(state)
    assert apply_command(merge_cells, state) is None


@assert_no_logs
def test_merge_single_cell():
    document = doc(table(tr(td('a'))))
    state = cursor_in(document, 0, 0)
    assert merge_cells(state)
    assert apply_command(merge_cells, state).doc is document
    assert not split_cell(state)


@assert_no_logs
def test_merge_outside_table():
    document = doc(table(tr(td('a'))))
    assert not merge_cells(EditorState.create(document, 0))


@assert_no_logs
def test_split_cell():
    document = doc(table(
        tr(td('a', colspan=2, rowspan=2), td('b')),
        tr(td('c'))))
    state = apply_command(split_cell, cursor_in(document, 0, 0))
    table_node = get_table(state.doc)
    assert serialize(table_node) == [['a', '', 'b'], ['', '', 'c']]
    cells = [cell for row in table_node.children for cell in row.children]
    assert len(cells) == 6


@assert_no_logs
def test_split_header_cell():
    document = doc(table(tr(th('a', colspan=2)), tr(td('b'), td('c'))))
    state = apply_command(split_cell, cursor_in(document, 0, 0))
    assert serialize(get_table(state.doc)) == [['#a', '#'], ['b', 'c']]


@assert_no_logs
def test_split_cell_colwidth():
    document = doc(table(
        tr(td('a', colspan=2, colwidth=[40, 60])),
        tr(td('b'), td('c'))))
    state = apply_command(split_cell, cursor_in(document, 0, 0))
    first, second = get_table(state.doc).child(0).children
    assert first.attrs == {'colspan': 1, 'rowspan': 1, 'colwidth': [40]}
    assert second.attrs == {'colspan': 1, 'rowspan': 1, 'colwidth': [60]}


@assert_no_logs
def test_split_cell_selection():
    document = doc(table(tr(td('a', rowspan=2), td('b')), tr(td('c'))))
    state = apply_command(split_cell, select_cells(document, (0, 0)))
    assert serialize(get_table(state.doc)) == [['a', 'b'], ['', 'c']]
    assert isinstance(state.selection, CellSelection)
    texts = []
    state.selection.for_each_cell(
        lambda node, pos: texts.append(node.text_content))
    assert texts == ['a', '']


@assert_no_logs
def test_split_cell_with_type():
    def get_cell_type(node, row, col):
        return SCHEMA.nodes['table_header' if row == 0 else 'table_cell']

    document = doc(table(tr(td('a', colspan=2, rowspan=2)), tr()))
    state = apply_command(
        split_cell_with_type(get_cell_type), cursor_in(document, 0, 0))
    assert serialize(get_table(state.doc)) == [['#a', '#'], ['', '']]


@assert_no_logs
def test_split_refused():
    document = doc(table(
        tr(td('a', colspan=2), td('b')),
        tr(td('c'), td('d'), td('e'))))
    assert not split_cell(cursor_in(document, 0, 2))
    assert not split_cell(select_cells(document, (0, 0), (0, 2)))


@assert_no_logs
def test_set_cell_attr():
    document = doc(table(tr(td('a'), td('b'))))
    command = set_cell_attr('background', '#ff0')
    state = apply_command(command, cursor_in(document, 0, 1))
    first, second = get_table(state.doc).child(0).children
    assert 'background' not in first.attrs
    assert second.attrs['background'] == '#ff0'
    assert not command(cursor_in(state.doc, 0, 1))


@assert_no_logs
def test_set_cell_attr_selection():
    document = doc(table(tr(td('a', colwidth=[50]), td('b'))))
    command = set_cell_attr('colwidth', [50])
    state = apply_command(command, select_cells(document, (0, 1), (0, 0)))
    first, second = get_table(state.doc).child(0).children
    assert first.attrs['colwidth'] == second.attrs['colwidth'] == [50]


@assert_no_logs
def test_delete_cell_selection():
    document = doc(table(tr(td('a'), td('b'), td('c'))))
    state = apply_command(
        delete_cell_selection, select_cells(document, (0, 0), (0, 1)))
    assert serialize(get_table(state.doc)) == [['', '', 'c']]
    assert isinstance(state.selection, CellSelection)


@assert_no_logs
def test_delete_empty_cell_selection():
    document = doc(table(tr(td(), td())))
    transactions = []
    state = select_cells(document, (0, 0), (0, 1))
    assert delete_cell_selection(state, transactions.append)
    assert transactions == []
    assert not delete_cell_selection(cursor_in(document, 0, 0))


def test_split_cell_overlong_rowspan():
    # "c" spans a third row that has no node
    document = doc(table(
        tr(td('a'), td('b')),
        tr(td('c', rowspan=2), td('d', rowspan=2))))
    with capture_logs() as logs:
        state = apply_command(split_cell, cursor_in(document, 1, 0))
        table_map = TableMap.get(get_table(state.doc))
    assert serialize(get_table(state.doc)) == [['a', 'b'], ['c', 'd:1x2']]
    assert table_map.problems == [('missing', 2, None, 1)]
    assert len(logs) == 1
