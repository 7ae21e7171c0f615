"""Commands merging, splitting and changing cells."""

from ..logger import LOGGER
from ..model.nodes import TableRole, table_node_types
from ..rectangle import cells_overlap_rectangle, selected_rect
from ..selection import CellSelection
from ..tablemap import TableMap
from ..util import (
    add_col_span, cell_around, is_empty, is_in_table, selection_cell)


def merge_cells(state, dispatch=None):
    """Merge the selected cells into a single cell.

    Only available when the outline of the selected cells forms a
    rectangle. The content of the non-empty cells is kept, in row-major
    order, in the top-left cell.

    When the selection already covers a single cell, the command succeeds
    without changing the document.

    """
    if not is_in_table(state):
        return False
    rect = selected_rect(state)
    table_map, table, table_start = rect.map, rect.table, rect.table_start
    if cells_overlap_rectangle(table_map, rect):
        LOGGER.debug('Refused to merge cells not forming a rectangle')
        return False
    cells = table_map.cells_in_rect(rect)
    if len(cells) < 2:
        return True
    if dispatch:
        tr = state.tr
        merged_pos, *other_cells = cells
        merged_cell = table.node_at(merged_pos)
        content = []
        map_from = tr.mapping.length
        for pos in other_cells:
            cell = table.node_at(pos)
            if not is_empty(cell):
                content.extend(cell.children)
            start = tr.mapping.slice(map_from).map(table_start + pos)
            tr.delete(start, start + cell.node_size)

        colspan = merged_cell.attrs['colspan']
        attrs = add_col_span(
            merged_cell.attrs, colspan, rect.right - rect.left - colspan)
        attrs['rowspan'] = rect.bottom - rect.top
        tr.set_node_markup(table_start + merged_pos, None, attrs)
        if content:
            end = merged_pos + 1 + merged_cell.content_size
            start = merged_pos + 1 if is_empty(merged_cell) else end
            tr.replace_with(table_start + start, table_start + end, content)
        tr.set_selection(
            CellSelection.create(tr.doc, table_start + merged_pos))
        dispatch(tr)
    return True


def split_cell(state, dispatch=None):
    """Split the selected spanning cell into cells of the same type."""
    def get_cell_type(node, row, col):
        return table_node_types(state.schema)[node.type.role]
    return split_cell_with_type(get_cell_type)(state, dispatch)


def split_cell_with_type(get_cell_type):
    """Return a command splitting the selected spanning cell.

    ``get_cell_type`` is called with the original cell node and the row and
    column of each created cell, and returns the node type of this cell.

    """
    def command(state, dispatch=None):
        selection = state.selection
        if isinstance(selection, CellSelection):
            if selection.anchor_cell.pos != selection.head_cell.pos:
                return False
            resolved = selection.anchor_cell
        else:
            resolved = cell_around(state.doc.resolve(selection.from_))
            if resolved is None:
                return False
        cell_node, cell_pos = resolved.node_after, resolved.pos
        if cell_node.attrs['colspan'] == cell_node.attrs['rowspan'] == 1:
            return False
        if dispatch:
            table = resolved.node(-1)
            table_start = resolved.start(-1)
            table_map = TableMap.get(table)
            rect = table_map.find_cell(cell_pos - table_start)

            colwidth = cell_node.attrs['colwidth']
            base_attrs = dict(cell_node.attrs, colspan=1, rowspan=1)
            attrs = []
            for i in range(rect.right - rect.left):
                if colwidth:
                    width = colwidth[i] if i < len(colwidth) else None
                    attrs.append(dict(
                        base_attrs, colwidth=[width] if width else None))
                else:
                    attrs.append(base_attrs)

            tr = state.tr
            last_cell = None
            for row in range(rect.top, min(rect.bottom, table.child_count)):
                pos = table_map.position_at(row, rect.left)
                if row == rect.top:
                    pos += cell_node.node_size
                for i, col in enumerate(range(rect.left, rect.right)):
                    if row == rect.top and col == rect.left:
                        continue
                    cell_type = get_cell_type(cell_node, row, col)
                    last_cell = tr.mapping.map(table_start + pos, 1)
                    tr.insert(last_cell, cell_type.create_and_fill(attrs[i]))
            tr.set_node_markup(
                cell_pos, get_cell_type(cell_node, rect.top, rect.left),
                attrs[0])
            if isinstance(selection, CellSelection):
                tr.set_selection(CellSelection.create(
                    tr.doc, selection.anchor_cell.pos, last_cell))
            dispatch(tr)
        return True
    return command


def set_cell_attr(name, value):
    """Return a command setting the attribute ``name`` of selected cells.

    The command is only available when the selected cell doesn't already
    have this attribute set to ``value``.

    """
    def command(state, dispatch=None):
        if not is_in_table(state):
            return False
        resolved = selection_cell(state)
        if resolved.node_after.attrs.get(name) == value:
            return False
        if dispatch:
            tr = state.tr
            if isinstance(state.selection, CellSelection):
                def set_attr(node, pos):
                    if node.attrs.get(name) != value:
                        tr.set_node_markup(
                            pos, None, dict(node.attrs, **{name: value}))
                state.selection.for_each_cell(set_attr)
            else:
                tr.set_node_markup(
                    resolved.pos, None,
                    dict(resolved.node_after.attrs, **{name: value}))
            dispatch(tr)
        return True
    return command


def delete_cell_selection(state, dispatch=None):
    """Delete the content of the selected cells, if they are not empty."""
    selection = state.selection
    if not isinstance(selection, CellSelection):
        return False
    if dispatch:
        tr = state.tr
        cell_type = table_node_types(state.schema)[TableRole.CELL]
        base_content = cell_type.create_and_fill().children

        def clear(cell, pos):
            if len(cell.children) == len(base_content) and all(
                    child.eq(base_child) for child, base_child
                    in zip(cell.children, base_content)):
                return
            tr.replace_with(
                tr.mapping.map(pos + 1),
                tr.mapping.map(pos + cell.node_size - 1), base_content)

        selection.for_each_cell(clear)
        if tr.doc_changed:
            dispatch(tr)
    return True
