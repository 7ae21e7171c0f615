"""Commands adding, removing and moving table columns."""

from ..logger import LOGGER
from ..model.nodes import TableRole, table_node_types
from ..model.rect import Rect
from ..rectangle import selected_rect
from ..selection import CellSelection
from ..tablemap import TableMap
from ..util import (
    add_col_span, column_is_header, is_in_table, refresh_rect,
    remove_col_span, table_around)


def add_column(tr, rect, col):
    """Add a column at index ``col`` of the table of ``rect``.

    Slots in the middle of a cell spanning several columns are not filled:
    the colspan of this cell is increased instead. Rows after the last row
    node get no cell.

    """
    table_map, table, table_start = rect.map, rect.table, rect.table_start
    types = table_node_types(table.type.schema)
    ref_column = -1 if col > 0 else 0
    if col + ref_column < table_map.width and column_is_header(
            table_map, table, col + ref_column):
        # Keep header columns at the edges of the table
        ref_column = None if col in (0, table_map.width) else 0

    map_from = tr.mapping.length
    row = 0
    while row < table.child_count:
        index = row * table_map.width + col
        if (0 < col < table_map.width and
                table_map.map[index - 1] == table_map.map[index]):
            pos = table_map.map[index]
            cell = table.node_at(pos)
            tr.set_node_markup(
                tr.mapping.slice(map_from).map(table_start + pos), None,
                add_col_span(cell.attrs, col - table_map.col_count(pos)))
            row += cell.attrs['rowspan']
            continue
        if ref_column is None:
            cell_type = types[TableRole.CELL]
        else:
            ref_pos = table_map.map[index + ref_column]
            cell_type = table.node_at(ref_pos).type
        pos = table_map.position_at(row, col)
        tr.insert(
            tr.mapping.slice(map_from).map(table_start + pos),
            cell_type.create_and_fill())
        row += 1
    return tr


def add_column_before(state, dispatch=None):
    """Add a column before the column with the selection."""
    if not is_in_table(state):
        return False
    if dispatch:
        rect = selected_rect(state)
        dispatch(add_column(state.tr, rect, rect.left))
    return True


def add_column_after(state, dispatch=None):
    """Add a column after the column with the selection."""
    if not is_in_table(state):
        return False
    if dispatch:
        rect = selected_rect(state)
        dispatch(add_column(state.tr, rect, rect.right))
    return True


def remove_column(tr, rect, col):
    """Remove the column at index ``col`` of the table of ``rect``.

    Cells spanning several columns lose one column, keeping the widths of
    their other columns.

    """
    table_map, table, table_start = rect.map, rect.table, rect.table_start
    width = table_map.width
    map_from = tr.mapping.length
    row = 0
    while row < table.child_count:
        index = row * width + col
        pos = table_map.map[index]
        if not pos:
            # No cell in this slot
            row += 1
            continue
        cell = table.node_at(pos)
        attrs = cell.attrs
        start = tr.mapping.slice(map_from).map(table_start + pos)
        if ((col > 0 and table_map.map[index - 1] == pos) or
                (col < width - 1 and table_map.map[index + 1] == pos)):
            tr.set_node_markup(
                start, None,
                remove_col_span(attrs, col - table_map.col_count(pos)))
        else:
            tr.delete(start, start + cell.node_size)
        row += attrs['rowspan']


def delete_column(state, dispatch=None):
    """Remove the selected columns from a table."""
    if not is_in_table(state):
        return False
    rect = selected_rect(state)
    if rect.left == 0 and rect.right == rect.map.width:
        LOGGER.debug('Refused to delete all the columns of a table')
        return False
    if dispatch:
        tr = state.tr
        for col in range(rect.right - 1, rect.left - 1, -1):
            remove_column(tr, rect, col)
            if col != rect.left:
                rect = refresh_rect(tr, rect)
        dispatch(tr)
    return True


def _column_is_crossed(table_map, col):
    """Whether a cell of ``col`` spans to the columns on its sides."""
    width = table_map.width
    for row in range(table_map.height):
        index = row * width + col
        if col > 0 and table_map.map[index] == table_map.map[index - 1]:
            return True
        if (col + 1 < width and
                table_map.map[index] == table_map.map[index + 1]):
            return True
    return False


def _column_boundary_is_cut(table_map, boundary):
    """Whether a cell spans across the boundary before column ``boundary``."""
    if boundary in (0, table_map.width):
        return False
    width = table_map.width
    return any(
        table_map.map[row * width + boundary] ==
        table_map.map[row * width + boundary - 1]
        for row in range(table_map.height))


def move_table_column(from_, to, select=True, pos=None):
    """Return a command moving the table column ``from_`` to index ``to``.

    The table is the one around ``pos``, by default the start of the
    selection. Columns crossed by spanning cells can't be moved, and can't
    be moved through spanning cells.

    """
    def command(state, dispatch=None):
        table, table_start = table_around(
            state.doc, state.selection.from_ if pos is None else pos)
        if table is None:
            return False
        table_map = TableMap.get(table)
        width = table_map.width
        if not (0 <= from_ < width and 0 <= to < width) or from_ == to:
            return False
        boundary = to + 1 if to > from_ else to
        if (_column_is_crossed(table_map, from_) or
                _column_boundary_is_cut(table_map, boundary)):
            LOGGER.debug(
                'Refused to move column %d across spanning cells', from_)
            return False
        if dispatch:
            tr = state.tr
            map_from = tr.mapping.length
            for row in range(table.child_count):
                index = row * width + from_
                cell_pos = table_map.map[index]
                if not cell_pos:
                    continue
                if row > 0 and cell_pos == table_map.map[index - width]:
                    # Moved with the row where the cell starts
                    continue
                cell = table.node_at(cell_pos)
                start = tr.mapping.slice(map_from).map(table_start + cell_pos)
                tr.delete(start, start + cell.node_size)
                target = table_map.position_at(row, boundary)
                tr.insert(
                    tr.mapping.slice(map_from).map(table_start + target), cell)
            if select:
                new_map = TableMap.get(tr.doc.node_at(table_start - 1))
                rect = Rect(to, 0, to + 1, new_map.height)
                cells = new_map.cells_in_rect(rect)
                tr.set_selection(CellSelection.create(
                    tr.doc, table_start + cells[0], table_start + cells[-1]))
            dispatch(tr)
        return True
    return command
