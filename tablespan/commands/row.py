"""Commands adding, removing and moving table rows."""

from ..logger import LOGGER
from ..model.nodes import TableRole, table_node_types
from ..model.rect import Rect
from ..rectangle import selected_rect
from ..selection import CellSelection
from ..tablemap import TableMap
from ..util import is_in_table, refresh_rect, row_is_header, table_around


def add_row(tr, rect, row):
    """Add a row at index ``row`` of the table of ``rect``.

    Slots covered by a cell spanning from the rows above and to the rows
    below are not filled: the rowspan of this cell is increased instead.
    Indexes after the last row node add the row at the end of the table.

    """
    table_map, table, table_start = rect.map, rect.table, rect.table_start
    types = table_node_types(table.type.schema)
    row = min(row, table.child_count)
    row_pos = table_start + sum(
        table.child(index).node_size for index in range(row))
    ref_row = -1 if row > 0 else 0
    if row + ref_row < table_map.height and row_is_header(
            table_map, table, row + ref_row):
        # Keep header rows at the edges of the table
        ref_row = None if row in (0, table.child_count) else 0
    cells = []
    col = 0
    width = table_map.width
    while col < width:
        index = row * width + col
        if (0 < row < table_map.height and table_map.map[index] and
                table_map.map[index] == table_map.map[index - width]):
            pos = table_map.map[index]
            attrs = table.node_at(pos).attrs
            tr.set_node_markup(
                table_start + pos, None,
                dict(attrs, rowspan=attrs['rowspan'] + 1))
            col += attrs['colspan']
            continue
        if ref_row is None:
            cell_type = types[TableRole.CELL]
        else:
            ref_index = index + ref_row * width
            cell_type = table.node_at(table_map.map[ref_index]).type
        cells.append(cell_type.create_and_fill())
        col += 1
    tr.insert(row_pos, types[TableRole.ROW].create(None, cells))
    return tr


def add_row_before(state, dispatch=None):
    """Add a table row before the selection."""
    if not is_in_table(state):
        return False
    if dispatch:
        rect = selected_rect(state)
        dispatch(add_row(state.tr, rect, rect.top))
    return True


def add_row_after(state, dispatch=None):
    """Add a table row after the selection."""
    if not is_in_table(state):
        return False
    if dispatch:
        rect = selected_rect(state)
        dispatch(add_row(state.tr, rect, rect.bottom))
    return True


def remove_row(tr, rect, row):
    """Remove the row at index ``row`` of the table of ``rect``.

    Cells spanning from the rows above lose one row. Cells starting in the
    removed row and spanning to the rows below are moved to the next row,
    or removed when the rows below only come from overlong rowspans.

    """
    table_map, table, table_start = rect.map, rect.table, rect.table_start
    width = table_map.width
    row_pos = table_map.row_starts[row]
    next_row = row_pos + table.child(row).node_size

    map_from = tr.mapping.length
    tr.delete(row_pos + table_start, next_row + table_start)

    seen = set()
    col = 0
    while col < width:
        index = row * width + col
        pos = table_map.map[index]
        if pos in seen:
            col += 1
            continue
        seen.add(pos)
        cell = table.node_at(pos)
        attrs = cell.attrs
        if row > 0 and pos == table_map.map[index - width]:
            # Starts in the row above, reduce its rowspan
            tr.set_node_markup(
                tr.mapping.slice(map_from).map(table_start + pos), None,
                dict(attrs, rowspan=attrs['rowspan'] - 1))
            col += attrs['colspan']
        elif (row + 1 < table.child_count and
                pos == table_map.map[index + width]):
            # Continues in the row below, move it down
            copy = cell.type.create(
                dict(attrs, rowspan=attrs['rowspan'] - 1), cell.children)
            new_pos = table_map.position_at(row + 1, col)
            tr.insert(
                tr.mapping.slice(map_from).map(table_start + new_pos), copy)
            col += attrs['colspan']
        else:
            col += 1


def delete_row(state, dispatch=None):
    """Remove the selected rows from a table.

    Removing all the rows of a table is not possible, use
    :func:`commands.table.delete_table` instead.

    """
    if not is_in_table(state):
        return False
    rect = selected_rect(state)
    bottom = min(rect.bottom, rect.table.child_count)
    if rect.top == 0 and bottom == rect.table.child_count:
        LOGGER.debug('Refused to delete all the rows of a table')
        return False
    if dispatch:
        tr = state.tr
        for row in range(bottom - 1, rect.top - 1, -1):
            remove_row(tr, rect, row)
            if row != rect.top:
                rect = refresh_rect(tr, rect)
        dispatch(tr)
    return True


def _row_is_crossed(table_map, row):
    """Whether a cell of ``row`` spans to the rows above or below."""
    width = table_map.width
    for col in range(width):
        index = row * width + col
        if row > 0 and table_map.map[index] == table_map.map[index - width]:
            return True
        if (row + 1 < table_map.height and
                table_map.map[index] == table_map.map[index + width]):
            return True
    return False


def _row_boundary_is_cut(table_map, boundary):
    """Whether a cell spans across the boundary before row ``boundary``."""
    if boundary in (0, table_map.height):
        return False
    width = table_map.width
    return any(
        table_map.map[boundary * width + col] ==
        table_map.map[(boundary - 1) * width + col]
        for col in range(width))


def move_table_row(from_, to, select=True, pos=None):
    """Return a command moving the table row ``from_`` to index ``to``.

    The table is the one around ``pos``, by default the start of the
    selection. Rows crossed by spanning cells can't be moved, and can't be
    moved through spanning cells.

    """
    def command(state, dispatch=None):
        table, table_start = table_around(
            state.doc, state.selection.from_ if pos is None else pos)
        if table is None:
            return False
        table_map = TableMap.get(table)
        row_count = table.child_count
        if not (0 <= from_ < row_count and 0 <= to < row_count):
            return False
        if from_ == to:
            return False
        boundary = to + 1 if to > from_ else to
        if (_row_is_crossed(table_map, from_) or
                _row_boundary_is_cut(table_map, boundary)):
            LOGGER.debug('Refused to move row %d across spanning cells', from_)
            return False
        if dispatch:
            tr = state.tr
            row_node = table.child(from_)
            row_start = table_start + table_map.row_starts[from_]
            target = table_start + table_map.row_starts[boundary]
            map_from = tr.mapping.length
            tr.delete(row_start, row_start + row_node.node_size)
            tr.insert(tr.mapping.slice(map_from).map(target), row_node)
            if select:
                new_table = tr.doc.node_at(table_start - 1)
                new_map = TableMap.get(new_table)
                rect = Rect(0, to, new_map.width, to + 1)
                cells = new_map.cells_in_rect(rect)
                tr.set_selection(CellSelection.create(
                    tr.doc, table_start + cells[0], table_start + cells[-1]))
            dispatch(tr)
        return True
    return command
