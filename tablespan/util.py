"""Various utility functions for table cells and selections."""

from .model.nodes import CELL_ROLES, TableRole, table_node_types
from .selection import (  # noqa: F401
    CellSelection, in_same_table, points_at_cell)
from .tablemap import TableMap, TableStructureError


def cell_around(resolved):
    """Return the resolved position right before the cell around ``resolved``.

    Return ``None`` when the position is not in a table cell.

    """
    for depth in range(resolved.depth - 1, 0, -1):
        if resolved.node(depth).type.role == TableRole.ROW:
            return resolved.doc.resolve(resolved.before(depth + 1))
    return None


def cell_near(resolved):
    """Return the resolved position of the cell right after or before.

    Descend into the first children after ``resolved``, then into the last
    children before it, until a cell is found. Return ``None`` otherwise.

    """
    pos, node = resolved.pos, resolved.node_after
    while node is not None and not node.is_leaf:
        if node.type.role in CELL_ROLES:
            return resolved.doc.resolve(pos)
        pos, node = pos + 1, node.first_child
    pos, node = resolved.pos, resolved.node_before
    while node is not None and not node.is_leaf:
        if node.type.role in CELL_ROLES:
            return resolved.doc.resolve(pos - node.node_size)
        pos, node = pos - 1, node.last_child
    return None


def cell_wrapping(resolved):
    """Return the cell node around ``resolved``, or ``None``."""
    for depth in range(resolved.depth, 0, -1):
        node = resolved.node(depth)
        if node.type.role in CELL_ROLES:
            return node
    return None


def is_in_table(state):
    """Whether the head of the selection is in a table row."""
    resolved = state.selection.resolved_head
    return any(
        resolved.node(depth).type.role == TableRole.ROW
        for depth in range(resolved.depth, 0, -1))


def selection_cell(state):
    """Return the resolved position of the cell holding the selection.

    For cell selections, the cell of the anchor or of the head that comes
    last in the document is returned. A cursor between cells gets the cell
    right after it, or right before it at the end of a row.

    """
    selection = state.selection
    if isinstance(selection, CellSelection):
        if selection.anchor_cell.pos > selection.head_cell.pos:
            return selection.anchor_cell
        return selection.head_cell
    resolved = (
        cell_around(selection.resolved_head) or
        cell_near(selection.resolved_head))
    if resolved is None:
        raise ValueError(f'No cell found around position {selection.head}')
    return resolved


def move_cell_forward(resolved):
    """Return the resolved position after the cell ``resolved`` points at."""
    return resolved.doc.resolve(resolved.pos + resolved.node_after.node_size)


def text_position_in(doc, cell_pos):
    """Return the first position inside the first textblock of a cell."""
    node = doc.node_at(cell_pos)
    pos = cell_pos + 1
    while not node.is_textblock and node.child_count:
        node = node.first_child
        if node.is_leaf:
            break
        pos += 1
    return pos


def remove_col_span(attrs, pos, n=1):
    """Return new cell attributes, with ``n`` columns removed at ``pos``.

    ``pos`` is the index of the first removed column in the cell. The
    widths of the other columns are kept.

    """
    result = dict(attrs, colspan=attrs['colspan'] - n)
    if result.get('colwidth'):
        colwidth = list(result['colwidth'])
        del colwidth[pos:pos + n]
        result['colwidth'] = colwidth if any(
            width and width > 0 for width in colwidth) else None
    return result


def add_col_span(attrs, pos, n=1):
    """Return new cell attributes, with ``n`` columns added at ``pos``.

    New columns get an unspecified width.

    """
    result = dict(attrs, colspan=attrs['colspan'] + n)
    if result.get('colwidth'):
        colwidth = list(result['colwidth'])
        colwidth[pos:pos] = [0] * n
        result['colwidth'] = colwidth
    return result


def column_is_header(map, table, col):
    """Whether all the cells of column ``col`` are header cells."""
    header_cell = table_node_types(table.type.schema)[TableRole.HEADER_CELL]
    return all(
        table.node_at(map.map[col + row * map.width]).type is header_cell
        for row in range(map.height))


def row_is_header(map, table, row):
    """Whether all the cells of row ``row`` are header cells."""
    header_cell = table_node_types(table.type.schema)[TableRole.HEADER_CELL]
    return all(
        table.node_at(map.map[col + row * map.width]).type is header_cell
        for col in range(map.width))


def is_empty(cell):
    """Whether ``cell`` only holds an empty textblock."""
    return (
        cell.child_count == 1 and cell.first_child.is_textblock and
        cell.first_child.child_count == 0)


def table_around(doc, pos):
    """Return ``(table, table_start)`` for the table around ``pos``.

    Return ``(None, None)`` when ``pos`` is not in a table.

    """
    resolved = doc.resolve(pos)
    for depth in range(resolved.depth, 0, -1):
        if resolved.node(depth).type.role == TableRole.TABLE:
            return resolved.node(depth), resolved.start(depth)
    return None, None


def refresh_rect(tr, rect):
    """Return ``rect`` with the table and the map of the current document.

    The table is supposed to start at the same position as before.

    """
    table = tr.doc.node_at(rect.table_start - 1)
    if table is None or table.type.role != TableRole.TABLE:
        raise TableStructureError(
            f'No table found at position {rect.table_start - 1}')
    return rect._replace(table=table, map=TableMap.get(table))
