"""Commands acting on whole tables."""

from ..model.nodes import TableRole
from ..selection import TextSelection
from ..util import is_in_table, selection_cell, text_position_in


def find_next_cell(resolved, direction):
    """Return the position of the cell before or after ``resolved``.

    ``resolved`` points right before a cell. Rows without cells are skipped.
    Return ``None`` when there's no cell in this direction.

    """
    if direction < 0:
        before = resolved.node_before
        if before is not None:
            return resolved.pos - before.node_size
        table = resolved.node(-1)
        row_end = resolved.before()
        for row in range(resolved.index(-1) - 1, -1, -1):
            row_node = table.child(row)
            if row_node.last_child is not None:
                return row_end - 1 - row_node.last_child.node_size
            row_end -= row_node.node_size
    else:
        if resolved.index() < resolved.parent.child_count - 1:
            return resolved.pos + resolved.node_after.node_size
        table = resolved.node(-1)
        row_start = resolved.after()
        for row in range(resolved.index_after(-1), table.child_count):
            row_node = table.child(row)
            if row_node.child_count:
                return row_start + 1
            row_start += row_node.node_size
    return None


def go_to_next_cell(direction):
    """Return a command selecting the content of the next or previous cell.

    ``direction`` is ``1`` for the next cell, ``-1`` for the previous one.

    """
    def command(state, dispatch=None):
        if not is_in_table(state):
            return False
        cell_pos = find_next_cell(selection_cell(state), direction)
        if cell_pos is None:
            return False
        if dispatch:
            doc = state.doc
            cell = doc.node_at(cell_pos)
            head = cell_pos + cell.node_size - 1
            if cell.last_child is not None and not cell.last_child.is_leaf:
                head -= 1
            selection = TextSelection.create(
                doc, text_position_in(doc, cell_pos), head)
            dispatch(state.tr.set_selection(selection))
        return True
    return command


def delete_table(state, dispatch=None):
    """Delete the table around the selection, if any."""
    resolved = state.selection.resolved_anchor
    for depth in range(resolved.depth, 0, -1):
        if resolved.node(depth).type.role == TableRole.TABLE:
            if dispatch:
                dispatch(state.tr.delete(
                    resolved.before(depth), resolved.after(depth)))
            return True
    return False
