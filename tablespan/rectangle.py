"""Rectangles of selected cells.

The structural commands act on the rectangle of grid slots covered by the
selection, given as a :class:`model.rect.TableRect` holding the table node,
its map and the absolute position where its content starts.

"""

from .model.rect import TableRect
from .selection import CellSelection
from .tablemap import TableMap
from .util import selection_cell


def selected_rect(state):
    """Return the :class:`TableRect` of the current selection.

    For a :class:`selection.CellSelection`, the rectangle covers the anchor
    and head cells. Otherwise, it covers the cell around the cursor.

    """
    selection = state.selection
    resolved = selection_cell(state)
    table = resolved.node(-1)
    table_start = resolved.start(-1)
    table_map = TableMap.get(table)
    if isinstance(selection, CellSelection):
        rect = table_map.rect_between(
            selection.anchor_cell.pos - table_start,
            selection.head_cell.pos - table_start)
    else:
        rect = table_map.find_cell(resolved.pos - table_start)
    return TableRect.from_rect(rect, table_start, table_map, table)


def cells_overlap_rectangle(table_map, rect):
    """Whether a cell on the border of ``rect`` continues outside of it."""
    width, height, map = table_map.width, table_map.height, table_map.map
    for row in range(rect.top, rect.bottom):
        index_left = row * width + rect.left
        index_right = row * width + rect.right - 1
        if rect.left > 0 and map[index_left] == map[index_left - 1]:
            return True
        if rect.right < width and map[index_right] == map[index_right + 1]:
            return True
    for col in range(rect.left, rect.right):
        index_top = rect.top * width + col
        index_bottom = (rect.bottom - 1) * width + col
        if rect.top > 0 and map[index_top] == map[index_top - width]:
            return True
        if (rect.bottom < height and
                map[index_bottom] == map[index_bottom + width]):
            return True
    return False
