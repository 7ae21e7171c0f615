"""Commands toggling header cells."""

from ..model.nodes import TableRole, table_node_types
from ..model.rect import Rect
from ..rectangle import selected_rect
from ..util import is_in_table

TOGGLE_KINDS = ('row', 'column', 'cell')


def _deprecated_toggle_header(kind):
    """Toggle the selected rows, columns or cells between headers and cells.

    Header cells are turned into normal cells if there are any, otherwise
    all the cells become header cells.

    """
    def command(state, dispatch=None):
        if not is_in_table(state):
            return False
        if dispatch:
            types = table_node_types(state.schema)
            rect = selected_rect(state)
            table_map = rect.map
            tr = state.tr
            if kind == 'column':
                cells_rect = Rect(rect.left, 0, rect.right, table_map.height)
            elif kind == 'row':
                cells_rect = Rect(0, rect.top, table_map.width, rect.bottom)
            else:
                cells_rect = rect.rect
            cells = table_map.cells_in_rect(cells_rect)
            nodes = [rect.table.node_at(pos) for pos in cells]
            for pos, node in zip(cells, nodes):
                if node.type is types[TableRole.HEADER_CELL]:
                    tr.set_node_markup(
                        rect.table_start + pos, types[TableRole.CELL],
                        node.attrs)
            if not tr.steps:
                # No header removed, add them instead
                for pos, node in zip(cells, nodes):
                    tr.set_node_markup(
                        rect.table_start + pos, types[TableRole.HEADER_CELL],
                        node.attrs)
            dispatch(tr)
        return True
    return command


def _header_enabled(kind, rect, types):
    """Whether the first row or column only holds header cells."""
    table_map = rect.map
    cells = table_map.cells_in_rect(Rect(
        0, 0, table_map.width if kind == 'row' else 1,
        table_map.height if kind == 'column' else 1))
    return all(
        rect.table.node_at(pos).type is types[TableRole.HEADER_CELL]
        for pos in cells)


def toggle_header(kind, use_deprecated_logic=False):
    """Return a command toggling the header row, column or cells.

    ``kind`` is ``'row'``, ``'column'`` or ``'cell'``. Only the first row or
    column is toggled. When the other header is enabled, the corner cell
    they share is left unchanged. With ``use_deprecated_logic``, the rows,
    columns or cells of the selection are toggled instead.

    """
    if kind not in TOGGLE_KINDS:
        raise ValueError(f'Unknown header kind: {kind!r}')
    if use_deprecated_logic:
        return _deprecated_toggle_header(kind)

    def command(state, dispatch=None):
        if not is_in_table(state):
            return False
        if dispatch:
            types = table_node_types(state.schema)
            rect = selected_rect(state)
            table_map = rect.map
            tr = state.tr

            row_enabled = _header_enabled('row', rect, types)
            column_enabled = _header_enabled('column', rect, types)
            if kind == 'column':
                start = 1 if row_enabled else 0
                cells_rect = Rect(0, start, 1, table_map.height)
                new_type = types[
                    TableRole.CELL if column_enabled
                    else TableRole.HEADER_CELL]
            elif kind == 'row':
                start = 1 if column_enabled else 0
                cells_rect = Rect(start, 0, table_map.width, 1)
                new_type = types[
                    TableRole.CELL if row_enabled else TableRole.HEADER_CELL]
            else:
                cells_rect = rect.rect
                new_type = types[TableRole.CELL]

            for pos in table_map.cells_in_rect(cells_rect):
                cell_pos = rect.table_start + pos
                cell = tr.doc.node_at(cell_pos)
                if cell is not None:
                    tr.set_node_markup(cell_pos, new_type, cell.attrs)
            dispatch(tr)
        return True
    return command


#: Toggle whether the selected rows contain header cells.
toggle_header_row = toggle_header('row', use_deprecated_logic=True)

#: Toggle whether the selected columns contain header cells.
toggle_header_column = toggle_header('column', use_deprecated_logic=True)

#: Toggle whether the selected cells are header cells.
toggle_header_cell = toggle_header('cell', use_deprecated_logic=True)
