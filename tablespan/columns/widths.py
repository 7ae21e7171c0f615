"""Distribution of column widths.

Column widths are stored in the ``colwidth`` attribute of cells, as
percentages of the table width, one value per spanned column. ``0`` or a
missing value means that the width of the column is not specified.

See https://www.w3.org/TR/CSS21/tables.html#fixed-table-layout for the way
renderers distribute the widths of tables whose columns have widths.

"""

import math

from ..logger import LOGGER
from ..tablemap import TableMap


def round_to(value, digits=3):
    """Round ``value`` half up, keeping ``digits`` decimals."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value, minimum, maximum):
    return max(minimum, min(maximum, value))


def distribute_column_widths(raw_widths):
    """Turn raw column widths into percentages whose sum is 100.

    Columns with no specified width get the average width of the specified
    columns. All the columns but the last are rounded to 3 decimals, the
    last one gets what's left.

    When no width is specified, the raw widths are returned unchanged,
    letting the renderer share the width evenly.

    """
    raw_widths = list(raw_widths)
    specified = [width for width in raw_widths if width and width > 0]
    if not specified:
        return raw_widths
    base = sum(specified) / len(specified)
    weights = [width if width and width > 0 else base for width in raw_widths]
    total = sum(weights)

    percents = []
    accumulated = 0
    for weight in weights[:-1]:
        percent = round_to(weight / total * 100)
        accumulated += percent
        percents.append(percent)
    percents.append(max(0, 100 - accumulated))
    return percents


def column_raw_widths(table, overrides=None):
    """Return the raw width of each column of ``table``.

    Widths are read from the cells of the first row. ``overrides`` is a
    dictionary mapping column indexes to widths replacing the stored ones.

    """
    overrides = overrides or {}
    raw_widths = []
    if table.child_count:
        for cell in table.first_child.children:
            colwidth = cell.attrs.get('colwidth') or ()
            for index in range(cell.attrs['colspan']):
                col = len(raw_widths)
                if col in overrides:
                    width = overrides[col]
                elif index < len(colwidth):
                    width = colwidth[index]
                else:
                    width = None
                raw_widths.append(
                    width if isinstance(width, (int, float)) else 0)
    # Missing cells in the first row give unspecified columns
    width = TableMap.get(table).width
    raw_widths.extend([0] * (width - len(raw_widths)))
    return raw_widths


def column_pixel_widths(table, table_width_px, measured_widths=None):
    """Return the pixel width of each column of ``table``.

    Stored percentages are used when available. Other columns use the
    ``measured_widths`` list when given, or share what's left evenly.

    """
    raw_widths = column_raw_widths(table)
    if measured_widths is not None:
        return [
            width / 100 * table_width_px if width else measured
            for width, measured in zip(raw_widths, measured_widths)]
    percents = distribute_column_widths(raw_widths)
    if not percents:
        return []
    if not any(percents):
        return [table_width_px / len(percents)] * len(percents)
    return [percent / 100 * table_width_px for percent in percents]


class TableView:
    """Column widths of a table, as displayed by a renderer.

    ``column_widths`` is the list of percentages of the columns, ``0``
    meaning that the renderer can choose. ``min_width`` is the minimum width
    of the table in pixels.

    """
    def __init__(self, node, default_cell_min_width=100):
        self.node = node
        self.default_cell_min_width = default_cell_min_width
        self.column_widths = []
        self._update_columns()

    def __repr__(self):
        return f'<TableView {self.column_widths!r}>'

    def _update_columns(self, overrides=None):
        self.column_widths = distribute_column_widths(
            column_raw_widths(self.node, overrides))

    @property
    def min_width(self):
        return len(self.column_widths) * self.default_cell_min_width

    @property
    def column_styles(self):
        """CSS declarations for the ``<col>`` elements of the table."""
        return [
            f'width: {width}%' if width else ''
            for width in self.column_widths]

    def update(self, node):
        """Follow a new version of the table node.

        Return ``False`` if ``node`` can't be displayed by this view.

        """
        if node.type is not self.node.type:
            return False
        if node is not self.node:
            self.node = node
            self._update_columns()
        return True

    def display(self, overrides):
        """Display temporary widths, used while columns are resized."""
        self._update_columns(overrides)
        return self.column_widths


def update_column_widths(tr, ctx, widths_by_col):
    """Store the percentages of ``widths_by_col`` in the cells of ``ctx``.

    ``ctx`` has the ``table``, ``map`` and ``table_start`` attributes of a
    :class:`model.rect.TableRect`. ``widths_by_col`` maps column indexes to
    percentages. Each cell is changed once, even if it spans several
    resized columns.

    """
    table, table_map, table_start = ctx.table, ctx.map, ctx.table_start
    updates = {}
    for col, percent in widths_by_col.items():
        if not 0 <= col < table_map.width:
            LOGGER.warning('Ignored width of column %d: no such column', col)
            continue
        for row in range(table_map.height):
            index = row * table_map.width + col
            pos = table_map.map[index]
            if not pos or (
                    row and pos == table_map.map[index - table_map.width]):
                continue
            cell = table.node_at(pos)
            attrs = cell.attrs
            index_in_cell = (
                0 if attrs['colspan'] == 1 else col - table_map.col_count(pos))
            if pos in updates:
                colwidth = updates[pos][1]
            elif attrs['colwidth']:
                colwidth = list(attrs['colwidth'])
                colwidth.extend([0] * (attrs['colspan'] - len(colwidth)))
            else:
                colwidth = [0] * attrs['colspan']
            if colwidth[index_in_cell] == percent:
                continue
            colwidth[index_in_cell] = percent
            updates[pos] = (attrs, colwidth)
    for pos, (attrs, colwidth) in updates.items():
        tr.set_node_markup(
            table_start + pos, None, dict(attrs, colwidth=colwidth))
    return tr


def update_table_width(tr, table_pos, width_px):
    """Store the pixel width of the table starting at ``table_pos``."""
    table = tr.doc.node_at(table_pos)
    if table is None:
        raise ValueError(f'No table at position {table_pos}')
    if table.attrs.get('table_width') != width_px:
        tr.set_node_markup(
            table_pos, None, dict(table.attrs, table_width=width_px))
    return tr
