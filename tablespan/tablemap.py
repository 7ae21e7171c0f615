"""Geometry of tables.

A table is a list of rows holding cells, but cells can span several rows and
columns. :class:`TableMap` gives the dense grid of a table: for each
``(row, column)`` slot, the offset of the cell node covering it. Offsets are
relative to the start of the table content.

Because of colspan and rowspan, the map is not a bijection between slots and
cells: all the slots covered by a spanning cell share the same offset.

Maps are computed lazily and cached for each table node. Nodes are
immutable, editing a table creates a new table node and thus a new map.

"""

import weakref
from collections import namedtuple

from .logger import LOGGER
from .model.nodes import TableRole
from .model.rect import Rect

_CACHE = weakref.WeakKeyDictionary()

#: Inconsistency found while building a map. ``type`` is one of
#: ``'collision'``, ``'missing'`` and ``'zero_sized'``.
TableProblem = namedtuple('TableProblem', ('type', 'row', 'pos', 'n'))


class TableStructureError(ValueError):
    """The table tree is in a state that the map cannot address."""


class TableMap:
    """Grid of cell offsets for a table.

    ``map`` is a flat list of ``width * height`` offsets, the slot at
    ``(row, col)`` being at index ``row * width + col``. ``row_starts``
    holds the offset of each row, followed by the size of the table content.
    Rows only created by rowspans running past the last row node start at
    the end of the table content. Slots covered by no cell hold ``0``.

    """
    def __init__(self, width, height, map, row_starts, problems=None):
        self.width = width
        self.height = height
        self.map = map
        self.row_starts = row_starts
        self.problems = problems or []

    def __repr__(self):
        return f'<TableMap {self.width}x{self.height}>'

    @classmethod
    def get(cls, table):
        """Return the map of ``table``, computing it if needed."""
        table_map = _CACHE.get(table)
        if table_map is None:
            table_map = _CACHE[table] = compute_map(table)
        return table_map

    def find_cell(self, pos):
        """Return the rectangle covered by the cell at offset ``pos``."""
        for index, cell_pos in enumerate(self.map):
            if cell_pos != pos:
                continue
            left, top = index % self.width, index // self.width
            right, bottom = left + 1, top + 1
            while right < self.width and self.map[index + right - left] == pos:
                right += 1
            while (bottom < self.height and
                   self.map[index + (bottom - top) * self.width] == pos):
                bottom += 1
            return Rect(left, top, right, bottom)
        raise TableStructureError(f'No cell with offset {pos} found')

    def col_count(self, pos):
        """Return the first column covered by the cell at offset ``pos``."""
        for index, cell_pos in enumerate(self.map):
            if cell_pos == pos:
                return index % self.width
        raise TableStructureError(f'No cell with offset {pos} found')

    def rect_between(self, a, b):
        """Return the smallest rectangle covering the cells at ``a`` and ``b``.

        The rectangle only covers the two cells, it is not extended to the
        other cells it cuts through.

        """
        rect_a, rect_b = self.find_cell(a), self.find_cell(b)
        return Rect(
            min(rect_a.left, rect_b.left), min(rect_a.top, rect_b.top),
            max(rect_a.right, rect_b.right), max(rect_a.bottom, rect_b.bottom))

    def cells_in_rect(self, rect):
        """Return the offsets of the cells intersecting ``rect``.

        Offsets are given in row-major order of their first slot in the
        rectangle. Spanning cells are only given once, slots covered by no
        cell are skipped.

        """
        result = []
        seen = set()
        for row in range(rect.top, rect.bottom):
            for col in range(rect.left, rect.right):
                pos = self.map[row * self.width + col]
                if pos and pos not in seen:
                    seen.add(pos)
                    result.append(pos)
        return result

    def position_at(self, row, col):
        """Return the offset where a cell at ``(row, col)`` would start.

        Slots covered by cells coming from the rows above are skipped. When
        no cell of the row starts at or after ``col``, the offset of the end
        of the row is returned. Rows after the last row node give the end of
        the table content.

        """
        row_start, row_end = self.row_starts[row], self.row_starts[row + 1]
        if row_start == row_end:
            return row_end
        index = row * self.width + col
        row_end_index = (row + 1) * self.width
        while index < row_end_index and self.map[index] < row_start:
            index += 1
        return row_end - 1 if index == row_end_index else self.map[index]


def find_width(table):
    """Return the number of columns of ``table``.

    Each row counts the colspans of its cells and of the cells coming from
    the rows above through rowspans.

    """
    width = 0
    carried = []  # (last row, colspan) of cells spanning down
    for row, row_node in enumerate(table.children):
        carried = [
            (last_row, colspan) for last_row, colspan in carried
            if last_row >= row]
        row_width = sum(colspan for _, colspan in carried)
        for cell in row_node.children:
            colspan, rowspan = cell.attrs['colspan'], cell.attrs['rowspan']
            row_width += colspan
            if rowspan > 1:
                carried.append((row + rowspan - 1, colspan))
        width = max(width, row_width)
    return width


def compute_map(table):
    """Build the :class:`TableMap` of ``table``.

    Malformed tables are tolerated: the cells declared first win the slots
    they share with later cells, and the problems are logged. Rowspans
    running past the last row node add rows to the map, these rows have no
    node and start at the end of the table content.

    """
    if table.type.role != TableRole.TABLE:
        raise TableStructureError(f'Not a table node: {table!r}')
    row_count = table.child_count
    width = find_width(table)
    height = max([row_count] + [
        row + cell.attrs['rowspan']
        for row, row_node in enumerate(table.children)
        for cell in row_node.children])
    # Offset 0 is the start of the first row, no cell can start there.
    map = [0] * (width * height)
    problems = []
    row_starts = []
    map_pos = 0
    pos = 0
    for row, row_node in enumerate(table.children):
        row_starts.append(pos)
        pos += 1
        row_end_index = (row + 1) * width
        for cell in row_node.children:
            while map_pos < len(map) and map[map_pos] != 0:
                map_pos += 1
            if map_pos >= row_end_index:
                problems.append(TableProblem(
                    'collision', row, pos, cell.attrs['colspan']))
                pos += cell.node_size
                continue
            colspan, rowspan = cell.attrs['colspan'], cell.attrs['rowspan']
            for h in range(rowspan):
                start = map_pos + h * width
                for w in range(colspan):
                    if map_pos + w >= row_end_index:
                        problems.append(TableProblem(
                            'collision', row, pos, colspan - w))
                        break
                    if map[start + w] == 0:
                        map[start + w] = pos
                    else:
                        problems.append(TableProblem(
                            'collision', row, pos, colspan - w))
            map_pos = min(map_pos + colspan, row_end_index)
            pos += cell.node_size
        missing = 0
        while map_pos < row_end_index:
            if map[map_pos] == 0:
                missing += 1
            map_pos += 1
        if missing:
            problems.append(TableProblem('missing', row, None, missing))
        pos += 1
    for row in range(row_count, height):
        row_starts.append(pos)
        missing = map[row * width:(row + 1) * width].count(0)
        if missing:
            problems.append(TableProblem('missing', row, None, missing))
    row_starts.append(pos)
    if width == 0 or height == 0:
        problems.append(TableProblem('zero_sized', None, None, 0))
        width = height = 0
        map = []
    for problem in problems:
        LOGGER.warning(
            'Malformed table: %s in row %s at offset %s (%s)',
            problem.type, problem.row, problem.pos, problem.n)
    return TableMap(width, height, map, row_starts, problems)
