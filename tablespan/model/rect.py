"""
    tablespan.model.rect
    --------------------

    Rectangles of grid slots, to use them easily without remembering which
    position in the tuple is left, top, right and bottom.

    Rectangles are half-open: ``right`` and ``bottom`` are the first column
    and row after the rectangle.

"""

from collections import namedtuple


class Rect(namedtuple('Rect', ('left', 'top', 'right', 'bottom'))):

    @property
    def width(self):
        return self.right - self.left

    @property
    def height(self):
        return self.bottom - self.top

    @property
    def area(self):
        return self.width * self.height


class TableRect(namedtuple(
        'TableRect',
        ('left', 'top', 'right', 'bottom', 'table_start', 'map', 'table'))):
    """Rectangle of a table, with its map, its node and its start."""

    @classmethod
    def from_rect(cls, rect, table_start, map, table):
        return cls(*rect, table_start, map, table)

    @property
    def rect(self):
        return Rect(self.left, self.top, self.right, self.bottom)
