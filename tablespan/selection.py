"""Selections consumed by the table commands.

A selection is either a :class:`TextSelection`, holding resolved anchor and
head positions (equal for a cursor), or a :class:`CellSelection`, holding
the resolved positions of two cells of the same table. The rectangle between
the two cells is selected, whatever their order.

"""

from .model.nodes import TableRole
from .tablemap import TableMap


class Selection:
    """Abstract base class for selections."""
    def __init__(self, resolved_anchor, resolved_head):
        self.resolved_anchor = resolved_anchor
        self.resolved_head = resolved_head

    def __repr__(self):
        return f'<{type(self).__name__} {self.anchor}-{self.head}>'

    @property
    def anchor(self):
        return self.resolved_anchor.pos

    @property
    def head(self):
        return self.resolved_head.pos

    @property
    def from_(self):
        return min(self.anchor, self.head)

    @property
    def to(self):
        return max(self.anchor, self.head)

    @property
    def empty(self):
        return self.anchor == self.head

    def map(self, doc, mapping):
        raise NotImplementedError

    def eq(self, other):
        return (
            type(self) is type(other) and
            self.anchor == other.anchor and self.head == other.head)


class TextSelection(Selection):
    """Cursor or range of text."""
    def __init__(self, resolved_anchor, resolved_head=None):
        super().__init__(resolved_anchor, resolved_head or resolved_anchor)

    @classmethod
    def create(cls, doc, anchor, head=None):
        return cls(
            doc.resolve(anchor), doc.resolve(anchor if head is None else head))

    def map(self, doc, mapping):
        return TextSelection.create(
            doc, mapping.map(self.anchor), mapping.map(self.head))


def points_at_cell(resolved):
    parent = resolved.parent
    return (
        parent.type.role == TableRole.ROW and
        resolved.node_after is not None)


def in_same_table(resolved_a, resolved_b):
    return (
        resolved_a.depth == resolved_b.depth and
        resolved_b.start(-1) <= resolved_a.pos <= resolved_b.end(-1))


class CellSelection(Selection):
    """Rectangle of cells, between an anchor cell and a head cell.

    ``anchor_cell`` and ``head_cell`` are resolved positions pointing right
    before cell nodes of the same table.

    """
    def __init__(self, anchor_cell, head_cell=None):
        head_cell = head_cell or anchor_cell
        super().__init__(anchor_cell, head_cell)
        self.anchor_cell = anchor_cell
        self.head_cell = head_cell

    @classmethod
    def create(cls, doc, anchor_cell, head_cell=None):
        return cls(
            doc.resolve(anchor_cell),
            doc.resolve(anchor_cell if head_cell is None else head_cell))

    def map(self, doc, mapping):
        anchor_cell = doc.resolve(mapping.map(self.anchor_cell.pos))
        head_cell = doc.resolve(mapping.map(self.head_cell.pos))
        if (points_at_cell(anchor_cell) and points_at_cell(head_cell) and
                in_same_table(anchor_cell, head_cell)):
            return CellSelection(anchor_cell, head_cell)
        return TextSelection(anchor_cell)

    def cell_positions(self):
        """Return the absolute positions of the selected cells."""
        table = self.anchor_cell.node(-1)
        table_map = TableMap.get(table)
        start = self.anchor_cell.start(-1)
        rect = table_map.rect_between(
            self.anchor_cell.pos - start, self.head_cell.pos - start)
        return [start + pos for pos in table_map.cells_in_rect(rect)]

    def for_each_cell(self, function):
        """Call ``function(node, pos)`` for each selected cell."""
        doc = self.anchor_cell.doc
        for pos in self.cell_positions():
            function(doc.node_at(pos), pos)
