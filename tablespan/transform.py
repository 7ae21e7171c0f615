"""Transactions: ordered structural steps with a position mapping.

Each step creates a new document and a :class:`StepMap` telling how
positions move. The maps of a transaction are accumulated in a
:class:`Mapping`, used to translate positions computed on an older document
to the current one:

.. code-block:: python

    start = tr.mapping.length
    tr.delete(a, b)
    tr.insert(tr.mapping.slice(start).map(c), node)

Replacements are limited to the child boundaries of a single parent node,
which is all the table algorithms need.

"""

from .model.nodes import Node


class StepMap:
    """Map of the positions changed by a single replacement.

    The ``old_size`` tokens starting at ``start`` are replaced by
    ``new_size`` tokens.

    """
    def __init__(self, start=0, old_size=0, new_size=0):
        self.start = start
        self.old_size = old_size
        self.new_size = new_size

    def __repr__(self):
        return f'<StepMap {self.start} -{self.old_size} +{self.new_size}>'

    def map(self, pos, assoc=1):
        """Return the new position of ``pos``.

        ``assoc`` tells on which side a position at a replaced range sticks:
        negative values stick to the start of the new content, positive
        values to its end.

        """
        start, end = self.start, self.start + self.old_size
        if pos < start or (not self.old_size and not self.new_size):
            return pos
        if pos > end:
            return pos - self.old_size + self.new_size
        if not self.old_size:
            side = assoc
        elif pos == start:
            side = -1
        elif pos == end:
            side = 1
        else:
            side = assoc
        return start + (0 if side < 0 else self.new_size)


class Mapping:
    """Composable list of step maps."""
    def __init__(self, maps=None):
        self.maps = list(maps or ())

    def __repr__(self):
        return f'<Mapping {self.maps!r}>'

    @property
    def length(self):
        return len(self.maps)

    def append_map(self, step_map):
        self.maps.append(step_map)

    def slice(self, start=0, end=None):
        """Return a mapping with the maps from ``start`` to ``end``."""
        return Mapping(self.maps[start:end])

    def map(self, pos, assoc=1):
        for step_map in self.maps:
            pos = step_map.map(pos, assoc)
        return pos


def _replace(node, start, end, nodes):
    """Return a copy of ``node`` with a range of its content replaced.

    ``start`` and ``end`` are positions relative to the content of
    ``node``. They have to be child boundaries of ``node`` or of one of its
    descendants.

    """
    index, offset = node.find_index(start)
    if index < node.child_count and offset < start:
        child = node.child(index)
        child_end = offset + child.node_size
        if end < child_end and not child.is_leaf:
            new_child = _replace(
                child, start - offset - 1, end - offset - 1, nodes)
            return node.replace_child(index, new_child)
        raise ValueError(
            f'Replacement from {start} to {end} is not on child boundaries')
    end_index, end_offset = node.find_index(end)
    if end_offset != end or end_index < index:
        raise ValueError(
            f'Replacement from {start} to {end} is not on child boundaries')
    return node.copy(
        node.children[:index] + tuple(nodes) + node.children[end_index:])


class ReplaceStep:
    """Replace the content between ``start`` and ``end`` with ``nodes``."""
    def __init__(self, start, end, nodes):
        self.start = start
        self.end = end
        self.nodes = tuple(nodes)

    def apply(self, doc):
        return _replace(doc, self.start, self.end, self.nodes)

    def get_map(self):
        return StepMap(
            self.start, self.end - self.start,
            sum(node.node_size for node in self.nodes))


class MarkupStep:
    """Change the type and attributes of the node at ``pos``."""
    def __init__(self, pos, type, attrs):
        self.pos = pos
        self.type = type
        self.attrs = attrs

    def apply(self, doc):
        node = doc.node_at(self.pos)
        new_node = Node(self.type, self.attrs, node.children, node.text)
        return _replace(doc, self.pos, self.pos + node.node_size, [new_node])

    def get_map(self):
        return StepMap()


class Transaction:
    """Ordered batch of steps applied to the document of an editor state."""
    def __init__(self, state):
        self.before = state.doc
        self.doc = state.doc
        self.steps = []
        self.mapping = Mapping()
        self.meta = {}
        self._selection = state.selection
        self._selection_for = 0

    @property
    def doc_changed(self):
        return bool(self.steps)

    @property
    def selection(self):
        """The selection, mapped through the steps added since it was set."""
        if self._selection_for < len(self.steps):
            self._selection = self._selection.map(
                self.doc, self.mapping.slice(self._selection_for))
            self._selection_for = len(self.steps)
        return self._selection

    def set_selection(self, selection):
        self._selection = selection
        self._selection_for = len(self.steps)
        return self

    def set_meta(self, key, value):
        self.meta[key] = value
        return self

    def get_meta(self, key):
        return self.meta.get(key)

    def step(self, step):
        self.doc = step.apply(self.doc)
        self.steps.append(step)
        self.mapping.append_map(step.get_map())
        return self

    def replace_with(self, start, end, nodes):
        if isinstance(nodes, Node):
            nodes = [nodes]
        return self.step(ReplaceStep(start, end, nodes))

    def insert(self, pos, nodes):
        return self.replace_with(pos, pos, nodes)

    def delete(self, start, end):
        return self.replace_with(start, end, ())

    def set_node_markup(self, pos, type=None, attrs=None):
        """Change the type and attributes of the node at ``pos``.

        ``type`` and ``attrs`` default to the current ones. New attributes
        are completed with the defaults of the node type.

        """
        node = self.doc.node_at(pos)
        if node is None:
            raise ValueError(f'No node at position {pos}')
        type = type or node.type
        attrs = type.compute_attrs(node.attrs if attrs is None else attrs)
        return self.step(MarkupStep(pos, type, attrs))
