"""Resolved positions.

A resolved position knows the path of ancestors from the document node to
the deepest node around an integer position.

"""


class ResolvedPos:
    """A position with its ancestors, their indexes and their offsets.

    ``path`` is a list of ``(node, index, offset)`` tuples, one per depth:
    ``node`` is the ancestor at this depth, ``index`` the index of the child
    around the position, and ``offset`` the absolute position where this
    child starts.

    Methods taking a ``depth`` accept ``None`` for the deepest level and
    negative values counted from the deepest level.

    """
    def __init__(self, pos, path, parent_offset):
        self.pos = pos
        self.path = path
        self.parent_offset = parent_offset
        self.depth = len(path) - 1

    def __repr__(self):
        return f'<ResolvedPos {self.pos} depth={self.depth}>'

    @classmethod
    def resolve(cls, doc, pos):
        if not 0 <= pos <= doc.content_size:
            raise ValueError(f'Position {pos} out of range')
        path = []
        start = 0
        parent_offset = pos
        node = doc
        while True:
            index, offset = node.find_index(parent_offset)
            rem = parent_offset - offset
            path.append((node, index, start + offset))
            if not rem:
                break
            node = node.child(index)
            if node.is_text:
                break
            parent_offset = rem - 1
            start += offset + 1
        return cls(pos, path, parent_offset)

    def _depth(self, depth):
        if depth is None:
            return self.depth
        if depth < 0:
            return self.depth + depth
        return depth

    @property
    def parent(self):
        return self.node(self.depth)

    @property
    def doc(self):
        return self.node(0)

    def node(self, depth=None):
        return self.path[self._depth(depth)][0]

    def index(self, depth=None):
        return self.path[self._depth(depth)][1]

    def index_after(self, depth=None):
        depth = self._depth(depth)
        if depth == self.depth and not self.text_offset:
            return self.index(depth)
        return self.index(depth) + 1

    def start(self, depth=None):
        depth = self._depth(depth)
        return 0 if depth == 0 else self.path[depth - 1][2] + 1

    def end(self, depth=None):
        depth = self._depth(depth)
        return self.start(depth) + self.node(depth).content_size

    def before(self, depth=None):
        depth = self._depth(depth)
        if not depth:
            raise ValueError('There is no position before the top-level node')
        if depth == self.depth + 1:
            return self.pos
        return self.path[depth - 1][2]

    def after(self, depth=None):
        depth = self._depth(depth)
        if not depth:
            raise ValueError('There is no position after the top-level node')
        if depth == self.depth + 1:
            return self.pos
        return self.path[depth - 1][2] + self.node(depth).node_size

    @property
    def text_offset(self):
        return self.pos - self.path[-1][2]

    @property
    def node_after(self):
        parent = self.parent
        index = self.index()
        if index == parent.child_count:
            return None
        child = parent.child(index)
        offset = self.text_offset
        return child.cut(offset) if offset else child

    @property
    def node_before(self):
        parent = self.parent
        index = self.index()
        offset = self.text_offset
        if offset:
            return parent.child(index).cut(0, offset)
        return parent.child(index - 1) if index else None
