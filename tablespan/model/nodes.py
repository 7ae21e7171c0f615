"""Classes for the immutable nodes of the document tree.

A document is a tree of :class:`Node` objects. Each node has a
:class:`NodeType`, a dictionary of attributes and either children or, for
text nodes, a string.

Nodes are addressed by integer positions into a flattened token stream:

* a text node counts as many tokens as it has characters;
* a leaf node counts as one token;
* any other node counts as its content plus one opening and one closing
  token.

Position ``0`` is the start of the document content, before its first child.
Offsets used by the table code are relative to the start of the table
content: the first row starts at ``0`` and its first cell at ``1``.

Nodes are never modified in place. Edits create new nodes sharing the
untouched subtrees with the previous document, so that the identity of a
table node can be used as a cache key.

Table nodes are described by a closed set of roles, see :class:`TableRole`.
The schema maps each role to a concrete node type, see
:func:`table_node_types`.

"""

import enum


class TableRole(enum.Enum):
    """Role played by a node type in a table."""
    TABLE = 'table'
    ROW = 'row'
    CELL = 'cell'
    HEADER_CELL = 'header_cell'


#: Roles of the node types that can be used as table cells.
CELL_ROLES = (TableRole.CELL, TableRole.HEADER_CELL)


class NodeType:
    """Type of a node, shared by all the nodes of a given kind."""
    def __init__(self, name, schema, role=None, attrs=None, text=False,
                 textblock=False, leaf=False, fill=None):
        self.name = name
        self.schema = schema
        self.role = role
        self.default_attrs = dict(attrs or {})
        self.is_text = text
        self.is_textblock = textblock
        self.is_leaf = leaf or text
        # Name of the node type used to fill new nodes of this type.
        self.fill = fill

    def __repr__(self):
        return f'<NodeType {self.name}>'

    @property
    def is_cell(self):
        return self.role in CELL_ROLES

    def compute_attrs(self, attrs=None):
        """Return a new attributes dictionary, completed with defaults."""
        result = dict(self.default_attrs)
        if attrs:
            result.update(attrs)
        return result

    def create(self, attrs=None, children=()):
        """Create a node of this type."""
        if self.is_text:
            raise TypeError('Text nodes are created with Schema.text')
        return Node(self, self.compute_attrs(attrs), children)

    def create_and_fill(self, attrs=None, children=None):
        """Create a node of this type, with its required content."""
        if children is None:
            if self.fill is None:
                children = ()
            else:
                children = (self.schema.nodes[self.fill].create_and_fill(),)
        return self.create(attrs, children)


class Node:
    """Immutable node of the document tree."""
    def __init__(self, type, attrs, children=(), text=None):
        self.type = type
        self.attrs = attrs
        self.children = tuple(children)
        self.text = text
        if text is None:
            self.content_size = sum(child.node_size for child in self.children)
        else:
            self.content_size = 0

    def __repr__(self):
        if self.is_text:
            return f'<Node {self.type.name} {self.text!r}>'
        return f'<Node {self.type.name}>'

    @property
    def is_text(self):
        return self.type.is_text

    @property
    def is_textblock(self):
        return self.type.is_textblock

    @property
    def is_leaf(self):
        return self.type.is_leaf

    @property
    def node_size(self):
        if self.is_text:
            return len(self.text)
        elif self.is_leaf:
            return 1
        return self.content_size + 2

    @property
    def child_count(self):
        return len(self.children)

    @property
    def first_child(self):
        return self.children[0] if self.children else None

    @property
    def last_child(self):
        return self.children[-1] if self.children else None

    @property
    def text_content(self):
        if self.is_text:
            return self.text
        return ''.join(child.text_content for child in self.children)

    def child(self, index):
        return self.children[index]

    def descendants(self):
        """A flat generator for a node, its children and descendants."""
        yield self
        for child in self.children:
            yield from child.descendants()

    def copy(self, children):
        """Return a node with the same type and attributes, new children."""
        return Node(self.type, self.attrs, children)

    def replace_child(self, index, node):
        children = list(self.children)
        children[index] = node
        return self.copy(children)

    def cut(self, start, end=None):
        """Return a slice of a text node."""
        assert self.is_text
        return Node(self.type, self.attrs, text=self.text[start:end])

    def eq(self, other):
        """Whether two nodes have the same structure and attributes."""
        if self is other:
            return True
        return (
            self.type is other.type and
            self.attrs == other.attrs and
            self.text == other.text and
            len(self.children) == len(other.children) and
            all(child.eq(other_child) for child, other_child
                in zip(self.children, other.children)))

    def find_index(self, pos):
        """Return ``(index, offset)`` of the child around content ``pos``.

        ``offset`` is the position where the child starts. If ``pos`` is the
        end of the content, ``index`` is the number of children.

        """
        if pos == 0:
            return 0, 0
        if pos == self.content_size:
            return len(self.children), pos
        if not 0 < pos < self.content_size:
            raise ValueError(f'Position {pos} outside of {self!r}')
        offset = 0
        for index, child in enumerate(self.children):
            end = offset + child.node_size
            if end > pos:
                return index, offset
            offset = end

    def node_at(self, pos):
        """Return the node starting at content ``pos``, or ``None``."""
        node = self
        while True:
            index, offset = node.find_index(pos)
            if index >= node.child_count:
                return None
            node = node.children[index]
            if offset == pos or node.is_text:
                return node
            pos -= offset + 1

    def resolve(self, pos):
        """Return a :class:`positions.ResolvedPos` for ``pos``."""
        from .positions import ResolvedPos
        return ResolvedPos.resolve(self, pos)


class Schema:
    """Set of node types used to build documents."""
    def __init__(self, specs):
        self.nodes = {}
        for name, spec in specs.items():
            self.nodes[name] = NodeType(name, self, **spec)
        self.cached = {}

    def node(self, name, attrs=None, children=()):
        return self.nodes[name].create(attrs, children)

    def text(self, string):
        if not string:
            raise ValueError('Empty text nodes are not allowed')
        return Node(self.nodes['text'], {}, text=string)


CELL_ATTRS = {'colspan': 1, 'rowspan': 1, 'colwidth': None}

#: Node types of the default schema.
SCHEMA_SPECS = {
    'doc': {},
    'paragraph': {'textblock': True},
    'text': {'text': True},
    'table': {'role': TableRole.TABLE, 'attrs': {'table_width': None}},
    'table_row': {'role': TableRole.ROW},
    'table_cell': {
        'role': TableRole.CELL, 'attrs': CELL_ATTRS, 'fill': 'paragraph'},
    'table_header': {
        'role': TableRole.HEADER_CELL, 'attrs': CELL_ATTRS,
        'fill': 'paragraph'},
}

SCHEMA = Schema(SCHEMA_SPECS)


def table_node_types(schema):
    """Return a dictionary mapping each :class:`TableRole` to a node type."""
    if 'table_node_types' not in schema.cached:
        roles = {}
        for node_type in schema.nodes.values():
            if node_type.role is not None:
                roles[node_type.role] = node_type
        missing = set(TableRole) - set(roles)
        if missing:
            names = ', '.join(sorted(role.value for role in missing))
            raise ValueError(f'Schema has no node type for roles: {names}')
        schema.cached['table_node_types'] = roles
    return schema.cached['table_node_types']
