"""Turn HTML tables into document trees.

Only the structure useful for table editing is kept: top-level paragraphs,
tables, rows and cells with their paragraphs of text. Row groups are
flattened, header group first and footer group last.

Cell widths are read from ``data-colwidth`` (a comma-separated list of
percentages, one per spanned column) or from the percentage of the ``width``
declaration of the ``style`` attribute, shared between spanned columns.

"""

import re

import tinycss2

from ..logger import LOGGER
from .nodes import SCHEMA, TableRole, table_node_types

WHITESPACE = re.compile(r'\s+')
ROW_GROUPS = {'thead': 0, 'tbody': 1, 'tfoot': 2}


def _collapse(text):
    return WHITESPACE.sub(' ', text).strip()


def _has_ancestor(wrapper, names):
    return any(
        ancestor.local_name in names for ancestor in wrapper.iter_ancestors())


def _style_declarations(element):
    style = element.get('style')
    if not style:
        return
    for declaration in tinycss2.parse_declaration_list(
            style, skip_comments=True, skip_whitespace=True):
        if declaration.type == 'declaration':
            tokens = [
                token for token in declaration.value
                if token.type not in ('whitespace', 'comment')]
            if len(tokens) == 1:
                yield declaration.lower_name, tokens[0]


def _span(element, name, default=1):
    try:
        return int(element.get(name, '').strip())
    except (AttributeError, ValueError):
        return default


def _colwidth(element, colspan):
    """Get the list of column widths of a cell element, or ``None``."""
    data = element.get('data-colwidth')
    if data:
        try:
            widths = [float(width) for width in data.split(',')]
        except ValueError:
            LOGGER.warning('Ignored data-colwidth=%r: invalid number', data)
        else:
            if len(widths) == colspan:
                return widths
            LOGGER.warning(
                'Ignored data-colwidth=%r: %d values for colspan=%d',
                data, len(widths), colspan)
    for name, token in _style_declarations(element):
        if name != 'width':
            continue
        if token.type == 'percentage':
            return [token.value / colspan] * colspan
        LOGGER.warning(
            'Ignored cell width %r: only percentages are supported',
            tinycss2.serialize([token]))
    return None


def _table_width(element):
    for name, token in _style_declarations(element):
        if name == 'width':
            if token.type == 'dimension' and token.lower_unit == 'px':
                return token.value
            LOGGER.warning(
                'Ignored table width %r: only pixels are supported',
                tinycss2.serialize([token]))
    return None


def _paragraphs(wrapper, schema):
    """Build the paragraphs of a cell or a top-level paragraph."""
    paragraph_type = schema.nodes['paragraph']
    if wrapper.local_name == 'p':
        elements = [wrapper.etree_element]
    else:
        elements = [
            child.etree_element for child in wrapper.iter_children()
            if child.local_name == 'p']
        if not elements:
            elements = [wrapper.etree_element]
    paragraphs = []
    for element in elements:
        text = _collapse(''.join(element.itertext()))
        children = [schema.text(text)] if text else []
        paragraphs.append(paragraph_type.create(None, children))
    return paragraphs


def _rows(table):
    """Yield the row wrappers of a table, in rendering order."""
    groups = ([], [], [], [])
    for child in table.iter_children():
        if child.local_name == 'tr':
            groups[1].append(child)
        elif child.local_name in ROW_GROUPS:
            groups[ROW_GROUPS[child.local_name]].extend(
                row for row in child.iter_children() if row.local_name == 'tr')
    for rows in groups:
        yield from rows


def build_table(table, schema=SCHEMA):
    """Build a table node from a ``<table>`` element wrapper."""
    types = table_node_types(schema)
    rows = list(_rows(table))
    row_nodes = []
    for index, row in enumerate(rows):
        cells = []
        for cell in row.iter_children():
            if cell.local_name == 'td':
                cell_type = types[TableRole.CELL]
            elif cell.local_name == 'th':
                cell_type = types[TableRole.HEADER_CELL]
            else:
                continue
            element = cell.etree_element
            colspan = max(_span(element, 'colspan'), 1)
            rowspan = _span(element, 'rowspan')
            if rowspan == 0:
                # All the rows until the end of the table
                rowspan = len(rows) - index
            rowspan = max(rowspan, 1)
            attrs = {
                'colspan': colspan, 'rowspan': rowspan,
                'colwidth': _colwidth(element, colspan)}
            cells.append(cell_type.create(attrs, _paragraphs(cell, schema)))
        row_nodes.append(types[TableRole.ROW].create(None, cells))
    attrs = {'table_width': _table_width(table.etree_element)}
    return types[TableRole.TABLE].create(attrs, row_nodes)


def build_document(root, schema=SCHEMA):
    """Build a document node from the root element wrapper of an HTML tree.

    Tables nested in other tables are ignored.

    """
    children = []
    for wrapper in root.iter_subtree():
        if wrapper.local_name == 'table':
            if _has_ancestor(wrapper, ('table',)):
                LOGGER.warning('Ignored nested table')
                continue
            children.append(build_table(wrapper, schema))
        elif wrapper.local_name == 'p':
            if not _has_ancestor(wrapper, ('table', 'p')):
                children.extend(_paragraphs(wrapper, schema))
    return schema.nodes['doc'].create(None, children)
