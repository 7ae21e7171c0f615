"""Test the document trees built from HTML."""

import pytest

from tablespan import HTML
from tablespan.model.nodes import SCHEMA, Schema, TableRole, table_node_types
from tablespan.tablemap import TableMap
from tablespan.util import is_empty

from .testing_utils import (
    assert_no_logs, capture_logs, get_table, serialize, serialize_cell)


def build(html, **options):
    return HTML(string=html).build(**options).doc


@assert_no_logs
def test_build_simple_table():
    document = build('<table><tr><td>a<td>b<tr><td>c<td>d</table>')
    assert serialize(get_table(document)) == [['a', 'b'], ['c', 'd']]
    assert get_table(document).attrs['table_width'] is None


@assert_no_logs
def test_build_spans():
    document = build('''
      <table>
        <tr><td colspan=2 rowspan=2>a</td><td>b</td></tr>
        <tr><td>c</td></tr>
        <tr><td>d</td><td>e</td><td>f</td></tr>
      </table>
    ''')
    node = get_table(document)
    assert serialize(node) == [['a:2x2', 'b'], ['c'], ['d', 'e', 'f']]
    table_map = TableMap.get(node)
    assert (table_map.width, table_map.height) == (3, 3)


@assert_no_logs
def test_build_header_cells():
    document = build('<table><tr><th>a<td>b</table>')
    row = get_table(document).child(0)
    assert [cell.type.role for cell in row.children] == [
        TableRole.HEADER_CELL, TableRole.CELL]


@assert_no_logs
def test_build_row_groups():
    document = build('''
      <table>
        <tfoot><tr><td>foot</td></tr></tfoot>
        <tbody><tr><td>body</td></tr></tbody>
        <thead><tr><th>head</th></tr></thead>
        <tbody><tr><td>body 2</td></tr></tbody>
      </table>
    ''')
    assert serialize(get_table(document)) == [
        ['#head'], ['body'], ['body 2'], ['foot']]


@assert_no_logs
def test_build_rowspan_zero():
    document = build('''
      <table>
        <tr><td rowspan=0>a</td><td>b</td></tr>
        <tr><td>c</td></tr>
        <tr><td>d</td></tr>
      </table>
    ''')
    assert serialize(get_table(document)) == [['a:1x3', 'b'], ['c'], ['d']]


@assert_no_logs
@pytest.mark.parametrize('attributes, expected', (
    ('colspan=x rowspan=-2', 'a'),
    ('colspan=0', 'a'),
    ('colspan=" 2 "', 'a:2x1'),
))
def test_build_invalid_spans(attributes, expected):
    document = build(f'<table><tr><td {attributes}>a</table>')
    cell, = get_table(document).child(0).children
    assert serialize_cell(cell) == expected


@assert_no_logs
def test_build_data_colwidth():
    document = build(
        '<table><tr><td colspan=2 data-colwidth="20,30">a</table>')
    cell, = get_table(document).child(0).children
    assert cell.attrs['colwidth'] == [20, 30]


@assert_no_logs
def test_build_style_width():
    document = build(
        '<table><tr><td colspan=2 style="color: red; width: 50%">a</table>')
    cell, = get_table(document).child(0).children
    assert cell.attrs['colwidth'] == [25, 25]


@pytest.mark.parametrize('attributes, message', (
    ('colspan=2 data-colwidth="20"',
     "Ignored data-colwidth='20': 1 values for colspan=2"),
    ('data-colwidth="a"', "Ignored data-colwidth='a': invalid number"),
    ('style="width: 100px"',
     "Ignored cell width '100px': only percentages are supported"),
))
def test_build_invalid_widths(attributes, message):
    with capture_logs() as logs:
        document = build(f'<table><tr><td {attributes}>a</table>')
    assert logs == [f'WARNING: {message}']
    cell, = get_table(document).child(0).children
    assert cell.attrs['colwidth'] is None


@assert_no_logs
def test_build_table_width():
    document = build('<table style="width: 600px"><tr><td>a</table>')
    assert get_table(document).attrs['table_width'] == 600


def test_build_invalid_table_width():
    with capture_logs() as logs:
        document = build('<table style="width: 50%"><tr><td>a</table>')
    assert logs == [
        "WARNING: Ignored table width '50%': only pixels are supported"]
    assert get_table(document).attrs['table_width'] is None


@assert_no_logs
def test_build_paragraphs():
    document = build('''
      <p>Hello   <b>world</b></p>
      <table><tr>
        <td><p>one</p><p>two</p></td>
        <td>  spaced
          text </td>
        <td></td>
      </tr></table>
      <p></p>
    ''')
    first, node, last = document.children
    assert first.type.name == 'paragraph'
    assert first.text_content == 'Hello world'
    assert last.child_count == 0
    one_two, spaced, empty = node.child(0).children
    assert [child.text_content for child in one_two.children] == [
        'one', 'two']
    assert spaced.text_content == 'spaced text'
    assert is_empty(empty)
    assert not is_empty(spaced)


def test_build_nested_table():
    with capture_logs() as logs:
        document = build('''
          <table><tr><td>
            a<table><tr><td>b</td></tr></table>
          </td></tr></table>
        ''')
    assert logs == ['WARNING: Ignored nested table']
    assert [child.type.name for child in document.children] == ['table']


@assert_no_logs
def test_build_several_tables():
    document = build('''
      <table><tr><td>a</table>
      <p>between</p>
      <table><tr><td>b</table>
    ''')
    assert [child.type.name for child in document.children] == [
        'table', 'paragraph', 'table']
    assert serialize(get_table(document, 1)) == [['b']]


@assert_no_logs
def test_build_custom_schema():
    schema = Schema({
        'doc': {},
        'paragraph': {'textblock': True},
        'text': {'text': True},
        'grid': {'role': TableRole.TABLE, 'attrs': {'table_width': None}},
        'line': {'role': TableRole.ROW},
        'slot': {
            'role': TableRole.CELL, 'fill': 'paragraph',
            'attrs': {'colspan': 1, 'rowspan': 1, 'colwidth': None}},
        'title': {
            'role': TableRole.HEADER_CELL, 'fill': 'paragraph',
            'attrs': {'colspan': 1, 'rowspan': 1, 'colwidth': None}},
    })
    document = HTML(string='<table><tr><th>a<td>b</table>').build(schema)
    node, = document.doc.children
    assert node.type.name == 'grid'
    assert [cell.type.name for cell in node.child(0).children] == [
        'title', 'slot']


@assert_no_logs
def test_table_node_types():
    types = table_node_types(SCHEMA)
    assert types[TableRole.TABLE].name == 'table'
    assert types[TableRole.HEADER_CELL].name == 'table_header'
    with pytest.raises(ValueError):
        table_node_types(Schema({'doc': {}, 'text': {'text': True}}))


def test_build_unknown_option():
    with capture_logs() as logs:
        build('<table><tr><td>a</table>', color='red')
    assert logs == ['WARNING: Unknown option: color.']
