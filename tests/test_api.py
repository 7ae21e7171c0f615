"""Test the public API and the command-line interface."""

import io
import logging

import pytest

from tablespan import DEFAULT_OPTIONS, HTML, VERSION, __main__
from tablespan.logger import LOGGER, PROGRESS_LOGGER, configure_logging

from .testing_utils import assert_no_logs, capture_logs, resource_path

SIMPLE = b'<table><tr><td>a<td>b<tr><td colspan=2>c</table>'
SIMPLE_REPORT = '''\
Table 1: 2 columns, 2 rows
  row 0:  1  6
  row 1: 13 13
  widths: auto auto
  minimum width: 200px
'''


def _run(args, stdin=b''):
    stdin = io.BytesIO(stdin)
    stdout = io.StringIO()
    __main__.main(args.split(), stdin=stdin, stdout=stdout)
    return stdout.getvalue()


def _tables(html):
    return [
        node for node in html.build().doc.children
        if node.type.name == 'table']


@assert_no_logs
def test_html_parsing():
    filename = resource_path('tables.html')
    assert len(_tables(HTML(filename))) == 2
    assert len(_tables(HTML(str(filename)))) == 2
    assert len(_tables(HTML(filename=filename))) == 2
    with open(filename, 'rb') as fd:
        assert len(_tables(HTML(fd))) == 2
    with open(filename, 'rb') as fd:
        assert len(_tables(HTML(file_obj=fd))) == 2
    assert len(_tables(HTML(string=filename.read_text('utf-8')))) == 2
    assert len(_tables(HTML(file_obj=io.BytesIO(SIMPLE)))) == 1


@assert_no_logs
def test_html_encoding():
    source = '<table><tr><td>é</table>'.encode('latin-1')
    html = HTML(file_obj=io.BytesIO(source), encoding='latin-1')
    table, = _tables(html)
    assert table.text_content == 'é'


@assert_no_logs
@pytest.mark.parametrize('kwargs', (
    {}, {'filename': 'a.html', 'string': '<table>'},
    {'guess': 'a.html', 'file_obj': io.BytesIO()},
))
def test_html_source_error(kwargs):
    with pytest.raises(TypeError):
        HTML(**kwargs)


@assert_no_logs
def test_html_build_options():
    state = HTML(string=SIMPLE.decode()).build(**DEFAULT_OPTIONS)
    assert state.doc.child_count == 1


@assert_no_logs
def test_command_line_simple():
    assert _run('-', SIMPLE) == SIMPLE_REPORT


@assert_no_logs
def test_command_line_files(tmp_path):
    (tmp_path / 'in.html').write_bytes(SIMPLE)
    _run(f'{tmp_path / "in.html"} {tmp_path / "out.txt"}')
    assert (tmp_path / 'out.txt').read_text('utf-8') == SIMPLE_REPORT
    assert _run(f'{tmp_path / "in.html"} -') == SIMPLE_REPORT


@assert_no_logs
def test_command_line_several_tables():
    stdout = _run('-', resource_path('tables.html').read_bytes())
    assert stdout.startswith('Table 1: 3 columns, 2 rows\n')
    assert '\nTable 2: 2 columns, 1 rows\n' in stdout
    assert '  widths: 25% 75%\n' in stdout


@assert_no_logs
def test_command_line_widths():
    stdout = _run('-', (
        b'<table><tr>'
        b'<td data-colwidth="40">a<td>b<td>c'
        b'</table>'))
    assert '  widths: 33.333% 33.333% 33.334%\n' in stdout
    assert '  minimum width: 300px\n' in stdout


@assert_no_logs
def test_command_line_default_cell_min_width():
    stdout = _run('--default-cell-min-width 50 -', SIMPLE)
    assert '  minimum width: 100px\n' in stdout


@assert_no_logs
def test_command_line_no_table():
    assert _run('-', b'<p>No table here</p>') == 'No table found\n'


def test_command_line_empty_table():
    with capture_logs() as logs:
        stdout = _run('-q -', b'<table></table>')
    assert set(logs) == {
        'WARNING: Malformed table: zero_sized in row None at offset None (0)'}
    assert stdout == (
        'Table 1: 0 columns, 0 rows\n'
        '  problem: zero_sized (row None, offset None, 0)\n'
        '  widths: none\n'
        '  minimum width: 0px\n')


def test_command_line_malformed_table():
    with capture_logs() as logs:
        stdout = _run('-q -', b'<table><tr><td>a<td>b<tr><td>c</table>')
    assert set(logs) == {
        'WARNING: Malformed table: missing in row 1 at offset None (1)'}
    assert '  row 1: 13  0\n' in stdout
    assert '  problem: missing (row 1, offset None, 1)\n' in stdout


@assert_no_logs
@pytest.mark.parametrize('flag', ('-v', '-d', '-q', '--verbose', '--debug'))
def test_command_line_logging(flag):
    assert _run(f'{flag} -', SIMPLE) == SIMPLE_REPORT


@assert_no_logs
def test_command_line_version(capsys):
    with pytest.raises(SystemExit):
        _run('--version')
    assert VERSION in capsys.readouterr().out


@assert_no_logs
def test_command_line_info(capsys):
    with pytest.raises(SystemExit):
        _run('--info')
    out = capsys.readouterr().out
    assert f'TableSpan version: {VERSION}' in out
    assert 'tinyhtml5 version:' in out


@assert_no_logs
def test_main_docstring():
    option = '--default-cell-min-width <default-cell-min-width>'
    assert f'.. option:: {option}' in __main__.main.__doc__


def test_configure_logging():
    with capture_logs():
        assert configure_logging(quiet=True) is None
        assert LOGGER.level == logging.DEBUG
        configure_logging(verbose=True)
        assert LOGGER.level == logging.INFO
        handler = configure_logging(debug=True)
        assert LOGGER.level == logging.DEBUG
        assert handler in LOGGER.handlers
        assert 'funcName' in handler.formatter._fmt


def test_capture_logs_levels():
    with capture_logs(level=logging.DEBUG) as logs:
        LOGGER.debug('debug')
        LOGGER.warning('warning')
        PROGRESS_LOGGER.info('progress')
    assert logs == ['DEBUG: debug', 'WARNING: warning']
    with capture_logs() as logs:
        LOGGER.debug('debug')
        LOGGER.info('info %s', 1)
    assert logs == ['INFO: info 1']
