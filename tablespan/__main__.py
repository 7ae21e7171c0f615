"""Command-line interface to TableSpan."""

import argparse
import platform
import sys

import cssselect2
import tinycss2
import tinyhtml5

from . import DEFAULT_OPTIONS, HTML, __version__
from .columns import TableView
from .logger import configure_logging
from .model.nodes import TableRole
from .tablemap import TableMap


def system_info():
    """Return the lines describing the system and the parsing libraries."""
    uname = platform.uname()
    return [
        f'System: {uname.system}',
        f'Machine: {uname.machine}',
        f'Version: {uname.version}',
        f'Release: {uname.release}',
        '',
        f'TableSpan version: {__version__}',
        f'Python version: {platform.python_version()}',
        *(f'{module.__name__} version: {module.__version__}'
          for module in (tinyhtml5, cssselect2, tinycss2))]


class PrintInfo(argparse.Action):
    def __call__(self, parser, *_):
        print('\n'.join(system_info()))  # noqa: T201
        parser.exit()


class Parser(argparse.ArgumentParser):
    """Argument parser documenting its own options with reST directives."""
    def __init__(self, *args, **kwargs):
        self._documented = []
        super().__init__(*args, **kwargs)

    def add_argument(self, *flags, **kwargs):
        action = super().add_argument(*flags, **kwargs)
        self._documented.append((flags, kwargs))
        return action

    @staticmethod
    def _option(flags, kwargs):
        name = flags[-1].lstrip('-')
        takes_value = (
            flags[-1].startswith('-') and
            kwargs.get('action', 'store') in ('store', 'append'))
        suffix = f' <{name}>' if takes_value else ''
        text = kwargs['help']
        return (
            '.. option:: ' + ', '.join(flag + suffix for flag in flags) +
            f'\n\n  {text[0].upper()}{text[1:]}.\n\n')

    @property
    def docstring(self):
        # The automatic --help option comes last
        help_option, *others = self._documented
        return ''.join(
            self._option(*option) for option in (*others, help_option))


PARSER = Parser(
    prog='tablespan', description='Show the grid of HTML tables.')
PARSER.add_argument(
    'input', help='filename of the HTML input, or - for stdin')
PARSER.add_argument(
    'output', nargs='?', default='-',
    help='filename where output is written, or - for stdout')
PARSER.add_argument(
    '-e', '--encoding', help='force the input character encoding')
PARSER.add_argument(
    '--default-cell-min-width', type=int, dest='default_cell_min_width',
    help='minimum width in pixels of columns with no stored width')
PARSER.add_argument(
    '-v', '--verbose', action='store_true',
    help='show warnings and information messages')
PARSER.add_argument(
    '-d', '--debug', action='store_true', help='show debugging messages')
PARSER.add_argument(
    '-q', '--quiet', action='store_true', help='hide logging messages')
PARSER.add_argument(
    '--version', action='version',
    version=f'TableSpan version {__version__}',
    help='print TableSpan’s version number and exit')
PARSER.add_argument(
    '-i', '--info', action=PrintInfo, nargs=0,
    help='print system information and exit')
PARSER.set_defaults(**DEFAULT_OPTIONS)


def describe_table(table, default_cell_min_width):
    """Return the lines describing the grid and the widths of a table."""
    table_map = TableMap.get(table)
    lines = [f'{table_map.width} columns, {table_map.height} rows']
    size = len(str(max(table_map.map, default=0)))
    width = table_map.width
    for row in range(table_map.height):
        slots = table_map.map[row * width:(row + 1) * width]
        lines.append(
            f'  row {row}: ' + ' '.join(f'{pos:>{size}}' for pos in slots))
    for problem in table_map.problems:
        lines.append(
            f'  problem: {problem.type} (row {problem.row}, '
            f'offset {problem.pos}, {problem.n})')
    view = TableView(table, default_cell_min_width)
    widths = ' '.join(
        f'{width:g}%' if width else 'auto' for width in view.column_widths)
    lines.append(f'  widths: {widths or "none"}')
    lines.append(f'  minimum width: {view.min_width}px')
    return lines


def main(argv=None, stdout=None, stdin=None, HTML=HTML):  # noqa: N803
    """The ``tablespan`` program takes at least one argument:

    .. code-block:: sh

        tablespan [options] <input> [<output>]

    """
    args = PARSER.parse_args(argv)

    if args.input == '-':
        source = stdin or sys.stdin.buffer
    else:
        source = args.input

    options = {
        key: value for key, value in vars(args).items()
        if key in DEFAULT_OPTIONS}

    # Default to logging to stderr.
    configure_logging(args.verbose, args.debug, args.quiet)

    state = HTML(source, encoding=args.encoding).build(**options)
    tables = [
        node for node in state.doc.children
        if node.type.role == TableRole.TABLE]
    lines = []
    for index, table in enumerate(tables, start=1):
        lines.append(f'Table {index}: ' + '\n'.join(
            describe_table(table, options['default_cell_min_width'])))
    text = '\n'.join(lines) + '\n' if lines else 'No table found\n'

    if args.output == '-':
        (stdout or sys.stdout).write(text)
    else:
        with open(args.output, 'w', encoding='utf-8') as output:
            output.write(text)


main.__doc__ += '\n\n' + PARSER.docstring


if __name__ == '__main__':  # pragma: no cover
    main()
