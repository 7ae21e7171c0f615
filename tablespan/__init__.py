"""Structural editing of tables with spanning cells.

The classes needed to load, edit and display tables are importable from
here, sub-modules hold the commands and the lower-level helpers.

"""

import contextlib
from pathlib import Path

import cssselect2
import tinyhtml5

VERSION = __version__ = '1.0.0'

#: Options shared by :meth:`HTML.build`, :class:`ColumnResizing` and the
#: command line, see :func:`__main__.main` for the command-line flags.
#:
#: :param int handle_width:
#:     Distance in pixels from a cell border where the resize handle is
#:     active.
#: :param int cell_min_width:
#:     Minimum width of a resized column, in pixels.
#: :param int default_cell_min_width:
#:     Minimum width of columns with no stored width, in pixels.
#: :param bool last_column_resizable:
#:     Whether the right edge of tables can be dragged.
DEFAULT_OPTIONS = {
    'handle_width': 5,
    'cell_min_width': 25,
    'default_cell_min_width': 100,
    'last_column_resizable': True,
}

__all__ = [
    'DEFAULT_OPTIONS', 'HTML', 'VERSION', 'ColumnResizing', 'EditorState',
    'TableMap', 'TableStructureError', 'TableView', '__version__',
    'distribute_column_widths']


# Import after setting the version and the options, as they are used in
# other modules
from .logger import LOGGER, PROGRESS_LOGGER  # noqa: I001, E402


class HTML:
    """HTML document holding tables, parsed by tinyhtml5.

    The source is given as a positional argument, guessed to be a
    :term:`file object` when it has a ``read`` method and a filename
    otherwise: ``HTML('tables.html')``.

    Give **one** named argument instead to skip guessing:

    :type filename: str or pathlib.Path
    :param filename: Path of an HTML file.
    :type file_obj: :term:`file object`
    :param file_obj: Binary file object with a ``read`` method.
    :param str string: HTML source, already decoded.

    Giving zero or several sources raises a :obj:`TypeError`.

    :param str encoding:
        Character encoding of binary sources, overriding the detected one.

    """
    def __init__(self, guess=None, filename=None, file_obj=None, string=None,
                 encoding=None):
        PROGRESS_LOGGER.info(
            'Step 1 - Parsing HTML - %s',
            guess or filename or getattr(file_obj, 'name', 'HTML string'))
        kwargs = {'namespace_html_elements': False}
        with _select_source(guess, filename, file_obj, string) as source:
            if encoding is not None and not isinstance(source, str):
                kwargs['override_encoding'] = encoding
            root = tinyhtml5.parse(source, **kwargs)
        self.wrapper_element = cssselect2.ElementWrapper.from_html_root(
            root, content_language=None)
        self.etree_element = root

    def build(self, schema=None, **options):
        """Build the document tree of the HTML paragraphs and tables.

        :type schema: :class:`model.nodes.Schema`
        :param schema:
            The schema of the created nodes, defaults to
            :data:`model.nodes.SCHEMA`.
        :param options:
            Keys of :data:`DEFAULT_OPTIONS`, other keys are ignored with a
            warning.
        :returns: A :class:`state.EditorState` object.

        """
        for unknown in sorted(set(options) - set(DEFAULT_OPTIONS)):
            LOGGER.warning('Unknown option: %s.', unknown)
        PROGRESS_LOGGER.info('Step 2 - Building the document tree')
        doc = build_document(self.wrapper_element, schema or SCHEMA)
        return EditorState(doc)


@contextlib.contextmanager
def _select_source(guess=None, filename=None, file_obj=None, string=None):
    """Yield the only given source, opening filenames."""
    given = {
        name: value for name, value in (
            ('guess', guess), ('filename', filename),
            ('file_obj', file_obj), ('string', string))
        if value is not None}
    if len(given) != 1:
        names = ', '.join(given) or 'nothing'
        raise TypeError(f'Expected exactly one source, got {names}')
    (name, value), = given.items()
    if name == 'guess':
        name = 'file_obj' if hasattr(value, 'read') else 'filename'
    if name == 'filename':
        with open(Path(value), 'rb') as fd:
            yield fd
    else:
        yield value


# Work around circular imports.
from .model.build import build_document  # noqa: I001, E402
from .model.nodes import SCHEMA  # noqa: E402
from .state import EditorState  # noqa: E402
from .tablemap import TableMap, TableStructureError  # noqa: E402
from .columns import (  # noqa: E402
    ColumnResizing, TableView, distribute_column_widths)
