"""Interactive resizing of table columns.

A :class:`ColumnResizing` controller follows the pointer over the table
cells. When the pointer is close to the right edge of a cell, this cell
becomes the active handle. Pressing the pointer on a handle starts a
:class:`DragSession`, moving the pointer gives the temporary widths to
display, releasing the pointer stores the new widths in the document.

Widths are always computed from the state of the table when the drag
started, never from the temporary widths.

Dragging the border between two columns changes the widths of these two
columns. Dragging the right edge of the table changes the width of the
table and of its last column, other columns keeping their pixel widths.

"""

from collections import namedtuple

from .. import DEFAULT_OPTIONS
from ..logger import LOGGER, PROGRESS_LOGGER
from ..tablemap import TableMap
from ..util import cell_around, points_at_cell
from .widths import (
    clamp, column_pixel_widths, column_raw_widths, distribute_column_widths,
    round_to, update_column_widths, update_table_width)

#: Key of the transaction metadata used to change the resizing state.
META_KEY = 'column_resizing'

#: Options used by :class:`ColumnResizing`.
RESIZING_OPTIONS = (
    'handle_width', 'cell_min_width', 'default_cell_min_width',
    'last_column_resizable')

ResizeContext = namedtuple('ResizeContext', (
    'table', 'map', 'table_start', 'row', 'col', 'next_col', 'is_right_edge'))

Decoration = namedtuple('Decoration', ('type', 'start', 'end', 'css_class'))


class DragSession:
    """State of a column border dragged with the pointer.

    ``col`` is the column at the left of the dragged border, ``next_col``
    the other resized column. When ``table_edge`` is set, the right edge of
    the table is dragged and ``start_widths_px`` holds the pixel widths of
    all the columns.

    """
    def __init__(self, start_x, table_width_px, col, next_col,
                 start_col_width_px, start_next_col_width_px,
                 table_edge=False, start_widths_px=None):
        self.start_x = start_x
        self.table_width_px = table_width_px
        self.col = col
        self.next_col = next_col
        self.start_col_width_px = start_col_width_px
        self.start_next_col_width_px = start_next_col_width_px
        self.table_edge = table_edge
        self.start_widths_px = list(start_widths_px or ())

    def __repr__(self):
        return (
            f'<DragSession col={self.col} next_col={self.next_col} '
            f'table_edge={self.table_edge}>')


class ResizeState:
    """Active handle and drag session of the resizing controller.

    ``active_handle`` is the position of the cell whose right border is
    under the pointer, or ``-1``. ``dragging`` is the current
    :class:`DragSession`, or ``None``.

    """
    def __init__(self, active_handle=-1, dragging=None):
        self.active_handle = active_handle
        self.dragging = dragging

    def __repr__(self):
        return f'<ResizeState {self.active_handle} {self.dragging!r}>'

    def apply(self, tr):
        """Return the state following the transaction ``tr``.

        Document changes coming from elsewhere cancel the drag session and
        move the active handle with its cell.

        """
        action = tr.get_meta(META_KEY)
        if action and action.get('set_handle') is not None:
            return ResizeState(action['set_handle'], None)
        if action and 'set_dragging' in action:
            return ResizeState(self.active_handle, action['set_dragging'])
        if tr.doc_changed and (self.active_handle > -1 or self.dragging):
            handle = self.active_handle
            if handle > -1:
                handle = tr.mapping.map(handle, -1)
                if not points_at_cell(tr.doc.resolve(handle)):
                    handle = -1
            if self.dragging:
                LOGGER.debug('Column resizing cancelled by a document change')
            return ResizeState(handle, None)
        return self


def get_resize_context(doc, handle_cell_pos):
    """Return the :class:`ResizeContext` of the handle of a cell, or None."""
    resolved = doc.resolve(handle_cell_pos)
    cell = resolved.node_after
    if cell is None or not cell.type.is_cell:
        return None
    table = resolved.node(-1)
    table_map = TableMap.get(table)
    table_start = resolved.start(-1)
    if table_map.width < 2:
        return None
    rect = table_map.find_cell(resolved.pos - table_start)
    col = (
        table_map.col_count(resolved.pos - table_start) +
        cell.attrs['colspan'] - 1)
    is_right_edge = col >= table_map.width - 1
    next_col = col - 1 if is_right_edge else col + 1
    return ResizeContext(
        table, table_map, table_start, rect.top, col, next_col, is_right_edge)


def edge_cell(doc, pos, side):
    """Return the position of the cell whose right border is at ``side``.

    ``pos`` is a position in a cell and ``side`` is ``'left'`` or
    ``'right'``, the side of this cell close to the pointer. Return ``-1``
    when there's no border to resize.

    """
    resolved = cell_around(doc.resolve(pos))
    if resolved is None:
        return -1
    if side == 'right':
        return resolved.pos
    table_map = TableMap.get(resolved.node(-1))
    start = resolved.start(-1)
    index = table_map.map.index(resolved.pos - start)
    if index % table_map.width == 0:
        return -1
    return start + table_map.map[index - 1]


def dragged_column_percents(session, pointer_x, cell_min_width):
    """Return the percentages of the two columns resized by ``session``.

    The dragged border can't move further than the point where one of the
    columns would get smaller than ``cell_min_width`` pixels, or than half
    of the width of the two columns when they're too small.

    """
    pair_width_px = (
        session.start_col_width_px + session.start_next_col_width_px)
    min_px = min(cell_min_width, pair_width_px / 2)
    max_px = max(min_px, pair_width_px - min_px)
    offset_px = pointer_x - session.start_x
    col_width_px = clamp(
        session.start_col_width_px + offset_px, min_px, max_px)
    next_col_width_px = pair_width_px - col_width_px
    if session.table_width_px > 0:
        col_percent = round_to(col_width_px / session.table_width_px * 100)
        next_col_percent = round_to(
            next_col_width_px / session.table_width_px * 100)
    else:
        col_percent = next_col_percent = 0
    return {session.col: col_percent, session.next_col: next_col_percent}


def dragged_table_percents(session, pointer_x, cell_min_width):
    """Return the percentages of columns and the table width for ``session``.

    Columns but the last one keep their pixel widths. The table can't get
    smaller than these columns plus ``cell_min_width`` pixels for the last
    column.

    Return a ``(widths_by_col, table_width_px)`` tuple.

    """
    widths_px = session.start_widths_px
    fixed_px = sum(widths_px[:-1])
    table_width_px = max(
        session.table_width_px + pointer_x - session.start_x,
        fixed_px + cell_min_width)
    percents = distribute_column_widths(
        widths_px[:-1] + [table_width_px - fixed_px])
    return dict(enumerate(percents)), round_to(table_width_px, 2)


class ColumnResizing:
    """Controller following the pointer to resize table columns.

    Options are the ones of :data:`tablespan.DEFAULT_OPTIONS` listed in
    :data:`RESIZING_OPTIONS`:

    :param int handle_width:
        Distance in pixels from a cell border where the handle is active.
    :param int cell_min_width:
        Minimum width of a column in pixels.
    :param int default_cell_min_width:
        Minimum width in pixels of columns with no stored width.
    :param bool last_column_resizable:
        Whether the right edge of the table can be dragged.

    """
    def __init__(self, **options):
        for unknown in set(options) - set(RESIZING_OPTIONS):
            LOGGER.warning('Unknown column resizing option: %s.', unknown)
        new_options = {key: DEFAULT_OPTIONS[key] for key in RESIZING_OPTIONS}
        new_options.update(
            (key, value) for key, value in options.items()
            if key in RESIZING_OPTIONS)
        self.options = new_options
        self.state = ResizeState()

    def __repr__(self):
        return f'<ColumnResizing {self.state!r}>'

    @property
    def attributes(self):
        """Attributes of the editor root element."""
        if self.state.active_handle > -1:
            return {'class': 'resize-cursor'}
        return {}

    def hover(self, state, pos, pointer_x, cell_left, cell_right):
        """Follow the pointer, at ``pointer_x`` over the cell around ``pos``.

        ``cell_left`` and ``cell_right`` are the horizontal coordinates of
        the borders of this cell. Return the active handle.

        """
        if self.state.dragging:
            return self.state.active_handle
        handle_width = self.options['handle_width']
        cell = -1
        if pointer_x - cell_left <= handle_width:
            cell = edge_cell(state.doc, pos, 'left')
        elif cell_right - pointer_x <= handle_width:
            cell = edge_cell(state.doc, pos, 'right')
        if cell != self.state.active_handle:
            if not self.options['last_column_resizable'] and cell != -1:
                ctx = get_resize_context(state.doc, cell)
                if ctx is not None and ctx.is_right_edge:
                    return self.state.active_handle
            self.state = ResizeState(cell, None)
        return self.state.active_handle

    def leave(self):
        """Forget the active handle when the pointer leaves the editor."""
        if self.state.active_handle > -1 and not self.state.dragging:
            self.state = ResizeState(-1, None)

    def pointer_down(self, state, pointer_x, table_width_px,
                     measured_widths=None):
        """Start dragging the active handle.

        ``table_width_px`` is the displayed width of the table, and
        ``measured_widths`` the optional list of displayed widths of its
        columns. Return whether a drag session has been started.

        """
        if self.state.active_handle == -1 or self.state.dragging:
            return False
        ctx = get_resize_context(state.doc, self.state.active_handle)
        if ctx is None or table_width_px <= 0:
            return False
        widths_px = column_pixel_widths(
            ctx.table, table_width_px, measured_widths)
        table_edge = (
            ctx.is_right_edge and self.options['last_column_resizable'])
        self.state = ResizeState(self.state.active_handle, DragSession(
            pointer_x, table_width_px, ctx.col, ctx.next_col,
            widths_px[ctx.col], widths_px[ctx.next_col], table_edge,
            widths_px))
        return True

    def _percents(self, pointer_x):
        session = self.state.dragging
        cell_min_width = self.options['cell_min_width']
        if session.table_edge:
            return dragged_table_percents(session, pointer_x, cell_min_width)
        percents = dragged_column_percents(session, pointer_x, cell_min_width)
        return percents, None

    def pointer_move(self, state, pointer_x):
        """Return the column percentages to display while dragging.

        Nothing is stored in the document. Return ``None`` when there's no
        drag session.

        """
        if not self.state.dragging:
            return None
        ctx = get_resize_context(state.doc, self.state.active_handle)
        if ctx is None:
            return None
        widths_by_col, _ = self._percents(pointer_x)
        return distribute_column_widths(
            column_raw_widths(ctx.table, widths_by_col))

    def pointer_up(self, state, pointer_x, dispatch=None):
        """Stop dragging and store the new widths in the document.

        Return whether a drag session has been stopped.

        """
        if not self.state.dragging:
            return False
        ctx = get_resize_context(state.doc, self.state.active_handle)
        widths_by_col, table_width_px = self._percents(pointer_x)
        tr = state.tr
        if ctx is not None:
            update_column_widths(tr, ctx, widths_by_col)
            if table_width_px is not None:
                update_table_width(tr, ctx.table_start - 1, table_width_px)
        tr.set_meta(META_KEY, {'set_dragging': None})
        self.state = self.state.apply(tr)
        if tr.doc_changed:
            PROGRESS_LOGGER.info(
                'Resized columns %s', ', '.join(map(str, widths_by_col)))
            if dispatch:
                dispatch(tr)
        return True

    def cancel(self):
        """Stop dragging without changing the document."""
        if self.state.dragging:
            self.state = ResizeState(self.state.active_handle, None)

    def apply(self, tr):
        """Follow a transaction applied to the editor state."""
        self.state = self.state.apply(tr)
        return self.state


def handle_decorations(state, cell, dragging=False):
    """Return the decorations showing the resize handle of ``cell``.

    A widget is put at the end of each cell whose right border is on the
    same column border as ``cell``. While dragging, these cells are also
    marked with a node decoration.

    """
    decorations = []
    resolved = state.doc.resolve(cell)
    table = resolved.node(-1)
    table_map = TableMap.get(table)
    start = resolved.start(-1)
    col = (
        table_map.col_count(resolved.pos - start) +
        resolved.node_after.attrs['colspan'] - 1)
    width = table_map.width
    for row in range(table_map.height):
        index = col + row * width
        cell_pos = table_map.map[index]
        if not cell_pos:
            # No cell in this slot
            continue
        if col < width - 1 and cell_pos == table_map.map[index + 1]:
            # Border inside a cell spanning to the next column
            continue
        if row and cell_pos == table_map.map[index - width]:
            # Cell already decorated in the row above
            continue
        cell_size = table.node_at(cell_pos).node_size
        if dragging:
            decorations.append(Decoration(
                'node', start + cell_pos, start + cell_pos + cell_size,
                'column-resize-dragging'))
        pos = start + cell_pos + cell_size - 1
        decorations.append(
            Decoration('widget', pos, pos, 'column-resize-handle'))
    return decorations
