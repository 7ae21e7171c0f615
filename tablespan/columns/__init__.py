"""Column widths: distribution, display and interactive resizing."""

from .resizing import (  # noqa: F401
    ColumnResizing, DragSession, ResizeState, dragged_column_percents,
    dragged_table_percents, edge_cell, get_resize_context, handle_decorations)
from .widths import (  # noqa: F401
    TableView, column_pixel_widths, column_raw_widths,
    distribute_column_widths, update_column_widths, update_table_width)
