"""Structural commands for tables.

Commands are called as ``command(state, dispatch=None)`` and return whether
they can be applied. When ``dispatch`` is given, the transaction doing the
change is given to it. Commands never change the document when they return
``False``.

Lower-level functions such as :func:`add_row` or :func:`remove_column` take
a transaction and a :class:`model.rect.TableRect`, and add their steps to
the transaction.

"""

from .cell import (  # noqa: F401
    delete_cell_selection, merge_cells, set_cell_attr, split_cell,
    split_cell_with_type)
from .column import (  # noqa: F401
    add_column, add_column_after, add_column_before, delete_column,
    move_table_column, remove_column)
from .header import (  # noqa: F401
    toggle_header, toggle_header_cell, toggle_header_column,
    toggle_header_row)
from .row import (  # noqa: F401
    add_row, add_row_after, add_row_before, delete_row, move_table_row,
    remove_row)
from .table import delete_table, go_to_next_cell  # noqa: F401
