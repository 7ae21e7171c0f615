"""Editor state: a document and a selection.

Commands are functions taking an :class:`EditorState` and an optional
``dispatch`` callable. Without ``dispatch``, they only tell whether they can
be applied. With ``dispatch``, they build a :class:`transform.Transaction`
and give it to ``dispatch``, usually ending with :meth:`EditorState.apply`:

.. code-block:: python

    transactions = []
    if merge_cells(state, transactions.append):
        state = state.apply(transactions[-1])

"""

from .selection import TextSelection
from .transform import Transaction


class EditorState:
    """Immutable pair of a document and of a selection in this document."""
    def __init__(self, doc, selection=None):
        self.doc = doc
        if selection is None:
            selection = TextSelection.create(doc, 0)
        self.selection = selection

    def __repr__(self):
        return f'<EditorState {self.selection!r}>'

    @classmethod
    def create(cls, doc, anchor=None, head=None, selection=None):
        """Create a state, with a text selection between two positions."""
        if selection is None and anchor is not None:
            selection = TextSelection.create(doc, anchor, head)
        return cls(doc, selection)

    @property
    def schema(self):
        return self.doc.type.schema

    @property
    def tr(self):
        """A new transaction starting from this state."""
        return Transaction(self)

    def apply(self, tr):
        """Return the state obtained by applying the transaction ``tr``."""
        if tr.before is not self.doc:
            raise ValueError('Transaction built from another state')
        return EditorState(tr.doc, tr.selection)
