"""Document model: immutable nodes, positions and HTML builder."""
