"""Add, remove, edit and query library entries."""
