"""Cosmoport: a ship registry with validated records and filtered search."""
