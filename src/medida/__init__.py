"""Medida - role-gated measurement tables with cross-table product search."""

__version__ = "0.1.0"
