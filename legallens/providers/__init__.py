"""Concrete adapters for the interfaces in ``legallens.interfaces``."""
