"""Command-line tools for LegalLens.

- ``python -m legallens.cli`` -- ingest, list, summarise, query and delete
  documents (see :mod:`legallens.cli.documents`).
"""
