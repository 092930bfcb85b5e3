"""LegalLens -- document intelligence pipeline.

Turns uploaded documents into durable extracted text, a retrieval index and
plain-language summaries, and answers questions grounded in that content.
Generation and embedding backends are pluggable; when they are missing or
failing, the pipeline falls back to extractive summaries and answers.
"""

__version__ = "0.1.0"
