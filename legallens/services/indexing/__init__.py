"""Chunking and per-document retrieval indexes."""

from legallens.services.indexing.chunk_indexer import ChunkIndexer
from legallens.services.indexing.chunker import DEFAULT_SEPARATORS, RecursiveTextChunker

__all__ = ["DEFAULT_SEPARATORS", "ChunkIndexer", "RecursiveTextChunker"]
