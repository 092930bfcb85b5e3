"""Pipeline services: extraction, storage, indexing, retrieval, summaries, answers."""
