"""Background ingestion pipeline for uploaded documents."""

from legallens.pipeline.orchestrator import IngestionOrchestrator
from legallens.pipeline.processing_queue import ProcessingQueue

__all__ = ["IngestionOrchestrator", "ProcessingQueue"]
