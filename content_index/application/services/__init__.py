"""
Application services.

Orchestrate chunking, embedding and storage for content producers.
"""

from content_index.application.services.ingestion_service import IngestionService

__all__ = ["IngestionService"]
