from mdgate.domain.ingest.service.ingestion import IngestionPipeline
from mdgate.domain.ingest.service.validator import SchemaValidator

__all__ = ["IngestionPipeline", "SchemaValidator"]
