from mdgate.domain.ingest.port.file_registry import FileRegistry
from mdgate.domain.ingest.port.file_resolver import FileResolver
from mdgate.domain.ingest.port.metadata_store import MetadataStore

__all__ = ["FileRegistry", "FileResolver", "MetadataStore"]
