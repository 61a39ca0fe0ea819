"""Ingestion pipeline: validate, derive, register files, upsert metadata."""

import logging

from mdgate.domain.ingest.model.record import Record
from mdgate.domain.ingest.model.value import IngestResult, dataset_path
from mdgate.domain.ingest.port.file_registry import FileRegistry
from mdgate.domain.ingest.port.file_resolver import FileResolver
from mdgate.domain.ingest.port.metadata_store import MetadataStore
from mdgate.domain.ingest.service.validator import SchemaValidator
from mdgate.domain.shared.error import NoFilesFoundError
from mdgate.domain.shared.service import Service

logger = logging.getLogger(__name__)


class IngestionPipeline(Service):
    """Registers a validated record's files and upserts its metadata.

    At most one write to each store per call. Nothing is retried and nothing
    is deduplicated: ingesting the same record twice upserts it twice.
    """

    validator: SchemaValidator
    file_resolver: FileResolver
    file_registry: FileRegistry
    metadata_store: MetadataStore
    db_name: str
    collection: str

    async def ingest(self, record: Record) -> IngestResult:
        """Ingest ``record``, enriching it in place with ``dataset`` and ``did``.

        Raises:
            SchemaViolationError: If the record keys do not satisfy the schema
            TypeMismatchError: If path/experiment/processing/tier are not strings
            NoFilesFoundError: If ``path`` resolves to no files
            StorageUnavailableError: If the catalogue or metadata store fails
        """
        self.validator.validate(record)

        path = record.require_str("path")
        experiment = record.require_str("experiment")
        processing = record.require_str("processing")
        tier = record.require_str("tier")

        files = self.file_resolver.resolve(path)
        dataset = dataset_path(experiment, processing, tier)
        record["dataset"] = dataset

        if not files:
            raise NoFilesFoundError(
                f"No files found associated with path={path}, experiment={experiment}, "
                f"processing={processing}, tier={tier}",
                code="no_files_found",
            )

        logger.debug("input data: record=%s, files=%s", record.root, files)

        record["path"] = files[0]
        did = await self.file_registry.register_files(experiment, processing, tier, files)
        record["did"] = did

        await self.metadata_store.upsert(self.db_name, self.collection, [record])

        logger.info("Record ingested: dataset=%s, did=%s, files=%d", dataset, did, len(files))
        return IngestResult(dataset=dataset, did=did, files=tuple(files))
