from dishka import provide

from mdgate.config import Config
from mdgate.domain.ingest.command.insert import InsertRecordHandler
from mdgate.domain.ingest.model.schema import AttributeSchema
from mdgate.domain.ingest.port.file_registry import FileRegistry
from mdgate.domain.ingest.port.file_resolver import FileResolver
from mdgate.domain.ingest.port.metadata_store import MetadataStore
from mdgate.domain.ingest.service.ingestion import IngestionPipeline
from mdgate.domain.ingest.service.validator import SchemaValidator
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class IngestProvider(Provider):
    @provide(scope=Scope.APP)
    def get_attribute_schema(self, config: Config) -> AttributeSchema:
        return AttributeSchema.from_config(config.attributes)

    @provide(scope=Scope.APP)
    def get_schema_validator(self, schema: AttributeSchema) -> SchemaValidator:
        return SchemaValidator(schema=schema)

    @provide(scope=Scope.UOW)
    def get_ingestion_pipeline(
        self,
        validator: SchemaValidator,
        file_resolver: FileResolver,
        file_registry: FileRegistry,
        metadata_store: MetadataStore,
        config: Config,
    ) -> IngestionPipeline:
        return IngestionPipeline(
            validator=validator,
            file_resolver=file_resolver,
            file_registry=file_registry,
            metadata_store=metadata_store,
            db_name=config.metadata.db_name,
            collection=config.metadata.collection,
        )

    # Command Handlers
    insert_record_handler = provide(InsertRecordHandler, scope=Scope.UOW)
