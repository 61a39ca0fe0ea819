import logging

from mdgate.domain.auth.model.principal import Principal
from mdgate.domain.ingest.model.record import Record
from mdgate.domain.ingest.service.ingestion import IngestionPipeline
from mdgate.domain.shared.command import Command, CommandHandler, Result

logger = logging.getLogger(__name__)


class InsertRecord(Command):
    record: Record
    principal: Principal | None = None


class RecordInserted(Result):
    dataset: str
    did: str
    path: str


class InsertRecordHandler(CommandHandler[InsertRecord, RecordInserted]):
    pipeline: IngestionPipeline

    async def run(self, cmd: InsertRecord) -> RecordInserted:
        logger.info(
            "Insert requested: user=%s, method=%s",
            cmd.principal.username if cmd.principal else None,
            cmd.principal.method if cmd.principal else None,
        )
        result = await self.pipeline.ingest(cmd.record)
        return RecordInserted(dataset=result.dataset, did=result.did, path=result.files[0])
