import logging
from datetime import UTC, datetime

from sqlalchemy import Table, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mdgate.domain.ingest.model.value import dataset_path
from mdgate.domain.ingest.port.file_registry import FileRegistry
from mdgate.domain.shared.error import StorageUnavailableError
from mdgate.infrastructure.persistence.tables import datasets_table, files_table

logger = logging.getLogger(__name__)

_INSERTS = {"sqlite": sqlite_insert, "postgresql": postgresql_insert}


class SqlFileRegistry(FileRegistry):
    """SQL implementation of FileRegistry.

    Each call commits its own transaction, so registered files persist even
    if a later step of the request fails. Rows are written with
    ``ON CONFLICT DO NOTHING`` on the unique ``dataset`` and ``path`` columns,
    so concurrent registrations of the same dataset share one ``did``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register_files(
        self,
        experiment: str,
        processing: str,
        tier: str,
        files: list[str],
    ) -> str:
        dataset = dataset_path(experiment, processing, tier)
        try:
            dataset_id = await self._get_or_create_dataset(dataset, experiment, processing, tier)
            added = await self._add_files(dataset_id, files)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("File registration failed: dataset=%s, error=%s", dataset, e)
            raise StorageUnavailableError(
                f"Unable to register files for dataset {dataset}", code="catalogue_unavailable"
            ) from e

        logger.debug("Registered files: dataset=%s, did=%s, new=%d", dataset, dataset_id, added)
        return str(dataset_id)

    def _insert_or_ignore(self, table: Table, key: str):
        insert = _INSERTS[self.session.bind.dialect.name]
        return insert(table).on_conflict_do_nothing(index_elements=[key])

    async def _get_or_create_dataset(
        self, dataset: str, experiment: str, processing: str, tier: str
    ) -> int:
        await self.session.execute(
            self._insert_or_ignore(datasets_table, "dataset").values(
                dataset=dataset,
                experiment=experiment,
                processing=processing,
                tier=tier,
                created_at=datetime.now(UTC),
            )
        )
        stmt = select(datasets_table.c.dataset_id).where(datasets_table.c.dataset == dataset)
        return (await self.session.execute(stmt)).scalar_one()

    async def _add_files(self, dataset_id: int, files: list[str]) -> int:
        paths = list(dict.fromkeys(files))
        if not paths:
            return 0
        now = datetime.now(UTC)
        result = await self.session.execute(
            self._insert_or_ignore(files_table, "path").values(
                [{"dataset_id": dataset_id, "path": p, "created_at": now} for p in paths]
            )
        )
        # Paths already catalogued, under this or another dataset, are skipped
        return max(result.rowcount, 0)
