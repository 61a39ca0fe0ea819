from abc import abstractmethod
from typing import Protocol

from mdgate.domain.ingest.model.record import Record
from mdgate.domain.shared.port import Port


class MetadataStore(Port, Protocol):
    """Document store holding record metadata."""

    @abstractmethod
    async def upsert(self, db_name: str, collection: str, records: list[Record]) -> None:
        """Insert or replace ``records`` in ``db_name.collection``.

        Raises:
            StorageUnavailableError: If the store rejects the write
        """
        ...
