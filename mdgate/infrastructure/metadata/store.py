"""MongoDB adapter for the MetadataStore port."""

import logging
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from mdgate.domain.ingest.model.record import Record
from mdgate.domain.ingest.port.metadata_store import MetadataStore
from mdgate.domain.shared.error import StorageUnavailableError

logger = logging.getLogger(__name__)


def upsert_filter(doc: dict[str, Any]) -> dict[str, Any]:
    """Identity of a metadata document: one document per registered file."""
    return {"did": doc.get("did"), "path": doc.get("path")}


class MongoMetadataStore(MetadataStore):
    """MetadataStore implementation using pymongo's asyncio client."""

    def __init__(self, client: AsyncMongoClient) -> None:
        self._client = client

    async def upsert(self, db_name: str, collection: str, records: list[Record]) -> None:
        coll = self._client[db_name][collection]
        for record in records:
            doc = record.to_dict()
            try:
                await coll.replace_one(upsert_filter(doc), doc, upsert=True)
            except PyMongoError as e:
                logger.error(
                    "Metadata upsert failed: %s.%s, did=%s, error=%s",
                    db_name,
                    collection,
                    doc.get("did"),
                    e,
                )
                raise StorageUnavailableError(
                    f"Unable to store metadata in {db_name}.{collection}",
                    code="metadata_unavailable",
                ) from e
