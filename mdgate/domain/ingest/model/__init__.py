from mdgate.domain.ingest.model.record import AttributeValue, Record
from mdgate.domain.ingest.model.schema import AttributeSchema
from mdgate.domain.ingest.model.value import IngestResult, dataset_path

__all__ = ["AttributeSchema", "AttributeValue", "IngestResult", "Record", "dataset_path"]
