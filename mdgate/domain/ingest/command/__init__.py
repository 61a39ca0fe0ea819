from mdgate.domain.ingest.command.insert import InsertRecord, InsertRecordHandler, RecordInserted

__all__ = ["InsertRecord", "InsertRecordHandler", "RecordInserted"]
