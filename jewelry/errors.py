from __future__ import annotations


class GatewayError(Exception):
    """A persistence call failed; the caller shows it and keeps prior state."""

    def __init__(self, message: str, *, collection: str | None = None):
        super().__init__(message)
        self.collection = collection


class RecordNotFoundError(GatewayError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"Record {record_id} not found in {collection}.", collection=collection)
        self.record_id = record_id
