class InvalidInput(ValueError):
    """Caller supplied data that fails validation; nothing was written."""


class NotFound(LookupError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class HistoryFetchError(RuntimeError):
    """A history page could not be fetched. The loader stays retryable."""
