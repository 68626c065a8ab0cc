from .base import Cursor, DocumentStore, Subscription, TIMESTAMP  # noqa: F401
from .sql import SqlDocumentStore  # noqa: F401
