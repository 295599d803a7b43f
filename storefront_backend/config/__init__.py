from .settings import settings
from .logging_utils import get_logger
from .db_clients import DatabaseClients, get_firestore_client

__all__ = [
    "settings",
    "get_logger",
    "DatabaseClients",
    "get_firestore_client",
]
