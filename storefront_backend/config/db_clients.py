import inspect
import os
from typing import Optional

from fastapi import Request
from google.cloud import firestore
from google.api_core.client_options import ClientOptions

from .settings import settings
from .logging_utils import get_logger

logger = get_logger(__name__)


class DatabaseClients:
    """
    Holds the Firestore client for the lifetime of the application.

    The client is created in open() on startup and released in close() on
    shutdown. Routes receive it through get_firestore_client().
    """

    def __init__(self, project_id: str = None, quota_project_id: str = None):
        self.project_id = project_id or settings.firestore_project_id
        self.quota_project_id = quota_project_id or settings.quota_project_id
        self.firestore: Optional[firestore.AsyncClient] = None

    def open(self) -> firestore.AsyncClient:
        if self.firestore is not None:
            return self.firestore
        try:
            # Explicitly set the quota_project_id using ClientOptions
            client_options = ClientOptions(quota_project_id=self.quota_project_id)
            self.firestore = firestore.AsyncClient(
                project=self.project_id,
                client_options=client_options
            )
            env_type = "Cloud Run" if os.getenv("K_SERVICE") else "local development"
            logger.info(f"Successfully initialized Firestore AsyncClient for project {self.project_id} with quota project {self.quota_project_id} in {env_type} environment.")
        except Exception as e:
            logger.error(f"Failed to initialize Firestore client: {e}", exc_info=True)
            self.firestore = None
            raise
        return self.firestore

    async def close(self) -> None:
        if self.firestore is None:
            return
        client, self.firestore = self.firestore, None
        # close() returns a coroutine on the grpc.aio transport
        result = client.close()
        if inspect.isawaitable(result):
            await result
        logger.info("Firestore AsyncClient closed.")


def get_firestore_client(request: Request) -> firestore.AsyncClient:
    clients: Optional[DatabaseClients] = getattr(request.app.state, "clients", None)
    if clients is None or clients.firestore is None:
        logger.error("Firestore client is not initialized.")
        raise RuntimeError("Firestore client is not initialized. Check Firestore configuration and credentials.")
    return clients.firestore
