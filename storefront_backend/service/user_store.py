from typing import Any, List, NamedTuple, Protocol

from google.api_core import exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import AsyncClient, SERVER_TIMESTAMP
from pydantic import ValidationError as PydanticValidationError

from config import get_logger, settings
from models.schemas import Address
from service.address_book import check_address_book
from service.errors import ConcurrentModificationError, NotFoundError, PersistenceError

logger = get_logger(__name__)


class AddressBookSnapshot(NamedTuple):
    """An address book as read, with the version the write is conditioned on."""
    user_id: str
    addresses: List[Address]
    version: Any


class UserStore(Protocol):
    """Read and conditionally write a user's shipping addresses."""

    async def load_address_book(self, user_id: str) -> AddressBookSnapshot:
        ...

    async def commit_address_book(self, user_id: str, addresses: List[Address], snapshot: AddressBookSnapshot) -> List[Address]:
        ...


class FirestoreUserStore:
    """
    UserStore over the Firestore users collection.

    The document update_time is the version. The write carries a
    last_update_time precondition, so Firestore rejects it if anything
    touched the user document after the read.
    """

    def __init__(self, db_client: AsyncClient, collection: str = None):
        self.db_client = db_client
        self.collection = collection or settings.firestore_collection_users

    def _user_ref(self, user_id: str) -> firestore.AsyncDocumentReference:
        return self.db_client.collection(self.collection).document(user_id)

    async def load_address_book(self, user_id: str) -> AddressBookSnapshot:
        try:
            user_doc = await self._user_ref(user_id).get()
        except exceptions.GoogleAPICallError as e:
            logger.error(f"Error reading user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to read user {user_id}: {e}") from e

        if not user_doc.exists:
            raise NotFoundError(f"User document not found for UID: {user_id}")

        user_data = user_doc.to_dict() or {}
        try:
            addresses = [Address(**raw) for raw in user_data.get("shippingAddresses") or []]
        except PydanticValidationError as e:
            logger.error(f"Stored shipping addresses for user {user_id} are malformed: {e}")
            raise PersistenceError(f"Stored shipping addresses for user {user_id} are malformed") from e

        problems = check_address_book(addresses)
        if problems:
            logger.warning(f"Stored address book for user {user_id} is inconsistent: {'; '.join(problems)}")

        return AddressBookSnapshot(user_id=user_id, addresses=addresses, version=user_doc.update_time)

    async def commit_address_book(self, user_id: str, addresses: List[Address], snapshot: AddressBookSnapshot) -> List[Address]:
        option = self.db_client.write_option(last_update_time=snapshot.version)
        try:
            await self._user_ref(user_id).update({
                "shippingAddresses": [address.model_dump() for address in addresses],
                "updatedAt": SERVER_TIMESTAMP,
            }, option=option)
        except exceptions.NotFound as e:
            raise NotFoundError(f"User document not found for UID: {user_id}") from e
        except (exceptions.FailedPrecondition, exceptions.Aborted) as e:
            raise ConcurrentModificationError(f"User {user_id} was modified during the update") from e
        except exceptions.GoogleAPICallError as e:
            logger.error(f"Error writing addresses for user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write addresses for user {user_id}: {e}") from e

        return addresses
