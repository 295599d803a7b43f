from typing import List

from pydantic import ValidationError as PydanticValidationError

from config import get_logger, settings
from models.schemas import Address, AddressUpdateRequest
from service.address_book import apply_address_edit, find_address_index
from service.errors import ConcurrentModificationError, NotFoundError, TransientError, ValidationError
from service.user_store import UserStore

logger = get_logger(__name__)


def revalidate_edit(edit: AddressUpdateRequest) -> AddressUpdateRequest:
    """
    Re-run the field rules on the complete edit.

    The edit carries every stored field, so the stored address contributes
    nothing; this catches requests built without validation.

    Args:
        edit: The requested field values

    Returns:
        The validated edit

    Raises:
        ValidationError: With messages keyed by field name
    """
    try:
        return AddressUpdateRequest.model_validate(edit.model_dump())
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


async def get_shipping_addresses(user_id: str, store: UserStore) -> List[Address]:
    snapshot = await store.load_address_book(user_id)
    return snapshot.addresses


async def update_shipping_address(
    user_id: str,
    address_id: str,
    edit: AddressUpdateRequest,
    store: UserStore,
    max_attempts: int = None,
) -> List[Address]:
    """
    Edit one shipping address as an atomic read-modify-write.

    Each attempt reads the current address book, re-validates the edit
    against it, reconciles the default flag and writes the result back on
    the condition that the user document has not changed since the read.
    A conflicting write restarts the cycle from a fresh read.

    Args:
        user_id: The verified ID of the user who owns the addresses
        address_id: The ID of the address to edit
        edit: The validated new field values
        store: Persistence for the user document
        max_attempts: Read-modify-write attempts before giving up

    Returns:
        The committed list of shipping addresses

    Raises:
        NotFoundError: If the user or the address does not exist
        ValidationError: If the edit fails the field rules
        TransientError: If every attempt hit a conflicting write
        PersistenceError: If the store failed; not retried here
    """
    max_attempts = max_attempts or settings.address_update_max_attempts

    for attempt in range(1, max_attempts + 1):
        snapshot = await store.load_address_book(user_id)
        logger.info(f"Loaded {len(snapshot.addresses)} addresses for user {user_id} (attempt {attempt}/{max_attempts})")

        index = find_address_index(snapshot.addresses, address_id)
        if index == -1:
            raise NotFoundError(f"Address with ID {address_id} not found for user {user_id}")

        validated = revalidate_edit(edit)
        updated = apply_address_edit(snapshot.addresses, address_id, validated)

        try:
            committed = await store.commit_address_book(user_id, updated, snapshot)
        except ConcurrentModificationError:
            logger.warning(f"Concurrent modification of user {user_id} while updating address {address_id} (attempt {attempt}/{max_attempts})")
            continue

        logger.info(f"Updated address {address_id} for user {user_id}")
        return committed

    logger.error(f"Giving up on address {address_id} for user {user_id} after {max_attempts} conflicting attempts")
    raise TransientError(f"Address {address_id} for user {user_id} could not be updated after {max_attempts} attempts")
