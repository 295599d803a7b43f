from typing import List

from google.api_core import exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import AsyncClient, SERVER_TIMESTAMP

from config import get_logger, settings
from service.errors import NotFoundError, PersistenceError
from service.product_service import fetch_product_by_id

logger = get_logger(__name__)


async def get_wishlist(user_id: str, db_client: AsyncClient) -> List[str]:
    user_ref = db_client.collection(settings.firestore_collection_users).document(user_id)
    try:
        user_doc = await user_ref.get()
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error reading wishlist for user {user_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to read wishlist: {e}") from e

    if not user_doc.exists:
        raise NotFoundError(f"User with ID {user_id} not found")

    return (user_doc.to_dict() or {}).get("wishlistedProductIds") or []


async def _update_wishlist(user_id: str, change, db_client: AsyncClient) -> List[str]:
    user_ref = db_client.collection(settings.firestore_collection_users).document(user_id)
    try:
        await user_ref.update({
            "wishlistedProductIds": change,
            "updatedAt": SERVER_TIMESTAMP,
        })
    except exceptions.NotFound as e:
        raise NotFoundError(f"User with ID {user_id} not found") from e
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error updating wishlist for user {user_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to update wishlist: {e}") from e

    return await get_wishlist(user_id, db_client)


async def add_to_wishlist(user_id: str, product_id: str, db_client: AsyncClient) -> List[str]:
    """
    Add a product to a user's wishlist. Adding it twice is a no-op.

    Raises:
        NotFoundError: If the user or the product does not exist
    """
    await fetch_product_by_id(product_id, db_client)
    wishlist = await _update_wishlist(user_id, firestore.ArrayUnion([product_id]), db_client)
    logger.info(f"Added product {product_id} to wishlist of user {user_id}")
    return wishlist


async def remove_from_wishlist(user_id: str, product_id: str, db_client: AsyncClient) -> List[str]:
    """Remove a product from a user's wishlist. Removing a product that is not there is a no-op."""
    wishlist = await _update_wishlist(user_id, firestore.ArrayRemove([product_id]), db_client)
    logger.info(f"Removed product {product_id} from wishlist of user {user_id}")
    return wishlist
