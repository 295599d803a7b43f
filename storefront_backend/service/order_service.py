from typing import List

from google.api_core import exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter

from config import get_logger, settings
from models.schemas import Order
from service.errors import PersistenceError

logger = get_logger(__name__)


async def fetch_orders_by_user_id(user_id: str, db_client: AsyncClient) -> List[Order]:
    """
    Fetch a user's orders, newest first.

    Args:
        user_id: The verified ID of the user
        db_client: Firestore client

    Returns:
        The user's orders ordered by orderDate descending
    """
    query = (
        db_client.collection(settings.firestore_collection_orders)
        .where(filter=FieldFilter("userId", "==", user_id))
        .order_by("orderDate", direction=firestore.Query.DESCENDING)
    )
    try:
        docs = await query.get()
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error fetching orders for user {user_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to fetch orders: {e}") from e

    orders = []
    for doc in docs:
        data = doc.to_dict() or {}
        orders.append(Order(
            id=doc.id,
            userId=data.get("userId", user_id),
            orderDate=data.get("orderDate"),
            items=data.get("items") or [],
            totalAmount=data.get("totalAmount") or 0,
            shippingAddress=data.get("shippingAddress"),
        ))

    logger.info(f"Fetched {len(orders)} orders for user {user_id}")
    return orders
