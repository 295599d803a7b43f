from typing import List

from fastapi import APIRouter, HTTPException, Depends
from google.cloud import firestore

from models.schemas import Order
from service.order_service import fetch_orders_by_user_id
from service.errors import StorefrontError
from config import get_firestore_client, get_logger
from router.dependencies import get_current_user_id, to_http_exception

logger = get_logger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
)

@router.get("", response_model=List[Order])
async def list_orders_route(
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Get the signed-in user's order history, newest first.
    """
    try:
        return await fetch_orders_by_user_id(user_id, db)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching orders for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving orders")
