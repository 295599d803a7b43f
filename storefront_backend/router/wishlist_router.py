from fastapi import APIRouter, HTTPException, Depends, Path
from google.cloud import firestore

from models.schemas import WishlistResponse
from service.wishlist_service import get_wishlist, add_to_wishlist, remove_from_wishlist
from service.errors import StorefrontError
from config import get_firestore_client, get_logger
from router.dependencies import get_current_user_id, to_http_exception

logger = get_logger(__name__)

router = APIRouter(
    prefix="/wishlist",
    tags=["wishlist"],
)

@router.get("", response_model=WishlistResponse)
async def get_wishlist_route(
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Get the product IDs on the signed-in user's wishlist.
    """
    try:
        product_ids = await get_wishlist(user_id, db)
        return WishlistResponse(user_id=user_id, wishlistedProductIds=product_ids)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting wishlist: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving the wishlist")

@router.put("/{product_id}", response_model=WishlistResponse)
async def add_to_wishlist_route(
    product_id: str = Path(..., description="The ID of the product to add"),
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Add a product to the signed-in user's wishlist.
    """
    try:
        product_ids = await add_to_wishlist(user_id, product_id, db)
        return WishlistResponse(user_id=user_id, wishlistedProductIds=product_ids)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error adding product {product_id} to wishlist: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while updating the wishlist")

@router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist_route(
    product_id: str = Path(..., description="The ID of the product to remove"),
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Remove a product from the signed-in user's wishlist.
    """
    try:
        product_ids = await remove_from_wishlist(user_id, product_id, db)
        return WishlistResponse(user_id=user_id, wishlistedProductIds=product_ids)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error removing product {product_id} from wishlist: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while updating the wishlist")
