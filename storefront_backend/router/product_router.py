from typing import List

from fastapi import APIRouter, HTTPException, Depends, Path
from google.cloud import firestore

from models.schemas import Product
from service.product_service import fetch_all_products, fetch_product_by_id
from service.errors import StorefrontError
from config import get_firestore_client, get_logger
from router.dependencies import to_http_exception

logger = get_logger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["products"],
)

@router.get("", response_model=List[Product])
async def list_products_route(
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    List every product in the catalog.
    """
    try:
        return await fetch_all_products(db)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error listing products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving products")

@router.get("/{product_id}", response_model=Product)
async def get_product_route(
    product_id: str = Path(..., description="The ID of the product"),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Get a single product by ID.
    """
    try:
        return await fetch_product_by_id(product_id, db)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving the product")
