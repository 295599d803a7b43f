from typing import Any, Dict, List

from google.api_core import exceptions
from google.cloud.firestore_v1 import AsyncClient

from config import get_logger, settings
from models.schemas import Product
from service.errors import NotFoundError, PersistenceError

logger = get_logger(__name__)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(url, str) for url in value)


def sanitize_image_urls(data: Dict[str, Any]) -> List[str]:
    """
    Pick the image URLs out of a product document.

    Documents carry either an imageUrls list or a legacy imageUrl field that
    may be a list or a single string. imageUrls wins when it is a list of
    strings. Blank entries and anything that is not an http(s) URL are dropped.
    """
    candidates: List[str] = []
    if _is_string_list(data.get("imageUrls")):
        candidates = data["imageUrls"]
    elif data.get("imageUrl"):
        image_url = data["imageUrl"]
        if _is_string_list(image_url):
            candidates = image_url
        elif isinstance(image_url, str):
            candidates = [image_url]

    urls = []
    for url in candidates:
        url = url.strip()
        if url.startswith(("http://", "https://")):
            urls.append(url)
        elif url:
            logger.warning(f"Dropping malformed image URL for product {data.get('id')}: {url!r}")
    return urls


def product_from_document(product_id: str, data: Dict[str, Any]) -> Product:
    price = data.get("price")
    return Product(
        id=product_id,
        name=data.get("name") or "Unknown Product",
        description=data.get("description") or "",
        price=price if isinstance(price, (int, float)) and not isinstance(price, bool) else 0,
        category=data.get("category") or "Uncategorized",
        brand=data.get("brand") or None,
        videoUrl=data.get("videoUrl") or None,
        imageUrls=sanitize_image_urls({**data, "id": product_id}),
    )


async def fetch_all_products(db_client: AsyncClient) -> List[Product]:
    """Fetch every product in the catalog."""
    try:
        docs = await db_client.collection(settings.firestore_collection_products).get()
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error fetching all products from Firestore: {e}", exc_info=True)
        raise PersistenceError(f"Failed to fetch products: {e}") from e

    products = [product_from_document(doc.id, doc.to_dict() or {}) for doc in docs]
    logger.info(f"Fetched {len(products)} products")
    return products


async def fetch_product_by_id(product_id: str, db_client: AsyncClient) -> Product:
    """
    Fetch a single product.

    Raises:
        NotFoundError: If the product does not exist
    """
    try:
        doc = await db_client.collection(settings.firestore_collection_products).document(product_id).get()
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error fetching product with ID {product_id} from Firestore: {e}", exc_info=True)
        raise PersistenceError(f"Failed to fetch product {product_id}: {e}") from e

    if not doc.exists:
        logger.info(f"Product with ID {product_id} not found in Firestore.")
        raise NotFoundError(f"Product with ID {product_id} not found")

    return product_from_document(doc.id, doc.to_dict() or {})
