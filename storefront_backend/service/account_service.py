import re
import secrets
from datetime import datetime

from google.api_core import exceptions
from google.cloud.firestore_v1 import AsyncClient, SERVER_TIMESTAMP

from config import get_logger, settings
from models.schemas import User, CreateAccountRequest
from service.errors import ConflictError, NotFoundError, PersistenceError, ValidationError

logger = get_logger(__name__)

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def generate_address_id() -> str:
    """Random 20 character ID in the style of Firestore auto IDs."""
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    return "".join(secrets.choice(alphabet) for _ in range(20))


async def create_account(user_id: str, request: CreateAccountRequest, db_client: AsyncClient) -> User:
    """
    Create the profile document for a newly signed-up user.

    The sign-up address becomes the first shipping address and the default.

    Args:
        user_id: The verified ID of the new user
        request: The sign-up data
        db_client: Firestore client

    Returns:
        The created User

    Raises:
        ValidationError: If the email is malformed
        ConflictError: If a profile already exists for the user
        PersistenceError: If the document could not be written
    """
    if not re.match(EMAIL_PATTERN, request.email):
        raise ValidationError({"email": ["Invalid email format"]})

    display_name = f"{request.firstName} {request.lastName}"
    default_shipping_address = {
        "id": generate_address_id(),
        "street": request.street,
        "city": request.city,
        "state": request.state,
        "zip": request.zip,
        "country": request.country,
        "isDefault": True,
    }

    user_data = {
        "uid": user_id,
        "firstName": request.firstName,
        "lastName": request.lastName,
        "displayName": display_name,
        "email": request.email,
        "countryCode": request.phoneCountryCode,
        "phoneNumber": request.phoneNumber,
        "shippingAddresses": [default_shipping_address],
        "wishlistedProductIds": [],
        "createdAt": SERVER_TIMESTAMP,
    }

    user_ref = db_client.collection(settings.firestore_collection_users).document(user_id)
    try:
        # create() fails if the document already exists
        await user_ref.create(user_data)
    except exceptions.AlreadyExists as e:
        raise ConflictError(f"A profile already exists for user {user_id}") from e
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error creating user account {user_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to create user account: {e}") from e

    logger.info(f"Created new user account with ID {user_id}")

    # SERVER_TIMESTAMP is a sentinel; report the local time instead of re-reading
    return User(**{**user_data, "createdAt": datetime.now()})


async def get_user_profile(user_id: str, db_client: AsyncClient) -> User:
    """
    Get a user profile by ID from Firestore.

    Raises:
        NotFoundError: If the user has no profile document
        PersistenceError: If the read failed
    """
    user_ref = db_client.collection(settings.firestore_collection_users).document(user_id)
    try:
        user_doc = await user_ref.get()
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Error getting user {user_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to get user: {e}") from e

    if not user_doc.exists:
        raise NotFoundError(f"User with ID {user_id} not found")

    user_data = user_doc.to_dict()
    user_data.setdefault("uid", user_id)
    return User(**user_data)
