from fastapi import APIRouter, HTTPException, Depends, Path, Body
from google.cloud import firestore

from models.schemas import User, CreateAccountRequest, AddressUpdateRequest, AddressBookResponse
from service.account_service import create_account, get_user_profile
from service.address_book import default_address_id
from service.address_service import get_shipping_addresses, update_shipping_address
from service.errors import StorefrontError
from service.user_store import UserStore
from config import get_firestore_client, get_logger, settings
from router.dependencies import get_current_user_id, get_user_store, to_http_exception

logger = get_logger(__name__)

router = APIRouter(
    prefix="/profile",
    tags=["profile"],
)

@router.post("", response_model=User, status_code=201)
async def create_account_route(
    request: CreateAccountRequest = Body(..., description="Sign-up data"),
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Create the profile for the signed-in user.

    This endpoint:
    1. Takes the sign-up data, including the first shipping address
    2. Creates the user document in Firestore for the verified user ID
    3. Returns the created User object

    The sign-up address is stored as the only shipping address and marked
    as the default.
    """
    try:
        return await create_account(user_id, request, db)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating user account: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while creating the user account")

@router.get("", response_model=User)
async def get_profile_route(
    user_id: str = Depends(get_current_user_id),
    db: firestore.AsyncClient = Depends(get_firestore_client)
):
    """
    Get the signed-in user's profile.
    """
    try:
        return await get_user_profile(user_id, db)
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving the user")

@router.get("/addresses", response_model=AddressBookResponse)
async def get_addresses_route(
    user_id: str = Depends(get_current_user_id),
    store: UserStore = Depends(get_user_store)
):
    """
    Get the signed-in user's shipping addresses.
    """
    try:
        addresses = await get_shipping_addresses(user_id, store)
        return AddressBookResponse(shippingAddresses=addresses, defaultAddressId=default_address_id(addresses))
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting shipping addresses: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while retrieving the addresses")

@router.put("/addresses/{address_id}", response_model=AddressBookResponse)
async def update_address_route(
    address_id: str = Path(..., description="The ID of the address to update"),
    update: AddressUpdateRequest = Body(..., description="The new address fields"),
    user_id: str = Depends(get_current_user_id),
    store: UserStore = Depends(get_user_store)
):
    """
    Update one of the signed-in user's shipping addresses.

    This endpoint:
    1. Validates the new address fields (errors are returned per field)
    2. Reads the user's addresses, applies the edit and re-derives the default
    3. Writes the addresses back only if nothing else changed the user in between,
       retrying from a fresh read on conflict
    4. Returns the committed addresses

    Setting isDefault makes this address the only default. Clearing it on the
    current default hands the default to the first address.
    """
    try:
        addresses = await update_shipping_address(
            user_id=user_id,
            address_id=address_id,
            edit=update,
            store=store,
            max_attempts=settings.address_update_max_attempts,
        )
        return AddressBookResponse(shippingAddresses=addresses, defaultAddressId=default_address_id(addresses))
    except StorefrontError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error in address update for user {user_id} address {address_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update address. Please try again.")
