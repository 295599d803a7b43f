import asyncio
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from google.cloud import firestore

from config import get_firestore_client, get_logger
from service.auth_service import verify_id_token
from service.errors import AuthenticationError, StorefrontError, ValidationError
from service.user_store import FirestoreUserStore, UserStore

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def to_http_exception(error: StorefrontError) -> HTTPException:
    """
    Map a service error to the response the caller sees.

    Field errors are returned keyed by field name. Every other error gets its
    general message; the error class and details stay in the server log.
    """
    logger.warning(f"{type(error).__name__}: {error}")
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=error.status_code,
            detail={"message": error.public_message, "fieldErrors": error.field_errors},
        )
    if isinstance(error, AuthenticationError):
        return HTTPException(
            status_code=error.status_code,
            detail=error.public_message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return HTTPException(status_code=error.status_code, detail=error.public_message)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the Bearer ID token on the request to a verified user ID."""
    try:
        if credentials is None:
            raise AuthenticationError("Authentication token is missing.")
        # Blocking: certificate fetch and signature check
        return await asyncio.to_thread(verify_id_token, credentials.credentials)
    except StorefrontError as e:
        raise to_http_exception(e)


def get_user_store(db: firestore.AsyncClient = Depends(get_firestore_client)) -> UserStore:
    return FirestoreUserStore(db)
