import cachecontrol
import requests
from google.auth import exceptions as auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from config import get_logger, settings
from service.errors import AuthenticationError, TransientError

logger = get_logger(__name__)

# Signing certificates are cached for as long as their Cache-Control header allows
_auth_request = google_requests.Request(session=cachecontrol.CacheControl(requests.Session()))


def verify_id_token(token: str, audience: str = None) -> str:
    """
    Verify a Firebase ID token and return the user ID it was issued for.

    Args:
        token: The ID token sent by the client
        audience: Firebase project ID the token must be issued for

    Returns:
        The verified user ID

    Raises:
        AuthenticationError: If the token is missing, malformed, expired or for another project
        TransientError: If Google's signing certificates could not be fetched
    """
    if not token:
        raise AuthenticationError("Authentication token is missing.")

    audience = audience or settings.firebase_project_id
    try:
        claims = id_token.verify_firebase_token(token, _auth_request, audience=audience)
    except auth_exceptions.TransportError as e:
        logger.error(f"Could not fetch token signing certificates: {e}", exc_info=True)
        raise TransientError("Token verification is temporarily unavailable") from e
    except (ValueError, auth_exceptions.GoogleAuthError) as e:
        logger.warning(f"Invalid ID token: {e}")
        raise AuthenticationError("Invalid or expired session token.") from e

    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise AuthenticationError("Token does not identify a user.")

    logger.info(f"ID token verified successfully for UID: {uid}")
    return uid
