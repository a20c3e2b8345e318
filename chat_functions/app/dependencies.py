import asyncio
import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth

from .clients import Clients
from .config import settings
from .errors import CallableError, ErrorKind

logger = logging.getLogger(__name__)

# Callable requests may arrive without a token; the operation decides what that means
security = HTTPBearer(scheme_name='Authorization', auto_error=False)


def get_clients(request: Request) -> Clients:
    return request.app.state.clients


async def get_caller_uid(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[str]:
    """
    Resolve the caller's uid from a Firebase ID token.

    Returns None when no token was sent. In the DEV environment the raw token
    is taken as the uid so the API can be exercised without Firebase Auth.

    Raises:
        CallableError(unauthenticated): If a token was sent but is not valid
    """
    if credentials is None:
        return None
    token = credentials.credentials

    if settings.is_dev_environment:
        logger.info(f"Dev caller token: {token}")
        return token

    try:
        decoded = await asyncio.to_thread(auth.verify_id_token, token, check_revoked=True)
    except ValueError:
        raise CallableError(ErrorKind.UNAUTHENTICATED, "Invalid token format")
    except auth.ExpiredIdTokenError:
        raise CallableError(ErrorKind.UNAUTHENTICATED, "Token has expired")
    except auth.RevokedIdTokenError:
        raise CallableError(ErrorKind.UNAUTHENTICATED, "Token has been revoked")
    except auth.UserDisabledError:
        raise CallableError(ErrorKind.UNAUTHENTICATED, "User account is disabled")
    except auth.InvalidIdTokenError:
        raise CallableError(ErrorKind.UNAUTHENTICATED, "Invalid ID token")
    except auth.CertificateFetchError:
        raise CallableError(ErrorKind.INTERNAL, "Error fetching certificates")
    return decoded.get('uid')
