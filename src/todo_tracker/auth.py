from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .access import Caller
from .settings import Settings

logger = logging.getLogger(__name__)

_security = HTTPBasic(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


# PUBLIC_INTERFACE
def get_current_caller(
    request: Request,
    creds: Optional[HTTPBasicCredentials] = Depends(_security),
) -> Caller:
    """
    Resolve the authenticated caller from HTTP Basic credentials.

    Credentials are checked against the AUTH_USERS table of the application
    settings. The username becomes the caller identity and the configured
    roles its role set.

    Raises:
        HTTPException(401) if credentials are missing or invalid.
    """
    if creds is None:
        raise _unauthorized("Not authenticated")

    settings: Settings = request.app.state.settings
    account = settings.users.get(creds.username)
    if account is None or not secrets.compare_digest(
        creds.password.encode("utf-8"), account.password.encode("utf-8")
    ):
        logger.warning("Rejected credentials for %r", creds.username)
        raise _unauthorized("Invalid authentication credentials")

    return Caller(identity=creds.username, roles=account.roles)
