from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from lovculator.core.security import IdentityContext, identity_from_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> IdentityContext:
    # Missing or bad tokens give an anonymous context; routes that need a
    # caller raise UnauthenticatedError through require_user_id()
    if credentials is None:
        return identity_from_token(None)
    return identity_from_token(credentials.credentials)
