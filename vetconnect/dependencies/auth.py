from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from vetconnect.core.constants import UserRole
from vetconnect.core.security import decode_token

security = HTTPBearer()


def get_current_user_from_token(token: str) -> dict:
    """Verify an identity token string and return its payload.

    The identity provider owns users and sessions; all we need is a valid
    signature and a subject.
    """
    payload = decode_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    return payload


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
):
    """Verify bearer token and return current user"""
    return get_current_user_from_token(credentials.credentials)


async def get_current_clinic_owner(
    current_user=Depends(get_current_user),
):
    """Verify current user is a clinic owner"""
    if current_user.get("user_type") != UserRole.CLINIC_OWNER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only clinic owners can access this resource",
        )
    return current_user
