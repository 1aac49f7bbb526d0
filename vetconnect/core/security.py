from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import secrets
from vetconnect.core.config import settings


def create_access_token(
    owner_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    user_type: str = "clinic_owner",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Mint an identity token.

    The identity provider normally issues these; the helper exists for local
    development and tests.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": str(owner_id),
        "name": name,
        "email": email,
        "user_type": user_type,
        "exp": expire,
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return None
