"""
Admin access tokens using python-jose.

There is a single admin identity; a token is valid when it decodes with the
configured secret, has not expired and carries sub="admin", type="access".
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from jose import jwt, JWTError

from fincalc.config import get_settings

ADMIN_SUBJECT = "admin"
ACCESS_TOKEN_TYPE = "access"


def create_admin_token(expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue an admin access token.

    Args:
        expires_delta: Lifetime; defaults to JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": ADMIN_SUBJECT,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_admin_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid admin token, or None."""
    settings = get_settings()
    try:
        claims = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    if claims.get("sub") != ADMIN_SUBJECT or claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return claims
