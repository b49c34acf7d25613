"""
FastAPI dependencies for the admin area.
"""

from typing import Optional, Dict, Any

from fastapi import HTTPException, status, Request

from fincalc.auth.jwt import decode_admin_token


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract the admin JWT from a request.

    Checks the Authorization header (Bearer token) first, then the
    access_token cookie set by /api/admin/auth.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token

    return request.cookies.get("access_token")


async def require_admin(request: Request) -> Dict[str, Any]:
    """
    Require a valid admin access token.

    Raises HTTPException 401 if the token is missing, invalid or expired.
    """
    token = get_token_from_request(request)
    claims = decode_admin_token(token) if token else None

    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return claims
