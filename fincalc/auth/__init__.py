"""
Authentication for the admin area.
"""

from fincalc.auth.password import verify_admin_password
from fincalc.auth.jwt import create_admin_token, decode_admin_token
from fincalc.auth.dependencies import require_admin

__all__ = [
    "verify_admin_password",
    "create_admin_token",
    "decode_admin_token",
    "require_admin",
]
