"""
Admin password check.
"""

import secrets

from fincalc.config import get_settings


def verify_admin_password(password: str) -> bool:
    """Constant-time comparison against the configured admin password."""
    expected = get_settings().admin_password
    return secrets.compare_digest(password.encode(), expected.encode())
