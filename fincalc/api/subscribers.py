"""
Email capture and subscriber admin endpoints.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Response
from pydantic import BaseModel, ConfigDict, EmailStr

from fincalc.auth.dependencies import require_admin
from fincalc.auth.jwt import create_admin_token
from fincalc.auth.password import verify_admin_password
from fincalc.config import get_settings
from fincalc.services.email import EmailService, get_email_service
from fincalc.services.subscribers import (
    SubscriberStore,
    SubscriberStoreError,
    export_csv,
    get_subscriber_store,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# === Pydantic Schemas ===

class SubscribeRequest(BaseModel):
    """Captured email plus whatever calculator inputs came with it."""

    model_config = ConfigDict(extra="allow")

    email: EmailStr
    source: Optional[str] = None
    path: Optional[str] = None


class SubscribeResponse(BaseModel):
    success: bool
    message: str


class SubscriberListResponse(BaseModel):
    subscribers: List[Dict[str, Any]]
    count: int


class AdminAuthRequest(BaseModel):
    password: str


class AdminAuthResponse(BaseModel):
    success: bool
    access_token: str
    token_type: str = "bearer"


# === Endpoints ===

@router.post("/subscribe", response_model=SubscribeResponse)
def subscribe(
    request: SubscribeRequest,
    store: SubscriberStore = Depends(get_subscriber_store),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Store a subscriber, or refresh an existing one.

    Extra fields in the body are kept on the record as-is.
    """
    try:
        record, created = store.append_or_update(
            email=request.email,
            source=request.source,
            path=request.path,
            metadata=request.model_extra,
        )
    except SubscriberStoreError as e:
        logger.error(f"Subscription error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process subscription",
        )

    if created:
        email_service.send_subscription_email(
            record["email"], source=request.source, page_path=request.path
        )

    return SubscribeResponse(
        success=True,
        message="Successfully subscribed" if created else "Subscription updated",
    )


@router.post("/admin/auth", response_model=AdminAuthResponse)
def admin_auth(request: AdminAuthRequest, response: Response):
    """Exchange the admin password for an access token (also set as a cookie)."""
    if not verify_admin_password(request.password):
        logger.warning("Rejected admin login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    settings = get_settings()
    access_token = create_admin_token()
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=settings.app_env == "production",
        samesite="lax",
        max_age=settings.jwt_access_token_expire_minutes * 60,
    )

    return AdminAuthResponse(success=True, access_token=access_token)


def _load_subscribers(store: SubscriberStore) -> List[Dict[str, Any]]:
    try:
        return store.list()
    except SubscriberStoreError as e:
        logger.error(f"Error reading subscribers: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read subscribers",
        )


@router.get("/subscribers", response_model=SubscriberListResponse)
def list_subscribers(
    store: SubscriberStore = Depends(get_subscriber_store),
    _admin: Dict[str, Any] = Depends(require_admin),
):
    """List every subscriber (admin only)."""
    subscribers = _load_subscribers(store)
    return SubscriberListResponse(subscribers=subscribers, count=len(subscribers))


@router.get("/subscribers/export")
def export_subscribers(
    store: SubscriberStore = Depends(get_subscriber_store),
    _admin: Dict[str, Any] = Depends(require_admin),
):
    """Download subscribers as CSV (admin only)."""
    csv_text = export_csv(_load_subscribers(store))
    filename = f"subscribers-{date.today().isoformat()}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
