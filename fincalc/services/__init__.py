"""
Application services module.
"""

from fincalc.services.email import EmailService, get_email_service
from fincalc.services.subscribers import (
    SubscriberStore,
    SubscriberStoreError,
    export_csv,
    get_subscriber_store,
)

__all__ = [
    "EmailService",
    "get_email_service",
    "SubscriberStore",
    "SubscriberStoreError",
    "export_csv",
    "get_subscriber_store",
]
