"""Reusable API dependencies shared across v1 routes."""

from radar.api.v1.dependencies.admin import AdminCapability, AdminUser, require_admin
from radar.api.v1.dependencies.stores import (
    Dispatcher,
    Ledger,
    Queue,
    Registry,
    Store,
    Tracker,
    get_generation_engine,
    get_store,
)

__all__ = [
    "AdminCapability",
    "AdminUser",
    "Dispatcher",
    "Ledger",
    "Queue",
    "Registry",
    "Store",
    "Tracker",
    "get_generation_engine",
    "get_store",
    "require_admin",
]
