"""
External collaborator interfaces (identity, notifications, permissions, economy).
"""

from .ports import (
    NotificationEvent,
    IdentityResolver,
    NotificationPort,
    PermissionSyncPort,
    EconomyPort,
    OfflineResolver,
    NullNotifier,
    NullPermissionSync,
    FreeEconomy,
    IntegrationPorts
)

__all__ = [
    "NotificationEvent",
    "IdentityResolver",
    "NotificationPort",
    "PermissionSyncPort",
    "EconomyPort",
    "OfflineResolver",
    "NullNotifier",
    "NullPermissionSync",
    "FreeEconomy",
    "IntegrationPorts"
]
