"""
Narrow interfaces to the game server and its plugins.

The workflow engine only ever calls these after its own state change is
committed; implementations are expected to return promptly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable


class NotificationEvent(str, Enum):
    """Events delivered to players through the notification port"""
    REQUEST_RECEIVED = "request_received"
    REQUEST_ACCEPTED = "request_accepted"
    REQUEST_REJECTED = "request_rejected"
    REQUEST_EXPIRED = "request_expired"
    MEMBER_REMOVED = "member_removed"


@runtime_checkable
class IdentityResolver(Protocol):
    async def resolve_online_player(self, identifier: str) -> Optional[Any]:
        """Live player handle, or None when the player is not connected"""
        ...


@runtime_checkable
class NotificationPort(Protocol):
    async def notify(self, person: str, event: NotificationEvent, payload: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class PermissionSyncPort(Protocol):
    async def sync_permissions(self, person: str) -> None:
        ...


@runtime_checkable
class EconomyPort(Protocol):
    async def has_funds(self, player: Any, amount: float) -> bool:
        ...

    async def charge_cost(self, player: Any, amount: float) -> bool:
        ...


class OfflineResolver:
    """Resolver used when no game server is attached: nobody is online"""

    async def resolve_online_player(self, identifier: str) -> Optional[Any]:
        return None


class NullNotifier:
    async def notify(self, person: str, event: NotificationEvent, payload: Dict[str, Any]) -> None:
        return None


class NullPermissionSync:
    async def sync_permissions(self, person: str) -> None:
        return None


class FreeEconomy:
    """Economy used when no economy plugin is installed: everything is affordable"""

    async def has_funds(self, player: Any, amount: float) -> bool:
        return True

    async def charge_cost(self, player: Any, amount: float) -> bool:
        return True


@dataclass
class IntegrationPorts:
    """Bundle of every external collaborator the engine talks to"""
    resolver: IdentityResolver = field(default_factory=OfflineResolver)
    notifier: NotificationPort = field(default_factory=NullNotifier)
    permissions: PermissionSyncPort = field(default_factory=NullPermissionSync)
    economy: EconomyPort = field(default_factory=FreeEconomy)
