"""
Group policy interface shared by every relationship kind.

A policy decides who may request and accept membership of its kind and
performs the membership edits. Edits never call out directly: they record
the permission syncs and charges they imply in a ``SideEffects`` collector,
which the workflow engine dispatches once both records are committed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core import GroupKind, IneligibleReason, PersonRecord
from ..integration import IntegrationPorts, NotificationEvent


@dataclass
class SideEffects:
    """Port calls deferred until after a transition commits"""
    permission_syncs: List[str] = field(default_factory=list)
    charges: List[Tuple[str, float]] = field(default_factory=list)
    notifications: List[Tuple[str, NotificationEvent, Dict[str, Any]]] = field(default_factory=list)

    def sync(self, person: PersonRecord):
        if person.name not in self.permission_syncs:
            self.permission_syncs.append(person.name)

    def charge(self, person: PersonRecord, amount: float):
        self.charges.append((person.name, amount))

    def notify(self, person: PersonRecord, event: NotificationEvent, **payload: Any):
        self.notifications.append((person.name, event, payload))


class GroupPolicy(ABC):
    """Eligibility rules and membership mutations for one group kind"""

    def __init__(self, kind: GroupKind, ports: IntegrationPorts,
                 maximum: int = 0, per_use_cost: float = 0.0):
        self.kind = kind
        self.ports = ports
        self.maximum = maximum
        self.per_use_cost = per_use_cost

    # === Eligibility ===

    async def check_send_request(self, sender: PersonRecord,
                                 receiver: PersonRecord) -> Optional[IneligibleReason]:
        """Reason ``sender`` may not request ``receiver``, or None when allowed"""
        if sender.key == receiver.key:
            return IneligibleReason.SELF_TARGET
        if not await self._can_afford(sender):
            return IneligibleReason.INSUFFICIENT_FUNDS
        if self._at_maximum(sender):
            return IneligibleReason.MAXIMUM_REACHED
        return self._check_send_structure(sender, receiver)

    async def check_accept_request(self, acceptor: PersonRecord,
                                   sender: PersonRecord) -> Optional[IneligibleReason]:
        """
        Re-validate an outstanding request at accept time.

        Both records may have changed since the request was sent, so the cap
        is checked for the acceptor and for the requester whose group grows.
        """
        if not await self._can_afford(acceptor):
            return IneligibleReason.INSUFFICIENT_FUNDS
        if self._at_maximum(acceptor):
            return IneligibleReason.MAXIMUM_REACHED
        if self._at_maximum(sender):
            return IneligibleReason.OTHER_MAXIMUM_REACHED
        return self._check_accept_structure(acceptor, sender)

    async def allow_send_request(self, sender: PersonRecord, receiver: PersonRecord) -> bool:
        return await self.check_send_request(sender, receiver) is None

    async def allow_accept_request(self, acceptor: PersonRecord, sender: PersonRecord) -> bool:
        return await self.check_accept_request(acceptor, sender) is None

    def _check_send_structure(self, sender: PersonRecord,
                              receiver: PersonRecord) -> Optional[IneligibleReason]:
        return None

    def _check_accept_structure(self, acceptor: PersonRecord,
                                sender: PersonRecord) -> Optional[IneligibleReason]:
        return None

    async def _can_afford(self, person: PersonRecord) -> bool:
        if self.per_use_cost <= 0:
            return True
        player = await self.ports.resolver.resolve_online_player(person.name)
        if player is None:
            return True
        return await self.ports.economy.has_funds(player, self.per_use_cost)

    def _at_maximum(self, person: PersonRecord) -> bool:
        return self.maximum > 0 and self.group_size(person) >= self.maximum

    # === Membership ===

    @abstractmethod
    def group_size(self, person: PersonRecord) -> int:
        """Number of members in ``person``'s own group, compared against the cap"""

    @abstractmethod
    def members(self, person: PersonRecord) -> List[str]:
        """Member keys listed for ``person``"""

    @abstractmethod
    def person_in_group(self, a: PersonRecord, b: PersonRecord) -> bool:
        """Whether a and b are already related through this kind"""

    @abstractmethod
    def add_person_to_group(self, owner: PersonRecord, added: PersonRecord, effects: SideEffects):
        """Establish membership; ``owner`` is the original requester and pays the cost"""

    @abstractmethod
    def remove_person_from_group(self, owner: PersonRecord, removed: PersonRecord, effects: SideEffects):
        """Break an established membership"""

    @abstractmethod
    def resolve_removal(self, initiator: PersonRecord,
                        target: PersonRecord) -> Optional[Tuple[PersonRecord, PersonRecord]]:
        """(owner, removed) for ``initiator`` ending its relation with ``target``, or None"""

    def _charge_owner(self, owner: PersonRecord, effects: SideEffects):
        if self.per_use_cost > 0:
            effects.charge(owner, self.per_use_cost)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(kind={self.kind.value}, maximum={self.maximum}, "
                f"per_use_cost={self.per_use_cost})")
