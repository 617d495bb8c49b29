"""
Asymmetric (child/parent) groups: a directed edge where the owner lists
the member in ``children`` and the member points back through ``child_of``.
A person has at most one parent.
"""

from typing import List, Optional, Tuple

from ..core import GroupKind, IneligibleReason, PersonRecord
from ..integration import IntegrationPorts
from .base import GroupPolicy, SideEffects


class AsymmetricGroupPolicy(GroupPolicy):
    """Child-like groups with the single-parent rule"""

    def __init__(self, ports: IntegrationPorts, maximum: int = 0,
                 per_use_cost: float = 0.0, kind: GroupKind = GroupKind.CHILD):
        super().__init__(kind, ports, maximum=maximum, per_use_cost=per_use_cost)

    def group_size(self, person: PersonRecord) -> int:
        return person.number_children

    def members(self, person: PersonRecord) -> List[str]:
        return sorted(person.children)

    def _check_send_structure(self, sender: PersonRecord,
                              receiver: PersonRecord) -> Optional[IneligibleReason]:
        # The receiver would become a child, so it must not have a parent yet
        if receiver.child_of is not None:
            return IneligibleReason.ALREADY_HAS_PARENT
        return None

    def _check_accept_structure(self, acceptor: PersonRecord,
                                sender: PersonRecord) -> Optional[IneligibleReason]:
        if acceptor.child_of is not None:
            return IneligibleReason.ALREADY_HAS_PARENT
        return None

    def person_in_group(self, a: PersonRecord, b: PersonRecord) -> bool:
        # The reverse edge counts too, otherwise two players could parent each other
        return a.is_parent_of(b.key) or b.is_parent_of(a.key)

    def add_person_to_group(self, owner: PersonRecord, added: PersonRecord, effects: SideEffects):
        owner.add_child(added.key)
        added.create_child_of(owner.key)

        effects.sync(owner)
        effects.sync(added)
        self._charge_owner(owner, effects)

    def remove_person_from_group(self, owner: PersonRecord, removed: PersonRecord, effects: SideEffects):
        owner.remove_child(removed.key)
        if removed.is_child_of(owner.key):
            removed.break_child_of()

        effects.sync(owner)
        effects.sync(removed)

    def resolve_removal(self, initiator: PersonRecord,
                        target: PersonRecord) -> Optional[Tuple[PersonRecord, PersonRecord]]:
        # A child leaving its parent
        if initiator.is_child_of(target.key) or target.is_parent_of(initiator.key):
            return target, initiator
        # A parent dropping one of its children
        if initiator.is_parent_of(target.key) or target.is_child_of(initiator.key):
            return initiator, target
        return None
