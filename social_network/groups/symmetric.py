"""
Symmetric (friend) groups: an undirected edge replicated into both records.
"""

from typing import List, Optional, Tuple

from ..core import GroupKind, PersonRecord
from ..integration import IntegrationPorts
from .base import GroupPolicy, SideEffects


class SymmetricGroupPolicy(GroupPolicy):
    """Friend-like groups with no structural rule beyond the cap"""

    def __init__(self, ports: IntegrationPorts, maximum: int = 0,
                 per_use_cost: float = 0.0, kind: GroupKind = GroupKind.FRIEND):
        super().__init__(kind, ports, maximum=maximum, per_use_cost=per_use_cost)

    def group_size(self, person: PersonRecord) -> int:
        return person.number_friends

    def members(self, person: PersonRecord) -> List[str]:
        return sorted(person.friends)

    def person_in_group(self, a: PersonRecord, b: PersonRecord) -> bool:
        return a.is_friend_with(b.key)

    def add_person_to_group(self, owner: PersonRecord, added: PersonRecord, effects: SideEffects):
        owner.add_friend(added.key)
        added.add_friend(owner.key)

        effects.sync(owner)
        effects.sync(added)
        self._charge_owner(owner, effects)

    def remove_person_from_group(self, owner: PersonRecord, removed: PersonRecord, effects: SideEffects):
        owner.remove_friend(removed.key)
        removed.remove_friend(owner.key)

        effects.sync(owner)
        effects.sync(removed)

    def resolve_removal(self, initiator: PersonRecord,
                        target: PersonRecord) -> Optional[Tuple[PersonRecord, PersonRecord]]:
        # Either side may end a friendship
        if self.person_in_group(initiator, target) or self.person_in_group(target, initiator):
            return initiator, target
        return None
