"""
Group policies and the kind -> policy dispatch table.

New relationship kinds are added as a GroupKind member plus an entry in
``build_policies``; the workflow engine only ever sees the GroupPolicy interface.
"""

from typing import Dict

from ..config import ConfigManager
from ..core import GroupKind
from ..integration import IntegrationPorts
from .base import GroupPolicy, SideEffects
from .symmetric import SymmetricGroupPolicy
from .asymmetric import AsymmetricGroupPolicy


def build_policies(config: ConfigManager, ports: IntegrationPorts) -> Dict[GroupKind, GroupPolicy]:
    """Create one policy per group kind from the configured caps and costs"""
    return {
        GroupKind.FRIEND: SymmetricGroupPolicy(
            ports,
            maximum=config.friend.maximum_friends,
            per_use_cost=config.friend.per_use_cost
        ),
        GroupKind.CHILD: AsymmetricGroupPolicy(
            ports,
            maximum=config.child.maximum_children,
            per_use_cost=config.child.per_use_cost
        ),
    }


__all__ = [
    "GroupPolicy",
    "SideEffects",
    "SymmetricGroupPolicy",
    "AsymmetricGroupPolicy",
    "build_policies"
]
