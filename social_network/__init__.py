"""
Social Network: player relationship groups for multiplayer game servers.

Players form symmetric (friend) and asymmetric (child/parent) groups through
a request/accept/reject workflow, with per-group caps and optional costs.
"""

from .core import (
    GroupKind,
    RequestDirection,
    PendingRequest,
    PersonRecord,
    WorkflowError,
    IneligibleReason,
    WorkflowResult,
    UnknownPersonError
)
from .integration import IntegrationPorts, NotificationEvent
from .persistence import PersonStore
from .relationships import RelationshipWorkflow, RequestExpirySweeper
from .service import SocialNetworkService

__version__ = "0.1.0"

__all__ = [
    "GroupKind",
    "RequestDirection",
    "PendingRequest",
    "PersonRecord",
    "WorkflowError",
    "IneligibleReason",
    "WorkflowResult",
    "UnknownPersonError",
    "IntegrationPorts",
    "NotificationEvent",
    "PersonStore",
    "RelationshipWorkflow",
    "RequestExpirySweeper",
    "SocialNetworkService"
]
