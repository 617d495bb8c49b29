"""
Core data models and error taxonomy for the social network.
"""

from .models import (
    GroupKind,
    RequestDirection,
    PendingRequest,
    PersonRecord,
    person_key,
    utc_now
)
from .errors import (
    WorkflowError,
    IneligibleReason,
    WorkflowResult,
    SocialNetworkError,
    UnknownPersonError
)

__all__ = [
    "GroupKind",
    "RequestDirection",
    "PendingRequest",
    "PersonRecord",
    "person_key",
    "utc_now",
    "WorkflowError",
    "IneligibleReason",
    "WorkflowResult",
    "SocialNetworkError",
    "UnknownPersonError"
]
