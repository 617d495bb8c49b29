"""
Workflow error taxonomy.

Business-rule outcomes are values (``WorkflowResult``); only an unresolvable
player identifier raises (``UnknownPersonError``).
"""

from typing import Optional
from enum import Enum
from pydantic import BaseModel

from .models import GroupKind


class WorkflowError(str, Enum):
    """Why a workflow transition did not happen"""
    NOT_ELIGIBLE = "not_eligible"
    ALREADY_IN_GROUP = "already_in_group"
    ALREADY_REQUESTED = "already_requested"
    NO_PENDING_REQUEST = "no_pending_request"
    NOT_IN_GROUP = "not_in_group"
    TARGET_IGNORING = "target_ignoring"  # internal only, see WorkflowResult.for_requester


class IneligibleReason(str, Enum):
    """Detail attached to NOT_ELIGIBLE results"""
    INSUFFICIENT_FUNDS = "insufficient_funds"
    MAXIMUM_REACHED = "maximum_reached"
    OTHER_MAXIMUM_REACHED = "other_maximum_reached"
    ALREADY_HAS_PARENT = "already_has_parent"
    SELF_TARGET = "self_target"


class WorkflowResult(BaseModel):
    """Outcome of one workflow transition"""
    success: bool
    kind: Optional[GroupKind] = None
    error: Optional[WorkflowError] = None
    reason: Optional[IneligibleReason] = None

    @classmethod
    def ok(cls, kind: Optional[GroupKind] = None) -> "WorkflowResult":
        return cls(success=True, kind=kind)

    @classmethod
    def failed(cls, error: WorkflowError, kind: Optional[GroupKind] = None,
               reason: Optional[IneligibleReason] = None) -> "WorkflowResult":
        return cls(success=False, kind=kind, error=error, reason=reason)

    def for_requester(self) -> "WorkflowResult":
        """The view shown to the requesting player; an ignored request looks sent"""
        if self.error == WorkflowError.TARGET_IGNORING:
            return WorkflowResult.ok(self.kind)
        return self

    def __bool__(self) -> bool:
        return self.success


class SocialNetworkError(Exception):
    """Base class for social network exceptions"""


class UnknownPersonError(SocialNetworkError):
    """Raised when an identifier does not resolve to any person record"""

    def __init__(self, player_name: str):
        super().__init__(f"Player '{player_name}' is not in the social network")
        self.player_name = player_name
