"""
Data models for the social network.

A PersonRecord is pure data plus accessors: every relationship edge and
pending request is replicated into both participants' records, and all
identifiers it stores are normalized keys (see ``person_key``).
"""

from typing import List, Optional, Set
from datetime import datetime, timezone, timedelta
from enum import Enum
from pydantic import BaseModel, Field


def person_key(identifier: str) -> str:
    """Normalize a player name or ID into the case-insensitive record key"""
    return identifier.strip().lower()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GroupKind(str, Enum):
    """Relationship group kinds"""
    FRIEND = "friend"
    CHILD = "child"


class RequestDirection(str, Enum):
    """Which side of a pending request a record holds"""
    SENT = "sent"
    RECEIVED = "received"


class PendingRequest(BaseModel):
    """One side of an outstanding group request"""
    kind: GroupKind
    other: str  # normalized key of the counterpart
    direction: RequestDirection
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: Optional[datetime] = None  # None = never expires

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or utc_now()) >= self.expires_at

    def mirrored(self, owner: str) -> "PendingRequest":
        """The counterpart's copy of this request"""
        direction = (RequestDirection.RECEIVED if self.direction == RequestDirection.SENT
                     else RequestDirection.SENT)
        return PendingRequest(
            kind=self.kind,
            other=owner,
            direction=direction,
            created_at=self.created_at,
            expires_at=self.expires_at
        )

    @classmethod
    def outbound(cls, kind: GroupKind, receiver: str, timeout_seconds: int) -> "PendingRequest":
        created = utc_now()
        expires = created + timedelta(seconds=timeout_seconds) if timeout_seconds > 0 else None
        return cls(kind=kind, other=receiver, direction=RequestDirection.SENT,
                   created_at=created, expires_at=expires)


class PersonRecord(BaseModel):
    """Relationship state for one known player"""
    name: str  # display name as first seen
    friends: Set[str] = Field(default_factory=set)
    children: Set[str] = Field(default_factory=set)
    child_of: Optional[str] = None
    pending_requests: List[PendingRequest] = Field(default_factory=list)
    ignore_list: Set[str] = Field(default_factory=set)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return person_key(self.name)

    # === Friends ===

    def is_friend_with(self, other: str) -> bool:
        return person_key(other) in self.friends

    def add_friend(self, other: str):
        self.friends.add(person_key(other))

    def remove_friend(self, other: str):
        self.friends.discard(person_key(other))

    @property
    def number_friends(self) -> int:
        return len(self.friends)

    # === Children / parent ===

    def is_parent_of(self, other: str) -> bool:
        return person_key(other) in self.children

    def is_child_of(self, other: str) -> bool:
        return self.child_of is not None and self.child_of == person_key(other)

    def add_child(self, other: str):
        self.children.add(person_key(other))

    def remove_child(self, other: str):
        self.children.discard(person_key(other))

    def create_child_of(self, parent: str):
        self.child_of = person_key(parent)

    def break_child_of(self):
        self.child_of = None

    @property
    def number_children(self) -> int:
        return len(self.children)

    # === Pending requests ===

    def find_request(self, kind: GroupKind, other: str,
                     direction: Optional[RequestDirection] = None) -> Optional[PendingRequest]:
        """Find a pending request of this kind with ``other`` in the given direction (or either)"""
        other_key = person_key(other)
        for request in self.pending_requests:
            if request.kind != kind or request.other != other_key:
                continue
            if direction is None or request.direction == direction:
                return request
        return None

    def requests_of(self, kind: Optional[GroupKind] = None,
                    direction: Optional[RequestDirection] = None) -> List[PendingRequest]:
        return [
            r for r in self.pending_requests
            if (kind is None or r.kind == kind) and (direction is None or r.direction == direction)
        ]

    def add_request(self, request: PendingRequest):
        self.pending_requests.append(request)

    def remove_request(self, kind: GroupKind, other: str,
                       direction: Optional[RequestDirection] = None) -> Optional[PendingRequest]:
        request = self.find_request(kind, other, direction)
        if request is not None:
            self.pending_requests.remove(request)
        return request

    def remove_requests_with(self, other: str) -> List[PendingRequest]:
        """Drop every pending request (any kind, either direction) involving ``other``"""
        other_key = person_key(other)
        removed = [r for r in self.pending_requests if r.other == other_key]
        self.pending_requests = [r for r in self.pending_requests if r.other != other_key]
        return removed

    # === Ignore list ===

    def is_ignoring(self, other: str) -> bool:
        return person_key(other) in self.ignore_list

    def ignore(self, other: str):
        self.ignore_list.add(person_key(other))

    def unignore(self, other: str):
        self.ignore_list.discard(person_key(other))
