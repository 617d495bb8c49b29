"""
Unit tests for person record data models
"""

import pytest
from datetime import timedelta

from social_network.core import (
    GroupKind, RequestDirection, PendingRequest, PersonRecord,
    WorkflowError, WorkflowResult, UnknownPersonError, person_key, utc_now
)


class TestPersonKey:
    """Test identifier normalization"""

    def test_case_insensitive(self):
        assert person_key("Steve") == person_key("sTEVE") == "steve"

    def test_strips_whitespace(self):
        assert person_key("  Alex ") == "alex"


class TestPersonRecord:
    """Test record accessors"""

    def test_key_is_normalized_name(self):
        record = PersonRecord(name="Notch")
        assert record.name == "Notch"
        assert record.key == "notch"

    def test_friend_accessors(self):
        record = PersonRecord(name="alice")
        record.add_friend("Bob")

        assert record.is_friend_with("bob")
        assert record.is_friend_with("BOB")
        assert record.number_friends == 1

        record.remove_friend("bob")
        assert not record.is_friend_with("Bob")
        assert record.number_friends == 0

    def test_child_accessors(self):
        parent = PersonRecord(name="Parent")
        child = PersonRecord(name="Kid")

        parent.add_child(child.name)
        child.create_child_of(parent.name)

        assert parent.is_parent_of("kid")
        assert child.is_child_of("PARENT")
        assert child.child_of == "parent"
        assert parent.number_children == 1

        child.break_child_of()
        assert child.child_of is None
        assert not child.is_child_of("parent")

    def test_remove_missing_is_noop(self):
        record = PersonRecord(name="alice")
        record.remove_friend("nobody")
        record.remove_child("nobody")
        assert record.number_friends == 0

    def test_find_request_by_direction(self):
        record = PersonRecord(name="alice")
        record.add_request(PendingRequest(kind=GroupKind.FRIEND, other="bob",
                                          direction=RequestDirection.RECEIVED))

        assert record.find_request(GroupKind.FRIEND, "Bob") is not None
        assert record.find_request(GroupKind.FRIEND, "bob", RequestDirection.RECEIVED) is not None
        assert record.find_request(GroupKind.FRIEND, "bob", RequestDirection.SENT) is None
        assert record.find_request(GroupKind.CHILD, "bob") is None

    def test_remove_requests_with_other(self):
        record = PersonRecord(name="alice")
        record.add_request(PendingRequest(kind=GroupKind.FRIEND, other="bob", direction=RequestDirection.SENT))
        record.add_request(PendingRequest(kind=GroupKind.CHILD, other="bob", direction=RequestDirection.RECEIVED))
        record.add_request(PendingRequest(kind=GroupKind.FRIEND, other="carol", direction=RequestDirection.SENT))

        removed = record.remove_requests_with("BOB")

        assert len(removed) == 2
        assert [r.other for r in record.pending_requests] == ["carol"]

    def test_requests_of_filters(self):
        record = PersonRecord(name="alice")
        record.add_request(PendingRequest(kind=GroupKind.FRIEND, other="bob", direction=RequestDirection.SENT))
        record.add_request(PendingRequest(kind=GroupKind.FRIEND, other="carol", direction=RequestDirection.RECEIVED))

        assert len(record.requests_of()) == 2
        assert len(record.requests_of(GroupKind.FRIEND, RequestDirection.SENT)) == 1
        assert record.requests_of(GroupKind.CHILD) == []

    def test_ignore_list(self):
        record = PersonRecord(name="alice")
        record.ignore("Bob")
        record.ignore("bob")

        assert record.is_ignoring("BOB")
        assert len(record.ignore_list) == 1

        record.unignore("Bob")
        assert not record.is_ignoring("bob")

    def test_json_round_trip(self):
        record = PersonRecord(name="Alice", friends={"bob"}, child_of="mum")
        record.add_request(PendingRequest.outbound(GroupKind.FRIEND, "carol", 60))

        restored = PersonRecord.model_validate(record.model_dump(mode="json"))

        assert restored == record


class TestPendingRequest:
    """Test pending request timing and mirroring"""

    def test_outbound_sets_deadline(self):
        request = PendingRequest.outbound(GroupKind.FRIEND, "bob", 30)

        assert request.direction == RequestDirection.SENT
        assert request.expires_at - request.created_at == timedelta(seconds=30)

    def test_zero_timeout_never_expires(self):
        request = PendingRequest.outbound(GroupKind.FRIEND, "bob", 0)

        assert request.expires_at is None
        assert not request.is_expired(utc_now() + timedelta(days=3650))

    def test_is_expired(self):
        request = PendingRequest.outbound(GroupKind.CHILD, "bob", 10)

        assert not request.is_expired(request.created_at)
        assert request.is_expired(request.created_at + timedelta(seconds=10))

    def test_mirrored(self):
        request = PendingRequest.outbound(GroupKind.CHILD, "bob", 10)
        mirror = request.mirrored("alice")

        assert mirror.other == "alice"
        assert mirror.direction == RequestDirection.RECEIVED
        assert mirror.kind == GroupKind.CHILD
        assert mirror.expires_at == request.expires_at


class TestWorkflowResult:
    """Test result values"""

    def test_ok_is_truthy(self):
        assert WorkflowResult.ok(GroupKind.FRIEND)
        assert not WorkflowResult.failed(WorkflowError.NOT_IN_GROUP)

    def test_for_requester_masks_ignore(self):
        result = WorkflowResult.failed(WorkflowError.TARGET_IGNORING, GroupKind.FRIEND)
        masked = result.for_requester()

        assert masked.success
        assert masked.error is None
        assert masked == WorkflowResult.ok(GroupKind.FRIEND)

    def test_for_requester_keeps_other_errors(self):
        result = WorkflowResult.failed(WorkflowError.ALREADY_REQUESTED, GroupKind.FRIEND)
        assert result.for_requester() is result

    def test_unknown_person_error(self):
        error = UnknownPersonError("Herobrine")
        assert error.player_name == "Herobrine"
        assert "Herobrine" in str(error)
