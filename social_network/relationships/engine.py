"""
Relationship Workflow Engine

Drives the request -> accept / reject / ignore -> membership state machine
for every group kind, using a GroupPolicy as its behavioral parameter.

Each transition holds the locks of both participants' records while it
validates, mutates and saves them. Notifications, permission syncs and
charges are dispatched only after the locks are released; their failures
are logged and never undo the committed change.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..core import (
    GroupKind,
    PendingRequest,
    PersonRecord,
    RequestDirection,
    WorkflowError,
    WorkflowResult,
    IneligibleReason,
    utc_now
)
from ..groups import GroupPolicy, SideEffects
from ..integration import IntegrationPorts, NotificationEvent
from ..logging import get_logger, player_action
from ..persistence import PersonStore


class RelationshipWorkflow:
    """Request/accept/reject/ignore/remove transitions over the person store"""

    def __init__(self, store: PersonStore, policies: Dict[GroupKind, GroupPolicy],
                 ports: Optional[IntegrationPorts] = None, request_timeout_seconds: int = 0):
        self.store = store
        self.policies = policies
        self.ports = ports or IntegrationPorts()
        self.request_timeout_seconds = request_timeout_seconds
        self.logger = get_logger(__name__)

    def policy_for(self, kind: GroupKind) -> GroupPolicy:
        try:
            return self.policies[GroupKind(kind)]
        except (KeyError, ValueError):
            raise ValueError(f"No group policy registered for kind '{kind}'") from None

    # === Transitions ===

    async def send_request(self, requester: str, target: str, kind: GroupKind) -> WorkflowResult:
        """
        Send a ``kind`` request from ``requester`` to ``target``.

        A request to a player who ignores the requester is dropped and
        reported as TARGET_IGNORING; callers show the requester
        ``result.for_requester()`` so the ignore stays hidden.

        Raises:
            UnknownPersonError: if either identifier has no record
        """
        policy = self.policy_for(kind)
        sender = self.store.get(requester)
        receiver = self.store.get(target)
        effects = SideEffects()

        with player_action(sender.name):
            async with self.store.locked(sender.key, receiver.key):
                reason = await policy.check_send_request(sender, receiver)
                if reason is not None:
                    self.logger.info(f"{sender.name} may not send a {policy.kind.value} request "
                                     f"to {receiver.name}: {reason.value}")
                    return WorkflowResult.failed(WorkflowError.NOT_ELIGIBLE, policy.kind, reason)

                if policy.person_in_group(sender, receiver):
                    return WorkflowResult.failed(WorkflowError.ALREADY_IN_GROUP, policy.kind)

                outstanding = [r for r in (sender.find_request(policy.kind, receiver.key),
                                           receiver.find_request(policy.kind, sender.key))
                               if r is not None]
                if any(r.is_expired() for r in outstanding):
                    # Past its deadline but not swept yet; drop it in both directions
                    self._clear_request(sender, receiver, policy.kind)
                    self._clear_request(receiver, sender, policy.kind)
                elif outstanding:
                    return WorkflowResult.failed(WorkflowError.ALREADY_REQUESTED, policy.kind)

                if receiver.is_ignoring(sender.key):
                    self.logger.debug(f"Dropped {policy.kind.value} request from {sender.name}: "
                                      f"{receiver.name} is ignoring them")
                    return WorkflowResult.failed(WorkflowError.TARGET_IGNORING, policy.kind)

                request = PendingRequest.outbound(policy.kind, receiver.key, self.request_timeout_seconds)
                sender.add_request(request)
                receiver.add_request(request.mirrored(sender.key))
                await self._commit(sender, receiver)

                effects.notify(receiver, NotificationEvent.REQUEST_RECEIVED,
                               kind=policy.kind.value, sender=sender.name)

            self.logger.info(f"{sender.name} sent a {policy.kind.value} request to {receiver.name}")
            await self._dispatch(effects)

        return WorkflowResult.ok(policy.kind)

    async def accept_request(self, acceptor: str, sender: str, kind: GroupKind) -> WorkflowResult:
        """
        Accept the pending ``kind`` request ``sender`` sent to ``acceptor``.

        When eligibility no longer holds the request stays pending.
        """
        policy = self.policy_for(kind)
        accepting = self.store.get(acceptor)
        requesting = self.store.get(sender)
        effects = SideEffects()

        with player_action(accepting.name):
            async with self.store.locked(accepting.key, requesting.key):
                request = accepting.find_request(policy.kind, requesting.key, RequestDirection.RECEIVED)
                if request is None:
                    return WorkflowResult.failed(WorkflowError.NO_PENDING_REQUEST, policy.kind)

                if request.is_expired():
                    self._clear_request(requesting, accepting, policy.kind)
                    await self._commit(accepting, requesting)
                    return WorkflowResult.failed(WorkflowError.NO_PENDING_REQUEST, policy.kind)

                reason = await policy.check_accept_request(accepting, requesting)
                if reason is not None:
                    self.logger.info(f"{accepting.name} may not accept the {policy.kind.value} request "
                                     f"from {requesting.name}: {reason.value}")
                    return WorkflowResult.failed(WorkflowError.NOT_ELIGIBLE, policy.kind, reason)

                self._clear_request(requesting, accepting, policy.kind)
                if policy.person_in_group(requesting, accepting):
                    await self._commit(accepting, requesting)
                    return WorkflowResult.failed(WorkflowError.ALREADY_IN_GROUP, policy.kind)

                policy.add_person_to_group(requesting, accepting, effects)
                await self._commit(accepting, requesting)

                payload = {"kind": policy.kind.value, "sender": requesting.name, "acceptor": accepting.name}
                effects.notify(requesting, NotificationEvent.REQUEST_ACCEPTED, **payload)
                effects.notify(accepting, NotificationEvent.REQUEST_ACCEPTED, **payload)

            self.logger.info(f"{accepting.name} accepted the {policy.kind.value} request from {requesting.name}")
            await self._dispatch(effects)

        return WorkflowResult.ok(policy.kind)

    async def reject_request(self, acceptor: str, sender: str, kind: GroupKind) -> WorkflowResult:
        """Drop the pending ``kind`` request ``sender`` sent to ``acceptor``"""
        policy = self.policy_for(kind)
        rejecting = self.store.get(acceptor)
        requesting = self.store.get(sender)
        effects = SideEffects()

        with player_action(rejecting.name):
            async with self.store.locked(rejecting.key, requesting.key):
                if rejecting.find_request(policy.kind, requesting.key, RequestDirection.RECEIVED) is None:
                    return WorkflowResult.failed(WorkflowError.NO_PENDING_REQUEST, policy.kind)

                self._clear_request(requesting, rejecting, policy.kind)
                await self._commit(rejecting, requesting)

                effects.notify(requesting, NotificationEvent.REQUEST_REJECTED,
                               kind=policy.kind.value, acceptor=rejecting.name)

            self.logger.info(f"{rejecting.name} rejected the {policy.kind.value} request from {requesting.name}")
            await self._dispatch(effects)

        return WorkflowResult.ok(policy.kind)

    async def cancel_request(self, requester: str, target: str, kind: GroupKind) -> WorkflowResult:
        """Withdraw a request ``requester`` sent to ``target``"""
        policy = self.policy_for(kind)
        sender = self.store.get(requester)
        receiver = self.store.get(target)

        with player_action(sender.name):
            async with self.store.locked(sender.key, receiver.key):
                if sender.find_request(policy.kind, receiver.key, RequestDirection.SENT) is None:
                    return WorkflowResult.failed(WorkflowError.NO_PENDING_REQUEST, policy.kind)

                self._clear_request(sender, receiver, policy.kind)
                await self._commit(sender, receiver)

            self.logger.info(f"{sender.name} cancelled the {policy.kind.value} request to {receiver.name}")

        return WorkflowResult.ok(policy.kind)

    async def ignore(self, player: str, other: str) -> WorkflowResult:
        """
        Add ``other`` to ``player``'s ignore list and drop every pending
        request between them. Idempotent.
        """
        ignoring = self.store.get(player)
        ignored = self.store.get(other)
        if ignoring.key == ignored.key:
            return WorkflowResult.failed(WorkflowError.NOT_ELIGIBLE, reason=IneligibleReason.SELF_TARGET)

        with player_action(ignoring.name):
            async with self.store.locked(ignoring.key, ignored.key):
                ignoring.ignore(ignored.key)
                dropped = ignoring.remove_requests_with(ignored.key)
                ignored.remove_requests_with(ignoring.key)
                await self._commit(ignoring, ignored)

            self.logger.info(f"{ignoring.name} is ignoring {ignored.name} "
                             f"({len(dropped)} pending request(s) dropped)")

        return WorkflowResult.ok()

    async def unignore(self, player: str, other: str) -> WorkflowResult:
        """Remove ``other`` from ``player``'s ignore list. Idempotent."""
        ignoring = self.store.get(player)
        ignored = self.store.get(other)

        async with self.store.locked(ignoring.key):
            ignoring.unignore(ignored.key)
            await self._commit(ignoring)

        return WorkflowResult.ok()

    async def remove(self, initiator: str, target: str, kind: GroupKind) -> WorkflowResult:
        """
        Break an established relationship between ``initiator`` and ``target``.

        Either side of a friendship may end it. For child groups the child
        leaves its parent, or the parent drops that specific child.
        """
        policy = self.policy_for(kind)
        acting = self.store.get(initiator)
        other = self.store.get(target)
        effects = SideEffects()

        with player_action(acting.name):
            async with self.store.locked(acting.key, other.key):
                roles = policy.resolve_removal(acting, other)
                if roles is None:
                    return WorkflowResult.failed(WorkflowError.NOT_IN_GROUP, policy.kind)

                owner, removed = roles
                policy.remove_person_from_group(owner, removed, effects)
                await self._commit(acting, other)

                effects.notify(other, NotificationEvent.MEMBER_REMOVED,
                               kind=policy.kind.value, initiator=acting.name)

            self.logger.info(f"{acting.name} removed {other.name} from {policy.kind.value} group "
                             f"(owner {owner.name})")
            await self._dispatch(effects)

        return WorkflowResult.ok(policy.kind)

    async def prune_expired(self, now: Optional[datetime] = None) -> int:
        """
        Remove every pending request past its deadline.

        Meant to be called periodically by a scheduler. Returns the number
        of requests pruned; each requester is told theirs expired.
        """
        now = now or utc_now()
        candidates: List[Tuple[str, str, GroupKind]] = []

        for record in self.store.records():
            for request in record.pending_requests:
                if request.direction == RequestDirection.SENT and request.is_expired(now):
                    candidates.append((record.key, request.other, request.kind))
                elif request.direction == RequestDirection.RECEIVED and (
                        request.is_expired(now) or request.other not in self.store):
                    # Counterpart copy missing or already expired on this side only
                    candidates.append((request.other, record.key, request.kind))

        pruned = 0
        effects = SideEffects()
        for sender_key, receiver_key, kind in dict.fromkeys(candidates):
            sender = self.store.find(sender_key)
            receiver = self.store.find(receiver_key)

            async with self.store.locked(sender_key, receiver_key):
                sent = sender.find_request(kind, receiver_key, RequestDirection.SENT) if sender else None
                received = receiver.find_request(kind, sender_key, RequestDirection.RECEIVED) if receiver else None
                live = [r for r in (sent, received) if r is not None]
                if not live:
                    continue
                orphaned = sender is None or receiver is None
                if not orphaned and not any(r.is_expired(now) for r in live):
                    continue

                if sender is not None:
                    sender.remove_request(kind, receiver_key, RequestDirection.SENT)
                    await self._commit(sender)
                if receiver is not None:
                    receiver.remove_request(kind, sender_key, RequestDirection.RECEIVED)
                    await self._commit(receiver)
                pruned += 1

                if sender is not None:
                    effects.notify(sender, NotificationEvent.REQUEST_EXPIRED, kind=kind.value,
                                   target=receiver.name if receiver else receiver_key)

        if pruned:
            self.logger.info(f"Pruned {pruned} expired pending request(s)")
        await self._dispatch(effects)
        return pruned

    # === Queries ===

    def list_members(self, identifier: str, kind: GroupKind) -> List[str]:
        """Members of ``identifier``'s own group: friends, or children"""
        return self.policy_for(kind).members(self.store.get(identifier))

    def list_requests(self, identifier: str, kind: Optional[GroupKind] = None,
                      direction: Optional[RequestDirection] = None) -> List[PendingRequest]:
        return self.store.get(identifier).requests_of(kind, direction)

    def person_in_group(self, a: str, b: str, kind: GroupKind) -> bool:
        return self.policy_for(kind).person_in_group(self.store.get(a), self.store.get(b))

    # === Helpers ===

    @staticmethod
    def _clear_request(sender: PersonRecord, receiver: PersonRecord, kind: GroupKind):
        sender.remove_request(kind, receiver.key, RequestDirection.SENT)
        receiver.remove_request(kind, sender.key, RequestDirection.RECEIVED)

    async def _commit(self, *records: PersonRecord):
        for record in records:
            await self.store.save(record)

    async def _dispatch(self, effects: SideEffects):
        """Best-effort delivery of the side effects of a committed transition"""
        for person in effects.permission_syncs:
            try:
                await self.ports.permissions.sync_permissions(person)
            except Exception as e:
                self.logger.warning(f"Permission sync failed for {person}: {e}")

        for person, amount in effects.charges:
            try:
                player = await self.ports.resolver.resolve_online_player(person)
                if player is None:
                    self.logger.info(f"Skipped charging {amount} to {person}: player is not online")
                    continue
                if not await self.ports.economy.charge_cost(player, amount):
                    self.logger.warning(f"Economy refused to charge {amount} to {person}")
            except Exception as e:
                self.logger.warning(f"Charging {amount} to {person} failed: {e}")

        for person, event, payload in effects.notifications:
            try:
                await self.ports.notifier.notify(person, event, payload)
            except Exception as e:
                self.logger.warning(f"Notification {event.value} to {person} failed: {e}")
