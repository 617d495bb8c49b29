"""
Integration tests for the relationship workflow.

Runs complete request/accept/remove flows through the service with
flat-file storage, then reloads the store from disk to check that both
sides of every relationship were persisted.
"""

import pytest

from social_network import SocialNetworkService
from social_network.config import ConfigManager
from social_network.core import GroupKind, RequestDirection, WorkflowError
from social_network.integration import NotificationEvent

from fakes import make_ports


class TestRelationshipsIntegration:
    """Integration tests for the complete relationship system"""

    @pytest.fixture(autouse=True)
    def setup_environment(self, tmp_path, monkeypatch):
        self.data_dir = tmp_path / "players"
        monkeypatch.setenv("STORAGE_DATA_DIR", str(self.data_dir))
        monkeypatch.setenv("FRIEND_MAXIMUM", "2")
        monkeypatch.setenv("FRIEND_PER_USE_COST", "10")
        monkeypatch.setenv("CHILD_MAXIMUM", "1")
        monkeypatch.setenv("REQUEST_SWEEP_ENABLED", "false")
        self.config = ConfigManager(env_file_path="/nonexistent/.env")
        self.ports = make_ports(
            online={"Alice", "Bob", "Carol"},
            balances={"Alice": 100, "Bob": 100, "Carol": 100}
        )

    async def start_service(self):
        service = SocialNetworkService(self.config, self.ports)
        await service.start()
        for name in ("Alice", "Bob", "Carol", "Dave"):
            await service.register_player(name)
        return service

    @pytest.mark.asyncio
    async def test_friend_flow_persists_both_sides(self):
        service = await self.start_service()
        wf = service.workflow

        assert (await wf.send_request("Alice", "Bob", GroupKind.FRIEND)).success
        assert (await wf.accept_request("Bob", "Alice", GroupKind.FRIEND)).success
        assert (await wf.send_request("Carol", "Alice", GroupKind.FRIEND)).success
        await service.stop()

        reloaded = await self.start_service()
        rwf = reloaded.workflow

        assert rwf.list_members("alice", GroupKind.FRIEND) == ["bob"]
        assert rwf.list_members("bob", GroupKind.FRIEND) == ["alice"]
        pending = rwf.list_requests("alice", GroupKind.FRIEND, RequestDirection.RECEIVED)
        assert [r.other for r in pending] == ["carol"]

        assert (await rwf.accept_request("Alice", "Carol", GroupKind.FRIEND)).success
        assert rwf.list_members("alice", GroupKind.FRIEND) == ["bob", "carol"]
        assert self.ports.economy.charges == [("alice", 10), ("carol", 10)]
        await reloaded.stop()

    @pytest.mark.asyncio
    async def test_family_tree_flow(self):
        service = await self.start_service()
        wf = service.workflow

        assert (await wf.send_request("Alice", "Bob", GroupKind.CHILD)).success
        assert (await wf.send_request("Alice", "Carol", GroupKind.CHILD)).success
        assert (await wf.accept_request("Bob", "Alice", GroupKind.CHILD)).success

        # Alice reached her single-child cap while Carol's request was pending
        result = await wf.accept_request("Carol", "Alice", GroupKind.CHILD)
        assert result.error == WorkflowError.NOT_ELIGIBLE

        assert (await wf.remove("Bob", "Alice", GroupKind.CHILD)).success
        assert (await wf.accept_request("Carol", "Alice", GroupKind.CHILD)).success
        await service.stop()

        reloaded = await self.start_service()
        alice = reloaded.store.get("alice")
        assert alice.children == {"carol"}
        assert reloaded.store.get("carol").child_of == "alice"
        assert reloaded.store.get("bob").child_of is None
        await reloaded.stop()

    @pytest.mark.asyncio
    async def test_ignore_flow(self):
        service = await self.start_service()
        wf = service.workflow

        await wf.send_request("Dave", "Alice", GroupKind.FRIEND)
        assert (await wf.ignore("Alice", "Dave")).success

        result = await wf.send_request("Dave", "Alice", GroupKind.CHILD)
        assert result.for_requester().success
        assert wf.list_requests("alice") == []
        assert self.ports.notifier.events_for("alice") == [NotificationEvent.REQUEST_RECEIVED]
        await service.stop()

        reloaded = await self.start_service()
        assert reloaded.store.get("alice").is_ignoring("dave")
        await reloaded.stop()
