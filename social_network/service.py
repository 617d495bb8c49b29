"""
Social Network service

Wires configuration, the person store, the external ports, the group
policies and the workflow engine together, and owns the lifecycle of the
background request expiry sweep. The command dispatcher of the game server
talks to ``service.workflow`` after registering players on join.
"""

from typing import Optional

from .config import ConfigManager, get_config
from .core import PersonRecord
from .groups import build_policies
from .integration import IntegrationPorts
from .logging import get_logger
from .persistence import PersonStore
from .relationships import RelationshipWorkflow, RequestExpirySweeper


class SocialNetworkService:
    """Application-level entry point for the relationship plugin"""

    def __init__(self, config: Optional[ConfigManager] = None,
                 ports: Optional[IntegrationPorts] = None,
                 store: Optional[PersonStore] = None):
        self.config = config or get_config()
        self.ports = ports or IntegrationPorts()
        self.logger = get_logger(__name__)

        if store is None:
            data_dir = self.config.storage.data_dir if self.config.storage.persist else None
            store = PersonStore(data_dir)
        self.store = store

        self.policies = build_policies(self.config, self.ports)
        self.workflow = RelationshipWorkflow(
            self.store,
            self.policies,
            self.ports,
            request_timeout_seconds=self.config.requests.request_timeout_seconds
        )
        self.sweeper = RequestExpirySweeper(
            self.workflow,
            interval_seconds=self.config.requests.sweep_interval_seconds
        )

    async def start(self):
        """Load stored records and start background work"""
        await self.store.load()
        # Drop whatever expired while the server was down
        await self.workflow.prune_expired()
        if self.config.requests.sweep_enabled and self.config.requests.request_timeout_seconds > 0:
            await self.sweeper.start()
        self.logger.info("Social network service started", extra={"summary": str(self.config.get_summary())})

    async def stop(self):
        await self.sweeper.stop()
        self.logger.info("Social network service stopped")

    async def register_player(self, name: str) -> PersonRecord:
        """Make sure a record exists for a player, e.g. when they join the server"""
        return await self.store.register(name)

    async def __aenter__(self) -> "SocialNetworkService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
