"""
Test configuration and utilities
"""

import pytest
import pytest_asyncio
import logging

from fakes import make_ports, make_workflow, register_all


@pytest.fixture
def ports():
    return make_ports()


@pytest_asyncio.fixture
async def workflow(ports):
    """Workflow over an in-memory store with Alice, Bob, Carol and Dave registered"""
    wf = make_workflow(ports)
    await register_all(wf, "Alice", "Bob", "Carol", "Dave")
    return wf


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)
