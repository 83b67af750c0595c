"""
Shared pytest fixtures for node-pool-shifter tests.

In-memory stand-ins for the Kubernetes inventory and the GKE resizer, plus a
fake clock for the operation waiter, so the shift state machine runs without
any real infrastructure.
"""

import pytest

from node_pool_shifter.core.config import ShifterConfig
from node_pool_shifter.core.errors import InventoryQueryError, ResizeSubmissionError
from node_pool_shifter.core.models import NodePoolSnapshot, OperationStatus, ResizeOperation
from node_pool_shifter.lib import metrics


class FakeCluster:
    """Pool sizes shared by the fake inventory and the fake resizer."""

    def __init__(self, **sizes):
        self.sizes = dict(sizes)


class FakeInventory:
    def __init__(self, cluster):
        self.cluster = cluster
        self.failing_pools = set()
        self.calls = []
        self.on_list = None

    def list_nodes(self, pool):
        self.calls.append(pool)
        if self.on_list:
            self.on_list(pool)
        if pool in self.failing_pools:
            raise InventoryQueryError(pool, "connection refused")
        size = self.cluster.sizes.get(pool, 0)
        return NodePoolSnapshot.of(pool, (f"{pool}-node-{i}" for i in range(size)))


class FakeResizer:
    """Applies resizes on submit; operations report DONE unless the pool is stuck."""

    def __init__(self, cluster):
        self.cluster = cluster
        self.rejected_pools = set()
        self.stuck_pools = set()
        self.submissions = []
        self.polls = []
        self.on_submit = None

    def submit_resize(self, pool, size):
        self.submissions.append((pool, size))
        if self.on_submit:
            self.on_submit(pool, size)
        if pool in self.rejected_pools:
            raise ResizeSubmissionError(pool, size, "quota exceeded")
        self.cluster.sizes[pool] = size
        return ResizeOperation(name=f"operation-{len(self.submissions)}", target_link=f"nodePools/{pool}")

    def poll_operation(self, operation):
        self.polls.append(operation.name)
        pool = operation.target_link.split("/")[-1]
        if pool in self.stuck_pools:
            return OperationStatus.PENDING
        return OperationStatus.DONE


class FakeClock:
    """Monotonic clock advanced only by the waiter's sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def cluster():
    return FakeCluster(**{"default-pool": 4, "preemptible-pool": 2})


@pytest.fixture
def inventory(cluster):
    return FakeInventory(cluster)


@pytest.fixture
def resizer(cluster):
    return FakeResizer(cluster)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def config():
    return ShifterConfig(
        node_pool_from="default-pool",
        node_pool_to="preemptible-pool",
        node_pool_from_min_node=1,
        interval=300,
    )


@pytest.fixture
def operation():
    return ResizeOperation(name="operation-1234", target_link="nodePools/preemptible-pool")
