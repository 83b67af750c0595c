"""
gcloud_client.py
- Node pool resizing through the GKE Cluster Manager API.
- Cluster discovery: project and location come from a node provider id,
  the cluster name from the GCE metadata server unless configured.
"""

from dataclasses import dataclass

import requests
from google.cloud import container_v1
from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from node_pool_shifter.core.constants import METADATA_CLUSTER_NAME_URL, METADATA_HEADERS
from node_pool_shifter.core.errors import ClusterDiscoveryError, ResizeSubmissionError
from node_pool_shifter.core.kubernetes_client import parse_provider_id
from node_pool_shifter.core.models import OperationStatus, ResizeOperation


@dataclass(frozen=True)
class ClusterDetails:
    project: str
    location: str
    cluster: str

    def node_pool_path(self, pool):
        return f"projects/{self.project}/locations/{self.location}/clusters/{self.cluster}/nodePools/{pool}"

    def operation_path(self, operation_name):
        return f"projects/{self.project}/locations/{self.location}/operations/{operation_name}"


@retry(
    reraise=True,
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(requests.RequestException),
)
def fetch_cluster_name():
    """Read the `cluster-name` instance attribute from the GCE metadata server."""
    response = requests.get(METADATA_CLUSTER_NAME_URL, headers=METADATA_HEADERS, timeout=2)
    response.raise_for_status()
    return response.text.strip()


def discover_cluster(provider_id, cluster_name=None):
    """
    Resolve the GKE project, location and cluster this shifter operates on.

    Raises:
        ClusterDiscoveryError: if any detail cannot be resolved.
    """
    project, zone, _ = parse_provider_id(provider_id)

    if not cluster_name:
        try:
            cluster_name = fetch_cluster_name()
        except requests.RequestException as e:
            raise ClusterDiscoveryError(f"Error retrieving cluster name from metadata server: {e}") from e

    if not cluster_name:
        raise ClusterDiscoveryError("Empty cluster name returned by metadata server")

    details = ClusterDetails(project=project, location=zone, cluster=cluster_name)
    logger.info(f"[gcloud] Operating on cluster {details.cluster} in {details.project}/{details.location}")
    return details


class GKENodePoolResizer:
    def __init__(self, details, client=None):
        self.details = details
        self.client = client or container_v1.ClusterManagerClient()

    def submit_resize(self, pool, size):
        request = container_v1.SetNodePoolSizeRequest(
            name=self.details.node_pool_path(pool),
            node_count=size,
        )
        try:
            operation = self.client.set_node_pool_size(request=request)
        except Exception as e:
            raise ResizeSubmissionError(pool, size, e) from e
        return ResizeOperation(name=operation.name, target_link=operation.target_link)

    def poll_operation(self, operation):
        op = self.client.get_operation(name=self.details.operation_path(operation.name))
        if op.status == container_v1.Operation.Status.DONE:
            return OperationStatus.DONE
        return OperationStatus.PENDING
