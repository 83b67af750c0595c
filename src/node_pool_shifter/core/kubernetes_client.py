"""
kubernetes_client.py
- Node inventory backed by the Kubernetes API.
- Client selection, in order:
    - in-cluster service account when KUBERNETES_SERVICE_HOST/PORT are set
    - a kubeconfig file when a path is given
    - a local `kubectl proxy` otherwise
"""

from kubernetes import client, config
from loguru import logger

from node_pool_shifter.core.constants import KUBECTL_PROXY_ENDPOINT, NODE_POOL_LABEL
from node_pool_shifter.core.errors import ClusterDiscoveryError, InventoryQueryError
from node_pool_shifter.core.models import NodePoolSnapshot


def new_core_api(host=None, port=None, kubeconfig_path=None):
    """Build a CoreV1Api for the first available connection method."""
    if host and port:
        logger.info("[kubernetes] Using in-cluster configuration")
        config.load_incluster_config()
        return client.CoreV1Api()

    if kubeconfig_path:
        logger.info(f"[kubernetes] Using kubeconfig {kubeconfig_path}")
        config.load_kube_config(config_file=kubeconfig_path)
        return client.CoreV1Api()

    logger.info(f"[kubernetes] Using kubectl proxy at {KUBECTL_PROXY_ENDPOINT}")
    configuration = client.Configuration()
    configuration.host = KUBECTL_PROXY_ENDPOINT
    return client.CoreV1Api(client.ApiClient(configuration))


def parse_provider_id(provider_id):
    """
    Split a GCE provider id into (project, zone, instance).

    >>> parse_provider_id("gce://my-project/europe-west1-b/gke-node-1")
    ('my-project', 'europe-west1-b', 'gke-node-1')
    """
    parts = (provider_id or "").split("/")
    if len(parts) < 5 or parts[0] != "gce:" or not all(parts[2:5]):
        raise ClusterDiscoveryError(f"Unexpected node provider id {provider_id!r}; are you running this in GKE?")
    return parts[2], parts[3], parts[4]


class KubernetesInventory:
    def __init__(self, api):
        self.api = api

    @classmethod
    def from_environment(cls, host=None, port=None, kubeconfig_path=None):
        return cls(new_core_api(host, port, kubeconfig_path))

    def _list(self, pool):
        selector = f"{NODE_POOL_LABEL}={pool}" if pool else None
        try:
            if selector:
                return self.api.list_node(label_selector=selector).items
            return self.api.list_node().items
        except Exception as e:
            raise InventoryQueryError(pool, e) from e

    def list_nodes(self, pool):
        """Snapshot of the nodes labeled as members of `pool`; all nodes when `pool` is empty."""
        items = self._list(pool)
        return NodePoolSnapshot.of(pool, (node.metadata.name for node in items))

    def provider_id(self):
        """Provider id of the first node of the cluster, used to locate the GKE project."""
        items = self._list("")
        if not items:
            raise ClusterDiscoveryError("Error there is no node in the cluster")
        return items[0].spec.provider_id
