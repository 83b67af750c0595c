"""
constants.py
- Project-wide constants shared across logic and runner modules.
- Fixed timings of the shift transaction; not configurable at runtime.
"""

# --- Operation Waiting ---
OPERATION_WAIT_TIMEOUT_SECONDS = 600  # give up on a provider operation after this long
OPERATION_POLL_INTERVAL_SECONDS = 10  # base interval between operation status checks

# --- Cycle Timing ---
DEFAULT_INTERVAL_SECONDS = 300  # nominal wait between node pool checks
SHIFT_INTERVAL_SECONDS = 10  # wait after a shift attempt, provider is already busy with the cluster

# --- Kubernetes ---
NODE_POOL_LABEL = "cloud.google.com/gke-nodepool"
KUBECTL_PROXY_ENDPOINT = "http://127.0.0.1:8001"

# --- GCE Metadata ---
METADATA_CLUSTER_NAME_URL = "http://metadata.google.internal/computeMetadata/v1/instance/attributes/cluster-name"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
